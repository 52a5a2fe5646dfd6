from django.urls import path
from . import views

app_name = 'billing'

urlpatterns = [
    # Wizard (GET renders the current step, POST advances it)
    path('', views.CancelFlowView.as_view(), name='flow'),

    # Start over, or leave the flow
    path('reset/', views.reset_flow, name='reset'),
]
