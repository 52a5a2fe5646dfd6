# core/urls.py
from django.contrib import admin
from django.urls import path, include
from dashboard.views import HomeView
from billing import views as billing_views

urlpatterns = [
    path('admin/', admin.site.urls),

    # Cancellation wizard
    path('cancel/', include('billing.urls', namespace='billing')),

    # JSON endpoint used by external clients
    path('api/cancel/', billing_views.cancel_api, name='cancel_api'),

    path('', HomeView.as_view(), name='home'),
]
