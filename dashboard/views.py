# dashboard/views.py

from django.views.generic import TemplateView

from core.mixins import MockUserMixin


class HomeView(MockUserMixin, TemplateView):
    """Account overview with the entry point into the cancellation flow."""
    template_name = 'dashboard/home.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        user = self.request.user
        subscription = user.get_subscription()

        context.update({
            'account': user,
            'subscription': subscription,
            'latest_cancellation': user.cancellations.order_by('-created_at').first(),
        })
        return context
