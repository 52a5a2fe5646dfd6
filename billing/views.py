# billing/views.py
import json
import logging

from django.conf import settings
from django.contrib import messages
from django.db import DatabaseError
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST
from django.views.generic import View
from django_htmx.http import HttpResponseClientRedirect
from django_ratelimit.decorators import ratelimit

from core.mixins import MockUserMixin
from . import flow
from .forms import (
    CancellationRequestForm,
    DownsellRequestForm,
    ReasonForm,
    VariantRequestForm,
)
from .models import Subscription
from .services import CancellationService

logger = logging.getLogger(__name__)

SESSION_KEY = 'cancel_flow'

# ------------------------------------------------------------------
# Wizard
# ------------------------------------------------------------------
class CancelFlowView(MockUserMixin, View):
    """
    Walks the user through the cancellation steps. State lives in the
    session; HTMX requests get the step partial, others the full page.
    """
    template_name = 'billing/cancel/flow.html'
    partial_template_name = 'billing/cancel/_step.html'

    def get_state(self):
        state = self.request.session.get(SESSION_KEY)
        if not state:
            # Variant is pinned for the lifetime of this flow
            variant = CancellationService.get_or_assign_variant(self.request.user.pk)
            state = {
                'step': flow.INITIAL,
                'variant': str(variant),
                'reason': '',
                'accepted_downsell': False,
            }
            self.save_state(state)
        return dict(state)

    def save_state(self, state):
        self.request.session[SESSION_KEY] = state

    def get(self, request, *args, **kwargs):
        # A finished run is not resumed; coming back starts a new one
        state = request.session.get(SESSION_KEY)
        if state and state.get('step') in flow.TERMINAL_STEPS:
            request.session.pop(SESSION_KEY)
        return self.render_step(self.get_state())

    def post(self, request, *args, **kwargs):
        state = self.get_state()
        event = request.POST.get('event')

        try:
            target = flow.next_step(state['step'], event, state['variant'])
        except flow.InvalidTransition as e:
            logger.warning(f"Cancel flow for user {request.user.pk}: {e}")
            messages.warning(request, "That action isn't available at this step.")
            return self.render_step(state)

        if event == flow.SELECT_REASON:
            form = ReasonForm(request.POST)
            if not form.is_valid():
                return self.render_step(state, reason_form=form)
            state['reason'] = form.cleaned_data['reason']

        elif event == flow.DECLINE_DOWNSELL:
            state['accepted_downsell'] = False

        elif event in (flow.ACCEPT_DOWNSELL, flow.CONFIRM_CANCELLATION):
            if not self.persist(event, state):
                # Stay on the same step
                return self.render_step(state)
            if event == flow.ACCEPT_DOWNSELL:
                state['accepted_downsell'] = True

        state['step'] = target
        self.save_state(state)
        return self.render_step(state)

    def persist(self, event, state):
        user = self.request.user
        subscription = user.get_subscription()
        subscription_id = subscription.pk if subscription else None

        try:
            if event == flow.ACCEPT_DOWNSELL:
                CancellationService.accept_downsell(
                    user.pk, subscription_id, state['variant'], state['reason']
                )
            else:
                CancellationService.cancel_subscription(
                    user.pk,
                    subscription_id,
                    state['variant'],
                    state['reason'],
                    state['accepted_downsell'],
                )
        except (DatabaseError, Subscription.DoesNotExist):
            logger.exception(f"Cancel flow '{event}' failed for user {user.pk}")
            messages.error(self.request, "Something went wrong. Please try again.")
            return False
        return True

    def render_step(self, state, reason_form=None):
        subscription = self.request.user.get_subscription()
        position, total = flow.progress(state['step'], state['variant'])

        context = {
            'step': state['step'],
            'variant': state['variant'],
            'reason': state['reason'],
            'subscription': subscription,
            'discount': settings.DOWNSELL_DISCOUNT_CENTS,
            'discounted_price': subscription.discounted_price() if subscription else None,
            'offer_months': settings.DOWNSELL_DURATION_MONTHS,
            'reason_form': reason_form or ReasonForm(initial={'reason': state['reason'] or None}),
            'position': position,
            'total_steps': total,
        }
        template = self.partial_template_name if self.request.htmx else self.template_name
        return render(self.request, template, context)


@require_POST
def reset_flow(request):
    """Drops the wizard state and sends the user to ``next`` (default: step one)."""
    request.session.pop(SESSION_KEY, None)

    target = request.POST.get('next')
    if not target or not url_has_allowed_host_and_scheme(target, allowed_hosts={request.get_host()}):
        target = reverse('billing:flow')

    if request.htmx:
        return HttpResponseClientRedirect(target)
    return redirect(target)

# ------------------------------------------------------------------
# JSON API
# ------------------------------------------------------------------
def cancel_api_rate(group, request):
    return settings.CANCEL_API_RATELIMIT


def _get_variant(data):
    variant = CancellationService.get_or_assign_variant(data['userId'])
    return JsonResponse({"variant": str(variant)})


def _cancel_subscription(data):
    cancellation = CancellationService.cancel_subscription(
        data['userId'],
        data['subscriptionId'],
        data['variant'],
        data['reason'],
        data['acceptedDownsell'],
    )
    return JsonResponse({"success": True, "cancellation": cancellation.to_dict()})


def _accept_downsell(data):
    cancellation = CancellationService.accept_downsell(
        data['userId'],
        data['subscriptionId'],
        data['variant'],
        data['reason'],
    )
    return JsonResponse({
        "success": True,
        "message": "Downsell accepted",
        "cancellation": cancellation.to_dict(),
    })


ACTIONS = {
    'get_variant': (VariantRequestForm, _get_variant),
    'cancel_subscription': (CancellationRequestForm, _cancel_subscription),
    'accept_downsell': (DownsellRequestForm, _accept_downsell),
}


@csrf_exempt
@require_POST
@ratelimit(key='ip', rate=cancel_api_rate, block=True)
def cancel_api(request):
    try:
        body = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        return JsonResponse({"error": "Invalid JSON"}, status=400)

    if not isinstance(body, dict):
        return JsonResponse({"error": "Invalid JSON"}, status=400)

    action = body.get('action')
    if action not in ACTIONS:
        return JsonResponse({"error": "Invalid action"}, status=400)

    form_class, handler = ACTIONS[action]
    form = form_class(body)
    if not form.is_valid():
        return JsonResponse(
            {"error": "Invalid payload", "details": form.errors.get_json_data()},
            status=400,
        )

    try:
        return handler(form.cleaned_data)
    except Exception:
        logger.exception(f"Cancel API action '{action}' failed")
        return JsonResponse({"error": "Internal server error"}, status=500)


def rate_limit_exceeded_view(request, exception):
    return JsonResponse({"error": "Too many requests"}, status=429)
