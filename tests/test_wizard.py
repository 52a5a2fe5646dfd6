"""
The server-rendered cancellation wizard at /cancel/.
"""
import pytest
from unittest.mock import patch
from django.contrib.messages import get_messages
from django.db import DatabaseError

from billing.models import Cancellation, Subscription
from billing.services import CancellationService

FLOW_URL = '/cancel/'


def send(client, event, **data):
    return client.post(FLOW_URL, {'event': event, **data})


@pytest.mark.django_db
class TestVariantA:

    def test_full_cancellation_skips_downsell(self, client, mock_user, force_variant):
        force_variant('A')

        response = client.get(FLOW_URL)
        assert response.context['step'] == 'initial'
        assert response.context['variant'] == 'A'

        assert send(client, 'start').context['step'] == 'reasons'

        response = send(client, 'select_reason', reason='Not using it enough')
        assert response.context['step'] == 'confirm'
        assert b'special offer' not in response.content

        response = send(client, 'confirm')
        assert response.context['step'] == 'complete'

        subscription = Subscription.objects.get(pk='sub-1')
        assert subscription.status == Subscription.Status.PENDING_CANCELLATION

        row = Cancellation.objects.get()
        assert row.reason == 'Not using it enough'
        assert row.downsell_variant == 'A'
        assert row.accepted_downsell is False

    def test_downsell_events_are_rejected(self, client, mock_user, force_variant):
        force_variant('A')
        send(client, 'start')
        send(client, 'select_reason', reason='Other')

        response = send(client, 'accept_downsell')
        assert response.context['step'] == 'confirm'
        assert Cancellation.objects.count() == 0


@pytest.mark.django_db
class TestVariantB:

    def reach_downsell(self, client, force_variant):
        force_variant('B')
        send(client, 'start')
        return send(client, 'select_reason', reason='Too expensive')

    def test_reasons_lead_to_offer(self, client, mock_user, force_variant):
        response = self.reach_downsell(client, force_variant)
        assert response.context['step'] == 'downsell'
        assert response.context['discounted_price'] == 1500
        assert b'special offer' in response.content
        assert b'$15.00/month' in response.content

    def test_declining_goes_to_confirm(self, client, mock_user, force_variant):
        self.reach_downsell(client, force_variant)

        response = send(client, 'decline_downsell')
        assert response.context['step'] == 'confirm'
        assert Cancellation.objects.count() == 0

        send(client, 'confirm')
        row = Cancellation.objects.get()
        assert row.accepted_downsell is False
        assert row.downsell_variant == 'B'
        assert row.reason == 'Too expensive'

    def test_accepting_records_offer(self, client, mock_user, force_variant):
        self.reach_downsell(client, force_variant)

        response = send(client, 'accept_downsell')
        assert response.context['step'] == 'retained'

        row = Cancellation.objects.get()
        assert row.accepted_downsell is True
        assert Subscription.objects.get(pk='sub-1').status == Subscription.Status.ACTIVE

    def test_accepted_variant_sticks_for_next_flow(self, client, mock_user, force_variant):
        self.reach_downsell(client, force_variant)
        send(client, 'accept_downsell')
        client.post('/cancel/reset/')

        force_variant('A')
        response = client.get(FLOW_URL)
        assert response.context['variant'] == 'B'


@pytest.mark.django_db
class TestErrors:

    def test_missing_reason_stays_on_reasons(self, client, mock_user, force_variant):
        force_variant('A')
        send(client, 'start')

        response = send(client, 'select_reason')
        assert response.context['step'] == 'reasons'
        assert response.context['reason_form'].errors

    def test_out_of_order_event(self, client, mock_user, force_variant):
        force_variant('A')
        response = send(client, 'confirm')
        assert response.context['step'] == 'initial'
        assert Subscription.objects.get(pk='sub-1').status == Subscription.Status.ACTIVE

    def test_store_failure_keeps_user_on_step(self, client, mock_user, force_variant):
        force_variant('A')
        send(client, 'start')
        send(client, 'select_reason', reason='Other')

        with patch.object(CancellationService, 'cancel_subscription', side_effect=DatabaseError("down")):
            response = send(client, 'confirm')

        assert response.context['step'] == 'confirm'
        assert [m.level_tag for m in get_messages(response.wsgi_request)] == ['error']
        assert Cancellation.objects.count() == 0

        # Retrying works once the store is back
        assert send(client, 'confirm').context['step'] == 'complete'


@pytest.mark.django_db
class TestRendering:

    def test_variant_is_pinned_for_the_session(self, client, mock_user):
        first = client.get(FLOW_URL).context['variant']
        for _ in range(5):
            assert client.get(FLOW_URL).context['variant'] == first

    def test_htmx_gets_partial(self, client, mock_user):
        response = client.get(FLOW_URL, HTTP_HX_REQUEST='true')
        assert response.status_code == 200
        assert b'<html' not in response.content
        assert b"sorry to see you go" in response.content

    def test_full_page(self, client, mock_user):
        response = client.get(FLOW_URL)
        assert b'<html' in response.content
        assert b'id="cancel-flow"' in response.content


@pytest.mark.django_db
class TestReset:

    def test_reset_returns_to_start(self, client, mock_user, force_variant):
        force_variant('A')
        send(client, 'start')

        response = client.post('/cancel/reset/')
        assert response.status_code == 302
        assert response.url == FLOW_URL
        assert client.get(FLOW_URL).context['step'] == 'initial'

    def test_reset_to_home(self, client, mock_user):
        response = client.post('/cancel/reset/', {'next': '/'})
        assert response.url == '/'

    def test_reset_ignores_external_next(self, client, mock_user):
        response = client.post('/cancel/reset/', {'next': 'https://example.org/'})
        assert response.url == FLOW_URL

    def test_reset_over_htmx(self, client, mock_user):
        response = client.post('/cancel/reset/', {'next': '/'}, HTTP_HX_REQUEST='true')
        assert response['HX-Redirect'] == '/'


@pytest.mark.django_db
class TestDownsellFailures:

    def test_accept_failure_keeps_user_on_downsell(self, client, mock_user, force_variant):
        force_variant('B')
        send(client, 'start')
        send(client, 'select_reason', reason='Too expensive')

        with patch.object(CancellationService, 'accept_downsell', side_effect=DatabaseError("down")):
            response = send(client, 'accept_downsell')

        assert response.context['step'] == 'downsell'
        assert [m.level_tag for m in get_messages(response.wsgi_request)] == ['error']
        assert Cancellation.objects.count() == 0
        assert Subscription.objects.get(pk='sub-1').status == Subscription.Status.ACTIVE

    def test_buttons_issue_their_own_requests(self, client, mock_user, force_variant):
        force_variant('B')
        send(client, 'start')
        content = send(client, 'select_reason', reason='Other').content.decode()

        # Busy state follows the clicked button, not the whole form
        assert content.count('hx-post="/cancel/"') == 2
        assert '<form method="post" action="/cancel/">' in content
        assert '$10 OFF' in content


@pytest.mark.django_db
class TestLoggedInAccount:

    def test_admin_session_still_cancels_mock_subscription(self, client, mock_user, force_variant, django_user_model):
        admin = django_user_model.objects.create_superuser(
            username='admin', email='admin@example.com', password='pw'
        )
        client.force_login(admin)
        force_variant('A')

        send(client, 'start')
        send(client, 'select_reason', reason='Other')
        response = send(client, 'confirm')

        assert response.context['step'] == 'complete'
        assert Subscription.objects.get(pk='sub-1').status == Subscription.Status.PENDING_CANCELLATION
        row = Cancellation.objects.get()
        assert row.user_id == mock_user.pk
        assert row.reason == 'Other'

    def test_home_shows_mock_subscription(self, client, mock_user, django_user_model):
        admin = django_user_model.objects.create_superuser(
            username='admin', email='admin@example.com', password='pw'
        )
        client.force_login(admin)

        response = client.get('/')
        assert b'Mihailo' in response.content
        assert b'$25.00/month' in response.content


@pytest.mark.django_db
class TestFinishedFlow:

    def test_returning_after_retention_starts_over(self, client, mock_user, force_variant):
        force_variant('B')
        send(client, 'start')
        send(client, 'select_reason', reason='Too expensive')
        assert send(client, 'accept_downsell').context['step'] == 'retained'

        response = client.get(FLOW_URL)
        assert response.context['step'] == 'initial'
        assert response.context['variant'] == 'B'

    def test_returning_after_completion_starts_over(self, client, mock_user, force_variant):
        force_variant('A')
        send(client, 'start')
        send(client, 'select_reason', reason='Other')
        send(client, 'confirm')

        assert client.get(FLOW_URL).context['step'] == 'initial'
