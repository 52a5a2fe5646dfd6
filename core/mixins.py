# core/mixins.py
from users.mock import get_mock_user


class MockUserMixin:
    """
    Pages always act on behalf of the mock account. A real login (e.g. an
    admin session) only applies to the admin site.
    """

    def dispatch(self, request, *args, **kwargs):
        request.user = get_mock_user()
        return super().dispatch(request, *args, **kwargs)
