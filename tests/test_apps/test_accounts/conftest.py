"""Shared fixtures for accounts app tests."""

import pytest
from django.contrib.auth import get_user_model

User = get_user_model()


@pytest.fixture
def user(db):
    """Create a password user.

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        username='testuser',
        password='testpass123',
        email='test@example.com',
    )


@pytest.fixture
def google_user(db):
    """Create a user that signs in with Google only.

    Returns:
        User instance with an unusable password.
    """
    google_account = User(
        username='googler',
        email='googler@example.com',
        google_id='google-sub-1',
    )
    google_account.set_unusable_password()
    google_account.save()
    return google_account


@pytest.fixture
def google_payload(settings, monkeypatch):
    """Make Google token verification return a fixed payload.

    Returns:
        Payload dict; tests may modify it before signing in.
    """
    from server.apps.accounts.logic import auth_operations  # noqa: WPS433

    settings.GOOGLE_CLIENT_ID = 'client-id.apps.googleusercontent.com'
    payload = {'sub': 'google-sub-2', 'email': 'newcomer@example.com'}

    def fake_verify(token, request, audience):
        if token != 'valid-google-token':
            raise ValueError('Wrong number of segments in token')
        return payload

    monkeypatch.setattr(
        auth_operations.id_token,
        'verify_oauth2_token',
        fake_verify,
    )
    return payload
