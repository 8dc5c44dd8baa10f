"""Business logic for registration and sign-in."""

import logging
from typing import Any

from django.conf import settings
from django.contrib.auth import authenticate, get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Q
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from server.apps.accounts.exceptions import (
    AuthenticationFailedError,
    RegistrationConflictError,
)
from server.apps.accounts.logic.token_operations import (
    TokenPair,
    issue_token_pair,
)

User = get_user_model()
logger = logging.getLogger(__name__)


def register_user(username: str, email: str, password: str) -> TokenPair:
    """Create a password account and sign it in.

    Args:
        username: Unique username.
        email: Unique email address.
        password: Plain text password, hashed by Django.

    Returns:
        TokenPair for the new user.

    Raises:
        AuthenticationFailedError: If a field is missing.
        RegistrationConflictError: If username or email is taken.
    """
    if not username or not email or not password:
        raise AuthenticationFailedError(
            'Username, email and password are required',
        )

    if User.objects.filter(Q(email=email) | Q(username=username)).exists():
        raise RegistrationConflictError('Username or email already exists')

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=username,
                email=email,
                password=password,
            )
    except IntegrityError as error:
        # Lost a race against a concurrent registration
        raise RegistrationConflictError(
            'Username or email already exists',
        ) from error

    logger.info('User registered: %s (ID: %d)', username, user.id)
    return issue_token_pair(user)


def login_user(identifier: str, password: str) -> TokenPair:
    """Sign in with a username or email and a password.

    Args:
        identifier: Username or email address.
        password: Plain text password.

    Returns:
        TokenPair for the user.

    Raises:
        AuthenticationFailedError: If credentials are wrong or the account
            can only sign in with Google.
    """
    user = User.objects.filter(
        Q(email=identifier) | Q(username=identifier),
    ).first() if identifier else None

    if user is None:
        logger.warning('Login failed, unknown identifier: %s', identifier)
        raise AuthenticationFailedError('Invalid credentials')

    if not user.has_usable_password():
        raise AuthenticationFailedError('Account uses Google login')

    authenticated = authenticate(username=user.username, password=password)
    if authenticated is None:
        logger.warning('Login failed for user: %s', user.username)
        raise AuthenticationFailedError('Invalid credentials')

    logger.info('User logged in: %s', authenticated.username)
    return issue_token_pair(authenticated)


def google_login(token: str) -> TokenPair:
    """Sign in with a Google ID token, creating the account on first use.

    Args:
        token: ID token obtained by the client from Google.

    Returns:
        TokenPair for the user.

    Raises:
        AuthenticationFailedError: If the token can't be verified.
        RegistrationConflictError: If the derived username or the email
            already belongs to another account.
    """
    if not settings.GOOGLE_CLIENT_ID:
        raise AuthenticationFailedError('Google sign-in is not configured')

    try:
        payload = id_token.verify_oauth2_token(
            token,
            google_requests.Request(),
            settings.GOOGLE_CLIENT_ID,
        )
    except ValueError as error:
        logger.warning('Google token verification failed: %s', error)
        raise AuthenticationFailedError('Invalid Google token') from error

    google_id = payload['sub']
    user = User.objects.filter(google_id=google_id).first()
    if user is None:
        user = _create_google_user(google_id, payload.get('email', ''))

    if not user.is_active:
        raise AuthenticationFailedError('Invalid Google token')

    logger.info('User logged in with Google: %s', user.username)
    return issue_token_pair(user)


def _create_google_user(google_id: str, email: str) -> Any:
    username = email.split('@')[0] or f'google-{google_id}'
    user = User(
        username=username,
        email=email or None,
        google_id=google_id,
    )
    user.set_unusable_password()

    try:
        with transaction.atomic():
            user.save()
    except IntegrityError as error:
        raise RegistrationConflictError(
            'Username or email already exists',
        ) from error

    logger.info(
        'User created from Google account: %s (ID: %d)',
        username,
        user.id,
    )
    return user
