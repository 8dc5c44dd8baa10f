"""Business logic for JWT access and refresh tokens."""

import dataclasses
import logging
import uuid
from datetime import UTC, datetime, timedelta
from typing import Any, Final

from django.conf import settings
from django.contrib.auth import get_user_model
from django.utils import timezone
from jose import JWTError, jwt

from server.apps.accounts.exceptions import AuthenticationFailedError
from server.apps.accounts.models import RevokedToken

User = get_user_model()
logger = logging.getLogger(__name__)

_ACCESS_TOKEN: Final = 'access'
_REFRESH_TOKEN: Final = 'refresh'


@dataclasses.dataclass(frozen=True, slots=True)
class TokenPair:
    """Tokens returned by every successful sign-in."""

    access_token: str
    refresh_token: str


def _encode(user_id: int, token_type: str, lifetime: int) -> str:
    """Sign a token for a user.

    Args:
        user_id: Subject of the token.
        token_type: 'access' or 'refresh'.
        lifetime: Validity in seconds.

    Returns:
        Encoded JWT.
    """
    issued_at = timezone.now()
    claims = {
        'sub': str(user_id),
        'type': token_type,
        'jti': uuid.uuid4().hex,
        'iat': int(issued_at.timestamp()),
        'exp': int((issued_at + timedelta(seconds=lifetime)).timestamp()),
    }
    return jwt.encode(
        claims,
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
    )


def _decode(token: str, token_type: str) -> dict[str, Any]:
    """Verify a token's signature, expiry and type.

    Args:
        token: Encoded JWT.
        token_type: Expected 'type' claim.

    Returns:
        Token claims.

    Raises:
        AuthenticationFailedError: If the token is invalid or expired.
    """
    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError as error:
        message = f'Invalid {token_type} token'
        raise AuthenticationFailedError(message) from error

    if claims.get('type') != token_type or not claims.get('jti'):
        raise AuthenticationFailedError(f'Invalid {token_type} token')
    return claims


def _get_active_user(claims: dict[str, Any]) -> Any:
    try:
        return User.objects.get(id=int(claims['sub']), is_active=True)
    except (User.DoesNotExist, KeyError, ValueError) as error:
        raise AuthenticationFailedError('User not found') from error


def issue_token_pair(user: Any) -> TokenPair:
    """Create fresh access and refresh tokens.

    Args:
        user: Authenticated user.

    Returns:
        TokenPair for the user.
    """
    return TokenPair(
        access_token=_encode(
            user.id,
            _ACCESS_TOKEN,
            settings.JWT_ACCESS_TOKEN_LIFETIME,
        ),
        refresh_token=_encode(
            user.id,
            _REFRESH_TOKEN,
            settings.JWT_REFRESH_TOKEN_LIFETIME,
        ),
    )


def authenticate_access_token(token: str) -> Any:
    """Resolve an access token to its user.

    Args:
        token: Encoded access token.

    Returns:
        Active user the token was issued to.

    Raises:
        AuthenticationFailedError: If the token or user is invalid.
    """
    return _get_active_user(_decode(token, _ACCESS_TOKEN))


def refresh_access_token(refresh_token: str) -> str:
    """Issue a new access token from a refresh token.

    Args:
        refresh_token: Encoded refresh token.

    Returns:
        New access token.

    Raises:
        AuthenticationFailedError: If the refresh token is invalid,
            expired or revoked.
    """
    claims = _decode(refresh_token, _REFRESH_TOKEN)
    if RevokedToken.objects.filter(jti=claims['jti']).exists():
        logger.warning('Revoked refresh token used: %s', claims['jti'][:8])
        raise AuthenticationFailedError('Refresh token invalidated')

    user = _get_active_user(claims)
    return _encode(user.id, _ACCESS_TOKEN, settings.JWT_ACCESS_TOKEN_LIFETIME)


def revoke_refresh_token(refresh_token: str) -> bool:
    """Revoke a refresh token until it expires.

    Args:
        refresh_token: Encoded refresh token.

    Returns:
        True if the token was recorded as revoked, False if it was
        already unusable (invalid, expired or revoked before).
    """
    try:
        claims = _decode(refresh_token, _REFRESH_TOKEN)
    except AuthenticationFailedError:
        logger.info('Ignoring revocation of an invalid refresh token')
        return False

    _, created = RevokedToken.objects.get_or_create(
        jti=claims['jti'],
        defaults={
            'user_id': int(claims['sub']),
            'expires_at': datetime.fromtimestamp(claims['exp'], tz=UTC),
        },
    )
    if created:
        logger.info(
            'Refresh token revoked for user %s: %s',
            claims['sub'],
            claims['jti'][:8],
        )
    return created


def purge_expired_revocations() -> int:
    """Delete revocation rows whose tokens have expired.

    Returns:
        Number of rows deleted.
    """
    deleted, _ = RevokedToken.objects.filter(
        expires_at__lte=timezone.now(),
    ).delete()
    logger.info('Purged %d expired token revocations', deleted)
    return deleted
