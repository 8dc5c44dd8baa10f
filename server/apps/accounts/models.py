"""Database models for accounts app."""

from typing import ClassVar, Final, final, override

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models

# Constants for field max lengths
_USERNAME_MAX_LENGTH: Final = 150
_GOOGLE_ID_MAX_LENGTH: Final = 255
_JTI_MAX_LENGTH: Final = 64


@final
class User(AbstractUser):
    """Drive user.

    Users sign in either with a password or with Google. Accounts created
    through Google have an unusable password and a ``google_id``.
    """

    username = models.CharField(
        max_length=_USERNAME_MAX_LENGTH,
        unique=True,
        null=True,
        blank=True,
        validators=[AbstractUser.username_validator],
    )

    email = models.EmailField(
        unique=True,
        null=True,
        blank=True,
    )

    google_id = models.CharField(
        max_length=_GOOGLE_ID_MAX_LENGTH,
        unique=True,
        null=True,
        blank=True,
        help_text='Subject of the Google ID token',
    )

    class Meta:
        """Model metadata."""

        verbose_name = 'User'  # type: ignore[mutable-override]
        verbose_name_plural = 'Users'  # type: ignore[mutable-override]

    @override
    def __str__(self) -> str:
        """String representation."""
        return self.username or self.email or f'user-{self.pk}'


@final
class RevokedToken(models.Model):
    """Refresh token revoked by logout.

    Rows are only needed until the token would have expired anyway;
    the ``purge_revoked_tokens`` command removes them afterwards.
    """

    jti = models.CharField(
        max_length=_JTI_MAX_LENGTH,
        unique=True,
        help_text='Token identifier claim',
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='revoked_tokens',
    )

    expires_at = models.DateTimeField(
        db_index=True,
        help_text='Expiry of the revoked token',
    )

    revoked_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Revoked Token'  # type: ignore[mutable-override]
        verbose_name_plural = 'Revoked Tokens'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-revoked_at']

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user}:{self.jti[:8]}'
