"""Django admin configuration for accounts app."""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from server.apps.accounts.models import RevokedToken, User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin interface for User model with the Google account field."""

    list_display = [
        'username',
        'email',
        'google_id',
        'is_active',
        'date_joined',
    ]

    search_fields = ['username', 'email', 'google_id']

    fieldsets = (
        *BaseUserAdmin.fieldsets,
        ('Google', {'fields': ('google_id',)}),
    )


@admin.register(RevokedToken)
class RevokedTokenAdmin(admin.ModelAdmin[RevokedToken]):
    """Admin interface for RevokedToken model."""

    list_display = ['jti', 'user', 'revoked_at', 'expires_at']

    list_filter = ['revoked_at', 'expires_at']

    search_fields = ['jti', 'user__username']

    readonly_fields = ['jti', 'user', 'revoked_at', 'expires_at']
