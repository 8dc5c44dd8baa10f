"""Authentication settings: custom user model, JWT and Google sign-in."""

from server.settings.components import config

AUTH_USER_MODEL = 'accounts.User'

AUTHENTICATION_BACKENDS = (
    'django.contrib.auth.backends.ModelBackend',
)

PASSWORD_HASHERS = (
    'django.contrib.auth.hashers.PBKDF2PasswordHasher',
    'django.contrib.auth.hashers.PBKDF2SHA1PasswordHasher',
)

# Tokens are HS256 JWTs signed with this key
JWT_SECRET_KEY = config('JWT_SECRET_KEY', default='insecure-jwt-key')
JWT_ALGORITHM = config('JWT_ALGORITHM', default='HS256')

# Lifetimes in seconds: 15 minutes and 7 days
JWT_ACCESS_TOKEN_LIFETIME = config(
    'JWT_ACCESS_TOKEN_LIFETIME',
    cast=int,
    default=15 * 60,
)
JWT_REFRESH_TOKEN_LIFETIME = config(
    'JWT_REFRESH_TOKEN_LIFETIME',
    cast=int,
    default=7 * 24 * 60 * 60,
)

# OAuth client ID the Google ID tokens must be issued for
GOOGLE_CLIENT_ID = config('GOOGLE_CLIENT_ID', default='')
