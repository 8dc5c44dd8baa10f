"""JSON endpoints for registration, sign-in and tokens."""

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from server.apps.accounts.exceptions import (
    AuthenticationFailedError,
    RegistrationConflictError,
)
from server.apps.accounts.logic.auth_operations import (
    google_login,
    login_user,
    register_user,
)
from server.apps.accounts.logic.token_operations import (
    TokenPair,
    refresh_access_token,
    revoke_refresh_token,
)
from server.common.http import error_response, read_json


def _token_response(tokens: TokenPair) -> JsonResponse:
    return JsonResponse({
        'accessToken': tokens.access_token,
        'refreshToken': tokens.refresh_token,
    })


@csrf_exempt
@require_POST
def register(request: HttpRequest) -> JsonResponse:
    """Create a password account."""
    try:
        body = read_json(request)
        tokens = register_user(
            body.get('username', ''),
            body.get('email', ''),
            body.get('password', ''),
        )
    except ValueError:
        return error_response('Malformed request body', status=400)
    except (AuthenticationFailedError, RegistrationConflictError) as error:
        return error_response(str(error), status=400)
    return _token_response(tokens)


@csrf_exempt
@require_POST
def login(request: HttpRequest) -> JsonResponse:
    """Sign in with username or email and password."""
    try:
        body = read_json(request)
        tokens = login_user(
            body.get('identifier', ''),
            body.get('password', ''),
        )
    except ValueError:
        return error_response('Malformed request body', status=400)
    except AuthenticationFailedError as error:
        return error_response(str(error), status=400)
    return _token_response(tokens)


@csrf_exempt
@require_POST
def google(request: HttpRequest) -> JsonResponse:
    """Sign in with a Google ID token."""
    try:
        body = read_json(request)
        tokens = google_login(body.get('token', ''))
    except ValueError:
        return error_response('Malformed request body', status=400)
    except AuthenticationFailedError as error:
        return error_response(str(error), status=401)
    except RegistrationConflictError as error:
        return error_response(str(error), status=400)
    return _token_response(tokens)


@csrf_exempt
@require_POST
def refresh_token(request: HttpRequest) -> JsonResponse:
    """Exchange a refresh token for a new access token."""
    try:
        token = read_json(request).get('refreshToken')
    except ValueError:
        return error_response('Malformed request body', status=400)
    if not token:
        return error_response('No refresh token', status=401)

    try:
        access_token = refresh_access_token(token)
    except AuthenticationFailedError as error:
        return error_response(str(error), status=401)
    return JsonResponse({'accessToken': access_token})


@csrf_exempt
@require_POST
def logout(request: HttpRequest) -> JsonResponse:
    """Revoke the refresh token of the session."""
    try:
        token = read_json(request).get('refreshToken')
    except ValueError:
        return error_response('Malformed request body', status=400)
    if token:
        revoke_refresh_token(token)
    return JsonResponse({'message': 'Logged out successfully'})
