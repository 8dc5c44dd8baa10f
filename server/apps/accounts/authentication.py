"""Bearer token authentication for API views."""

import functools
import logging
from collections.abc import Callable
from typing import Any, Final

from django.http import HttpRequest, HttpResponse

from server.apps.accounts.exceptions import AuthenticationFailedError
from server.apps.accounts.logic.token_operations import (
    authenticate_access_token,
)
from server.common.http import error_response

logger = logging.getLogger(__name__)

_BEARER_SCHEME: Final = 'bearer'

_View = Callable[..., HttpResponse]


def token_required(view: _View) -> _View:
    """Require a valid access token and expose its user as request.user.

    Args:
        view: View function to protect.

    Returns:
        Wrapped view answering 401 without a valid token.
    """
    @functools.wraps(view)
    def wrapper(
        request: HttpRequest,
        *args: Any,
        **kwargs: Any,
    ) -> HttpResponse:
        header = request.headers.get('Authorization', '')
        scheme, _, token = header.partition(' ')
        token = token.strip()
        if scheme.lower() != _BEARER_SCHEME or not token:
            return error_response('No token provided', status=401)

        try:
            request.user = authenticate_access_token(token)
        except AuthenticationFailedError as error:
            logger.debug('Rejected access token: %s', error)
            return error_response(str(error), status=401)

        return view(request, *args, **kwargs)

    return wrapper
