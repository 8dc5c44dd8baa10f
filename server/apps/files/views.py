"""JSON endpoints for the drive."""

import functools
import logging
from collections.abc import Callable
from typing import Any, Final

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods

from server.apps.accounts.authentication import token_required
from server.apps.files.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    UpstreamFailureError,
)
from server.apps.files.logic.content_types import parse_category
from server.apps.files.logic.file_operations import (
    delete_file,
    get_download_url,
    get_file,
    list_directory,
    list_recent,
    upload_file,
)
from server.apps.files.logic.folder_operations import (
    create_folder,
    delete_folder,
    get_breadcrumbs,
    get_folder,
    get_folder_size,
)
from server.apps.files.logic.search_operations import search
from server.apps.files.serializers import (
    serialize_file,
    serialize_folder,
    serialize_listing,
    serialize_match,
)
from server.common.http import error_response, read_json

logger = logging.getLogger(__name__)

# Values the web client sends for "no folder"
_ROOT_FOLDER_VALUES: Final = frozenset(('', 'null', 'undefined', 'None'))

_View = Callable[..., HttpResponse]


def _drive_errors(view: _View) -> _View:
    """Translate drive exceptions into JSON error responses."""
    @functools.wraps(view)
    def wrapper(
        request: HttpRequest,
        *args: Any,
        **kwargs: Any,
    ) -> HttpResponse:
        try:
            return view(request, *args, **kwargs)
        except NotFoundError as error:
            return error_response(str(error), status=404)
        except InvalidArgumentError as error:
            return error_response(str(error), status=400)
        except UpstreamFailureError as error:
            logger.warning('Upstream failure in %s: %s', request.path, error)
            return error_response(str(error), status=503)

    return wrapper


def _parse_folder_id(raw_value: str | None) -> int | None:
    """Parse a folder reference, None meaning the root.

    Raises:
        InvalidArgumentError: If the value is not an integer ID.
    """
    if raw_value is None or raw_value.strip() in _ROOT_FOLDER_VALUES:
        return None
    try:
        return int(raw_value)
    except ValueError as error:
        raise InvalidArgumentError(f'Invalid folder ID: {raw_value}') from error


def _parse_positive_int(raw_value: str | None, name: str, default: int) -> int:
    """Parse a positive integer query parameter.

    Raises:
        InvalidArgumentError: If the value is not a positive integer.
    """
    if raw_value is None or raw_value == '':
        return default
    try:
        parsed = int(raw_value)
    except ValueError as error:
        raise InvalidArgumentError(
            f'{name} must be a positive integer',
        ) from error
    if parsed < 1:
        raise InvalidArgumentError(f'{name} must be a positive integer')
    return parsed


def _parse_limit(raw_value: str | None, default: int) -> int:
    limit = _parse_positive_int(raw_value, 'limit', default)
    return min(limit, settings.DRIVE_MAX_PAGE_LIMIT)


@require_GET
def health(request: HttpRequest) -> JsonResponse:
    """Report that the server is running."""
    return JsonResponse({'status': 'OK', 'message': 'Server is running'})


@require_GET
@token_required
@_drive_errors
def listing(request: HttpRequest) -> HttpResponse:
    """List one page of a folder."""
    params = request.GET
    result = list_directory(
        request.user,
        folder_id=_parse_folder_id(params.get('folderId')),
        page=_parse_positive_int(params.get('page'), 'page', 1),
        limit=_parse_limit(
            params.get('limit'),
            settings.DRIVE_DEFAULT_PAGE_LIMIT,
        ),
        category=parse_category(params.get('fileTypeFilter')),
    )
    return JsonResponse(serialize_listing(result))


@require_GET
@token_required
@_drive_errors
def recent(request: HttpRequest) -> HttpResponse:
    """List recent files and top-level folders."""
    params = request.GET
    result = list_recent(
        request.user,
        limit=_parse_limit(params.get('limit'), settings.DRIVE_RECENT_LIMIT),
        category=parse_category(params.get('fileTypeFilter')),
    )
    return JsonResponse(serialize_listing(result))


@require_GET
@token_required
@_drive_errors
def search_drive(request: HttpRequest) -> HttpResponse:
    """Search the whole drive by name."""
    params = request.GET
    matches = search(
        request.user,
        params.get('q', ''),
        category=parse_category(params.get('fileTypeFilter')),
    )
    return JsonResponse({
        'results': [serialize_match(match) for match in matches],
    })


@csrf_exempt
@require_http_methods(['POST'])
@token_required
@_drive_errors
def upload(request: HttpRequest) -> HttpResponse:
    """Upload a file into a folder (or the root)."""
    uploaded = request.FILES.get('file')
    if uploaded is None:
        return error_response('No file uploaded', status=400)

    file_instance = upload_file(
        request.user,
        uploaded,
        folder_id=_parse_folder_id(request.POST.get('folderId')),
    )
    return JsonResponse(serialize_file(file_instance), status=201)


@csrf_exempt
@require_http_methods(['POST'])
@token_required
@_drive_errors
def folders(request: HttpRequest) -> HttpResponse:
    """Create a folder."""
    try:
        body = read_json(request)
    except ValueError:
        return error_response('Malformed request body', status=400)

    parent_id = body.get('parentId')
    folder = create_folder(
        request.user,
        str(body.get('name') or ''),
        parent_id=_parse_folder_id(
            None if parent_id is None else str(parent_id),
        ),
    )
    return JsonResponse(serialize_folder(folder), status=201)


@csrf_exempt
@require_http_methods(['GET', 'DELETE'])
@token_required
@_drive_errors
def folder_detail(request: HttpRequest, folder_id: int) -> HttpResponse:
    """Fetch or delete a folder."""
    if request.method == 'DELETE':
        delete_folder(request.user, folder_id)
        return JsonResponse({'message': 'Folder deleted successfully'})
    return JsonResponse(serialize_folder(get_folder(request.user, folder_id)))


@require_GET
@token_required
@_drive_errors
def folder_breadcrumbs(request: HttpRequest, folder_id: int) -> HttpResponse:
    """Return the path from the root to a folder."""
    trail = get_breadcrumbs(request.user, folder_id)
    return JsonResponse({
        'breadcrumbs': [serialize_folder(folder) for folder in trail],
    })


@require_GET
@token_required
@_drive_errors
def folder_size(request: HttpRequest, folder_id: int) -> HttpResponse:
    """Return the total size of a folder's direct files."""
    size = get_folder_size(request.user, folder_id)
    return JsonResponse({'folderId': folder_id, 'size': size})


@csrf_exempt
@require_http_methods(['GET', 'DELETE'])
@token_required
@_drive_errors
def file_detail(request: HttpRequest, file_id: int) -> HttpResponse:
    """Fetch or delete a file."""
    if request.method == 'DELETE':
        delete_file(request.user, file_id)
        return JsonResponse({'message': 'File deleted successfully'})
    return JsonResponse(serialize_file(get_file(request.user, file_id)))


@require_GET
@token_required
@_drive_errors
def export(request: HttpRequest, file_id: int) -> HttpResponse:
    """Return a short-lived download link."""
    link = get_download_url(request.user, file_id)
    return JsonResponse({'url': link.url, 'filename': link.filename})
