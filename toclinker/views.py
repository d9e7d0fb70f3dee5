"""Django views exposing the title resolution endpoints.

Each view validates its input with the forms of this app, hands the work
to the engine with the network collaborators from :mod:`.services`, and
serialises the outcome as JSON. The views are called cross-origin by a
browser client without a session, so they are exempt from CSRF checks.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict
from urllib.parse import urlparse

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from .engine import load_config, resolve_markup, resolve_search
from .forms import ExtractLinksForm, NotionSearchForm
from .services import (
    ConnectionRefused,
    FetchError,
    FetchTimeout,
    HostNotFound,
    NOTION_SEARCH_URL,
    NOTION_VERSION,
    NotionSearchClient,
    UpstreamStatusError,
    fetch_markup_text,
    fetch_sitemap,
    looks_like_sitemap,
)

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'GET',
    'Access-Control-Allow-Headers': 'Content-Type',
}


def _error(message: str, status: int) -> JsonResponse:
    return JsonResponse({'error': message}, status=status)


def _method_not_allowed() -> JsonResponse:
    return _error('Method not allowed', 405)


def _json_body(request: HttpRequest) -> Dict[str, Any]:
    """Decode the request body, treating anything but a JSON object as empty."""

    try:
        payload = json.loads(request.body or b'{}')
    except (ValueError, UnicodeDecodeError):
        return {}
    return payload if isinstance(payload, dict) else {}


def _engine_config():
    return load_config(getattr(settings, 'TOCLINKER_ENGINE_CONFIG', None))


@csrf_exempt
def extract_links(request: HttpRequest) -> HttpResponse:
    """Resolve titles against the markup of a publicly shared root page."""

    if request.method != 'POST':
        return _method_not_allowed()

    form = ExtractLinksForm.from_payload(_json_body(request))
    if not form.is_valid():
        return _error(form.first_error(), 400)

    root_url: str = form.cleaned_data['root_url']
    titles: list[str] = form.cleaned_data['titles']
    logger.info('Extract links for %s with %d titles (host %s)', root_url, len(titles), form.cleaned_data['host'])

    timeout = getattr(settings, 'TOCLINKER_FETCH_TIMEOUT', 15)
    try:
        result = resolve_markup(
            root_url,
            titles,
            lambda url: fetch_markup_text(url, timeout=timeout),
            _engine_config(),
        )
    except FetchError as exc:
        logger.warning('Fetching %s failed: %s', root_url, exc)
        return _error(str(exc), 500)
    except Exception as exc:
        logger.exception('Extracting links from %s failed', root_url)
        return _error(str(exc), 500)

    return JsonResponse(result.to_payload())


@csrf_exempt
def notion_search(request: HttpRequest) -> HttpResponse:
    """Resolve titles with one Notion search query per title."""

    if request.method != 'POST':
        return _method_not_allowed()

    form = NotionSearchForm.from_payload(_json_body(request))
    if not form.is_valid():
        return _error(form.first_error(), 400)

    titles: list[str] = form.cleaned_data['titles']
    logger.info('Notion search for %d titles', len(titles))
    client = NotionSearchClient(
        form.cleaned_data['token'],
        api_url=getattr(settings, 'TOCLINKER_NOTION_API_URL', NOTION_SEARCH_URL),
        notion_version=getattr(settings, 'TOCLINKER_NOTION_VERSION', NOTION_VERSION),
        timeout=getattr(settings, 'TOCLINKER_SEARCH_TIMEOUT', 15),
    )
    result = resolve_search(titles, client, _engine_config())
    return JsonResponse(result.to_payload())


def sitemap_proxy(request: HttpRequest) -> HttpResponse:
    """Fetch a remote sitemap on behalf of a browser client."""

    if request.method != 'GET':
        return _method_not_allowed()

    url = request.GET.get('url')
    if not url:
        return _error('URL parameter is required', 400)

    try:
        parsed = urlparse(url)
    except ValueError:
        return _error('Invalid URL format', 400)
    if not parsed.scheme:
        return _error('Invalid URL format', 400)
    if parsed.scheme.lower() not in ('http', 'https'):
        return _error('Only HTTP and HTTPS URLs are allowed', 400)
    if not parsed.netloc:
        return _error('Invalid URL format', 400)

    try:
        fetched = fetch_sitemap(url, timeout=getattr(settings, 'TOCLINKER_SITEMAP_TIMEOUT', 10))
    except UpstreamStatusError as exc:
        logger.warning('Failed to fetch sitemap %s: %s', url, exc)
        return _error(f'Failed to fetch sitemap: {exc}', exc.status)
    except FetchTimeout:
        return _error('Request timeout - sitemap took too long to load', 408)
    except HostNotFound:
        return _error('Domain not found - check the URL', 404)
    except ConnectionRefused:
        return _error('Connection refused - server may be down', 503)
    except FetchError as exc:
        logger.warning('Error fetching sitemap %s: %s', url, exc)
        return _error(f'Failed to fetch sitemap: {exc}', 500)

    if 'xml' not in fetched.content_type and 'text' not in fetched.content_type:
        logger.warning('Response may not be XML: %s', fetched.content_type)

    if not looks_like_sitemap(fetched.text):
        return _error('Response does not appear to be a valid sitemap XML', 400)

    logger.info('Fetched sitemap %s, length %d', url, len(fetched.text))
    response = HttpResponse(fetched.text, content_type='application/xml')
    for header, value in CORS_HEADERS.items():
        response[header] = value
    return response
