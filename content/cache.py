import hashlib
import logging
from functools import wraps
from uuid import uuid4

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

LAYOUT = "__layout__"


def _url_hash(url):
    return hashlib.md5(url.encode(), usedforsecurity=False).hexdigest()


def _version_key(path):
    return f"page-version:{_url_hash(path)}"


def _version(path):
    return cache.get(_version_key(path), "0")


def page_cache_key(request):
    # Bumping either version orphans every cached variant (query strings included) of the page
    return f"page:{_version(LAYOUT)}:{_version(request.path)}:{_url_hash(request.get_full_path())}"


def revalidate_path(path, layout=False):
    target = LAYOUT if layout else path
    cache.set(_version_key(target), uuid4().hex, None)
    logger.info("Revalidated %s", "all pages" if layout else path)


def revalidate_content_paths(content_type, slug=None):
    """Drop the cached pages that show content of ``content_type``."""
    if content_type in ("seo-settings", "popups"):
        revalidate_path("/", layout=True)
        return

    paths = ["/"]
    if content_type in ("about", "skills", "experiences"):
        paths.append("/about/")
    elif content_type == "projects":
        paths.append("/projects/")
        if slug:
            paths.append(f"/projects/{slug}/")
    elif content_type == "blog":
        paths.append("/blog/")
        if slug:
            paths.append(f"/blog/{slug}/")
    elif content_type == "testimonials":
        paths.append("/about/")

    for path in paths:
        revalidate_path(path)


def cached_page(view_func):
    """Cache the rendered page of anonymous GET requests until it is revalidated or expires."""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if request.method != "GET" or request.user.is_authenticated:
            return view_func(request, *args, **kwargs)

        cache_key = page_cache_key(request)
        cached_response = cache.get(cache_key)
        if cached_response is not None:
            logger.debug("CACHE HIT - %s", request.get_full_path())
            return cached_response

        logger.debug("CACHE MISS - %s", request.get_full_path())
        response = view_func(request, *args, **kwargs)
        if response.status_code == 200 and not response.streaming:
            cache.set(cache_key, response, settings.PAGE_CACHE_TIMEOUT)
        return response
    return wrapper
