"""
File-backed content store.

Blog posts and projects live in ``CONTENT_DIR/<type>/<slug>.md`` as Markdown
with YAML front matter, popups in ``CONTENT_DIR/popups/<slug>.json`` and the
site-wide settings in single JSON files at the root of ``CONTENT_DIR``.
"""
import copy
import json
import logging
import re
from datetime import date, datetime
from pathlib import Path

import yaml
from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder

from .exceptions import ContentError, ContentFormatError, ContentNotFound, InvalidContentPath
from .rendering import render_markdown

logger = logging.getLogger(__name__)

MARKDOWN_TYPES = ("blog", "projects")
ROOT_TYPES = ("testimonials", "home-settings", "seo-settings")
ALLOWED_TYPES = MARKDOWN_TYPES + ("popups",) + ROOT_TYPES

SLUG_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")
EXTENSION_RE = re.compile(r"\.(md|json)$")
FRONT_MATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)(.*)\Z", re.S | re.M)

DEFAULT_SEO_SETTINGS = {
    "siteTitle": "Portfolio",
    "siteDescription": "Personal portfolio website.",
    "siteKeywords": ["web developer", "portfolio", "django"],
    "canonicalUrl": "http://localhost:8000",
    "robots": "index, follow",
    "favicon": "/static/favicon.ico",
    "og": {
        "title": "Portfolio",
        "description": "Personal portfolio website.",
        "image": "/static/og-image.png",
        "type": "website",
        "url": "http://localhost:8000",
        "site_name": "Portfolio",
    },
    "twitter": {
        "card": "summary_large_image",
        "site": "@username",
        "creator": "@username",
        "title": "Portfolio",
        "description": "Personal portfolio website.",
        "image": "/static/twitter-image.png",
    },
}

DEFAULT_HOME_SETTINGS = {
    "featuredContent": {
        "type": "text",
        "textTitle": "Welcome!",
        "textContent": "This is my portfolio. You can find my projects and more about me here.",
    }
}


def content_dir():
    return Path(settings.CONTENT_DIR)


def _inside(base, path):
    return path == base or base in path.parents


def get_full_path(content_type, slug):
    if content_type not in ALLOWED_TYPES:
        raise InvalidContentPath(f"Unknown content type '{content_type}'.")
    base = content_dir().resolve()

    # Settings files have a fixed name; the slug only matters for collections.
    if content_type in ROOT_TYPES:
        return base / f"{content_type}.json"

    clean_slug = EXTENSION_RE.sub("", slug or "")
    if not SLUG_RE.match(clean_slug) or ".." in clean_slug:
        raise InvalidContentPath(f"Invalid slug '{slug}'.")

    extension = ".md" if content_type in MARKDOWN_TYPES else ".json"
    full_path = (base / content_type / f"{clean_slug}{extension}").resolve()
    if not _inside(base, full_path):
        raise InvalidContentPath(f"Invalid slug '{slug}'.")
    return full_path


def resolve_content_file(name):
    """Resolve a bare file name such as ``seo-settings.json`` inside the content directory."""
    base = content_dir().resolve()
    full_path = (base / (name or "")).resolve()
    if not name or not _inside(base, full_path) or full_path == base:
        raise InvalidContentPath("Invalid file path.")
    return full_path


def parse_front_matter(text):
    match = FRONT_MATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        data = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as exc:
        raise ContentFormatError(f"Front matter is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ContentFormatError("Front matter must be a mapping.")
    return data, match.group(2)


def dump_front_matter(data, content=""):
    header = yaml.safe_dump(data or {}, allow_unicode=True, sort_keys=False, default_flow_style=False)
    return f"---\n{header}---\n{content or ''}"


def get_content(content_type, slug):
    full_path = get_full_path(content_type, slug)
    if not full_path.is_file():
        raise ContentNotFound(f"Content '{slug}' was not found.")

    text = full_path.read_text(encoding="utf-8")
    if not text.strip():
        return {"data": {} if content_type in MARKDOWN_TYPES else [], "content": ""}

    if full_path.suffix == ".json":
        try:
            return {"data": json.loads(text), "content": ""}
        except json.JSONDecodeError as exc:
            logger.error("Malformed JSON in %s: %s", full_path, exc)
            raise ContentFormatError(f"JSON file '{slug}' is malformed.") from exc

    data, body = parse_front_matter(text)
    return {"data": data, "content": body}


def list_content(content_type):
    if content_type not in ALLOWED_TYPES:
        raise InvalidContentPath(f"Unknown content type '{content_type}'.")

    if content_type in ROOT_TYPES:
        try:
            data = get_content(content_type, content_type)["data"]
        except ContentNotFound:
            return []
        return data if isinstance(data, list) else [data]

    directory = content_dir() / content_type
    if not directory.is_dir():
        return []

    extension = ".md" if content_type in MARKDOWN_TYPES else ".json"
    items = []
    for path in sorted(directory.iterdir()):
        if path.suffix != extension or not path.is_file():
            continue
        try:
            data = get_content(content_type, path.stem)["data"]
        except ContentError as exc:
            # One broken file must not take the whole listing down
            logger.warning("Skipping '%s' while listing %s: %s", path.name, content_type, exc)
            continue
        if not isinstance(data, dict):
            logger.warning("Skipping '%s' while listing %s: not an object", path.name, content_type)
            continue
        items.append({**data, "slug": path.stem})
    return items


def save_content(content_type, slug, data, content=""):
    full_path = get_full_path(content_type, slug)
    if full_path.suffix == ".json":
        write_json_file(full_path, data)
    else:
        if data is not None and not isinstance(data, dict):
            raise ContentFormatError("Front matter must be an object.")
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(dump_front_matter(data, content), encoding="utf-8")
    logger.info("Saved %s '%s' to %s", content_type, slug, full_path)
    return full_path


def delete_content(content_type, slug):
    full_path = get_full_path(content_type, slug)
    full_path.unlink(missing_ok=True)
    logger.info("Deleted %s '%s' (%s)", content_type, slug, full_path)
    return full_path


def as_datetime(value):
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).replace(tzinfo=None)
        except ValueError:
            return None
    return None


def _sort_key(item):
    order = item.get("order")
    if isinstance(order, (int, float)) and not isinstance(order, bool):
        return (0, order, 0)
    when = as_datetime(item.get("date"))
    if when is not None:
        return (1, 0, -when.timestamp())
    return (2, 0, 0)


def get_sorted(content_type):
    """Items with an ``order`` come first (ascending), the rest newest first."""
    return sorted(list_content(content_type), key=_sort_key)


def get_document(content_type, slug):
    result = get_content(content_type, slug)
    clean_slug = EXTENSION_RE.sub("", slug)
    return {
        **result["data"],
        "slug": clean_slug,
        "content": result["content"],
        "content_html": render_markdown(result["content"]),
    }


def _get_json_settings(content_type, defaults):
    try:
        data = get_content(content_type, content_type)["data"]
    except ContentNotFound:
        logger.debug("Optional file %s.json is missing, using defaults", content_type)
        return copy.deepcopy(defaults)
    except ContentError as exc:
        logger.error("Could not read %s.json, using defaults: %s", content_type, exc)
        return copy.deepcopy(defaults)
    if isinstance(defaults, dict):
        if not isinstance(data, dict):
            return copy.deepcopy(defaults)
        return {**copy.deepcopy(defaults), **data}
    return data if isinstance(data, list) else copy.deepcopy(defaults)


def get_seo_settings():
    return _get_json_settings("seo-settings", DEFAULT_SEO_SETTINGS)


def get_home_settings():
    return _get_json_settings("home-settings", DEFAULT_HOME_SETTINGS)


def get_testimonials():
    return _get_json_settings("testimonials", [])


def list_popups():
    return list_content("popups")


def get_popup(slug):
    try:
        data = get_content("popups", slug)["data"]
    except ContentNotFound:
        return None
    if not isinstance(data, dict):
        raise ContentFormatError(f"Popup '{slug}' is not an object.")
    return {**data, "slug": EXTENSION_RE.sub("", slug)}


def load_json_file(path):
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ContentFormatError(f"'{Path(path).name}' is malformed.") from exc


def write_json_file(path, data):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False, cls=DjangoJSONEncoder), encoding="utf-8")
    return path
