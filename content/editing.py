import logging

from django.contrib import messages
from django.utils.text import slugify

from history.git import autocommit

from . import store
from .api import user_label
from .cache import revalidate_content_paths
from .exceptions import ContentError

logger = logging.getLogger(__name__)

# Path segments the apps route themselves
RESERVED_SLUGS = {"new", "manage"}


def generate_unique_slug(content_type, title, exclude=None):
    slug = slugify(title) or content_type.rstrip("s")
    original_slug = slug
    counter = 1
    while slug in RESERVED_SLUGS or (
        slug != exclude and store.get_full_path(content_type, slug).exists()
    ):
        slug = f"{original_slug}-{counter}"
        counter += 1
    return slug


def save_document(user, content_type, slug, data, content="", original_slug=None):
    """Write one item, handling renames; returns the autocommit warning, if any."""
    slug = store.EXTENSION_RE.sub("", slug)
    original_slug = store.EXTENSION_RE.sub("", original_slug or "")
    changed_paths = []
    if original_slug and original_slug != slug:
        changed_paths.append(store.delete_content(content_type, original_slug))
        revalidate_content_paths(content_type, original_slug)

    exists = store.get_full_path(content_type, slug).exists()
    changed_paths.append(store.save_content(content_type, slug, data, content))
    revalidate_content_paths(content_type, slug)
    return autocommit(
        "update" if exists else "create", content_type, slug, user_label(user), changed_paths
    )


def delete_document(user, content_type, slug):
    slug = store.EXTENSION_RE.sub("", slug)
    path = store.delete_content(content_type, slug)
    revalidate_content_paths(content_type, slug)
    return autocommit("delete", content_type, slug, user_label(user), [path])


def save_form(request, form, content_type, original_slug=None):
    """Save a validated editor form; returns the slug or None after adding form errors."""
    slug = form.cleaned_data["slug"] or original_slug or generate_unique_slug(
        content_type, form.cleaned_data["title"], exclude=original_slug
    )
    if slug in RESERVED_SLUGS or (slug != original_slug and store.get_full_path(content_type, slug).exists()):
        form.add_error("slug", "An item with this slug already exists.")
        return None
    try:
        warning = save_document(
            request.user, content_type, slug, form.to_document(), form.cleaned_data.get("content", ""),
            original_slug=original_slug,
        )
    except (ContentError, OSError) as exc:
        logger.error("Saving %s '%s' failed: %s", content_type, slug, exc)
        form.add_error(None, str(exc))
        return None
    if warning:
        messages.warning(request, f"⚠️ {warning}")
    return slug
