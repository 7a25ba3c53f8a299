import logging
import re
from io import BytesIO
from uuid import uuid4

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.http import HttpResponse, JsonResponse
from django.shortcuts import render
from django.views.decorators.http import require_GET, require_http_methods, require_POST
from PIL import Image

from accounts.permissions import admin_api, admin_required
from history.git import autocommit

from . import store
from .api import json_error, load_json_body, user_label
from .cache import revalidate_path
from .editing import delete_document, save_document
from .exceptions import ContentError, ContentNotFound, InvalidContentPath
from .forms import ContentPostForm, ImageUploadForm, SettingsPostForm, form_error_message

logger = logging.getLogger(__name__)

MAX_IMAGE_SIZE = (1920, 1080)
WEBP_QUALITY = 80


def _saved(message, warning=None):
    payload = {"message": message}
    if warning:
        payload["warning"] = warning
    return JsonResponse(payload)


@admin_api
@require_http_methods(["GET", "POST", "DELETE"])
def content_api(request):
    if request.method == "POST":
        return _save_content(request)
    if request.method == "DELETE":
        return _delete_content(request)

    content_type = request.GET.get("type")
    slug = request.GET.get("slug")
    if content_type not in store.ALLOWED_TYPES:
        return json_error("Invalid 'type' parameter.", 400)

    try:
        result = store.get_content(content_type, slug) if slug else store.list_content(content_type)
    except ContentNotFound as exc:
        return json_error(str(exc), 404)
    except InvalidContentPath as exc:
        return json_error(str(exc), 400)
    except ContentError as exc:
        return json_error("Server error: the content could not be read.", 500, exc)
    return JsonResponse(result, safe=False)


def _save_content(request):
    body = load_json_body(request)
    if body is None:
        return json_error("The request body is malformed or empty.", 400)

    form = ContentPostForm(body)
    if not form.is_valid():
        return json_error(f"Validation error: {form_error_message(form)}", 400)

    try:
        warning = save_document(
            request.user,
            form.cleaned_data["type"],
            form.cleaned_data["slug"],
            form.cleaned_data["data"],
            form.cleaned_data["content"],
            original_slug=form.cleaned_data["originalSlug"],
        )
    except InvalidContentPath as exc:
        return json_error(str(exc), 400)
    except (ContentError, OSError) as exc:
        return json_error(str(exc) or "Unexpected error while saving the content.", 500, exc)
    return _saved("Content saved successfully.", warning)


def _delete_content(request):
    content_type = request.GET.get("type")
    slug = request.GET.get("slug")
    if not content_type or not slug or content_type not in store.ALLOWED_TYPES:
        return json_error("Invalid or missing parameters: 'type' and 'slug' are required.", 400)

    try:
        warning = delete_document(request.user, content_type, slug)
    except InvalidContentPath as exc:
        return json_error(str(exc), 400)
    except OSError as exc:
        return json_error("The content could not be deleted.", 500, exc)
    return _saved("Content deleted successfully.", warning)


@admin_api
@require_http_methods(["GET", "POST"])
def settings_api(request):
    if request.method == "POST":
        return _save_settings(request)

    name = request.GET.get("file")
    if not name:
        return json_error("The 'file' parameter is required.", 400)
    try:
        path = store.resolve_content_file(name)
    except InvalidContentPath as exc:
        return json_error(str(exc), 400)

    try:
        data = store.load_json_file(path)
    except (ContentError, OSError) as exc:
        return json_error("Settings file not found or unreadable.", 404, exc)
    return JsonResponse(data, safe=False)


def _save_settings(request):
    body = load_json_body(request)
    if body is None:
        return json_error("The request body is malformed or empty.", 400)

    form = SettingsPostForm(body)
    if not form.is_valid():
        return json_error(f"Missing fields: 'file' and 'data' are required. {form_error_message(form)}", 400)

    name = form.cleaned_data["file"]
    try:
        path = store.resolve_content_file(name)
    except InvalidContentPath as exc:
        return json_error(str(exc), 400)

    robots_txt = body.get("robotsTxt")
    changed_paths = [path]
    try:
        store.write_json_file(path, form.cleaned_data["data"])
        if isinstance(robots_txt, str):
            robots_path = settings.ROBOTS_TXT_PATH
            robots_path.parent.mkdir(parents=True, exist_ok=True)
            robots_path.write_text(robots_txt, encoding="utf-8")
            changed_paths.append(robots_path)
    except OSError as exc:
        return json_error("A server error occurred while saving the settings.", 500, exc)

    if name == "home-settings.json":
        revalidate_path("/")
    elif name == "seo-settings.json":
        revalidate_path("/", layout=True)

    warning = autocommit("update", "settings", name, user_label(request.user), changed_paths)
    return _saved("Settings saved successfully!", warning)


@admin_api
@require_POST
def upload_image(request):
    form = ImageUploadForm(request.POST, request.FILES)
    if not form.is_valid():
        return JsonResponse({"success": False, "error": form_error_message(form)}, status=400)

    try:
        with Image.open(form.cleaned_data["file"]) as image:
            # thumbnail() keeps the aspect ratio and never enlarges
            image.thumbnail(MAX_IMAGE_SIZE)
            if image.mode not in ("RGB", "RGBA"):
                image = image.convert("RGBA" if "A" in image.getbands() else "RGB")
            buffer = BytesIO()
            image.save(buffer, "WEBP", quality=WEBP_QUALITY)
        name = default_storage.save(f"images/{uuid4().hex}.webp", ContentFile(buffer.getvalue()))
    except OSError as exc:
        logger.error("Image processing failed: %s", exc, exc_info=exc)
        return JsonResponse(
            {"success": False, "error": "A server error occurred while processing the image."}, status=500
        )

    logger.info("Uploaded image %s", name)
    return JsonResponse({"success": True, "url": default_storage.url(name)})


DEFAULT_ROBOTS_TXT = """User-agent: *
Allow: /
Disallow: /panel/
Disallow: /api/

Sitemap: {base_url}/sitemap.xml
"""


@require_GET
def robots_txt(request):
    robots_path = settings.ROBOTS_TXT_PATH
    if robots_path.is_file():
        text = robots_path.read_text(encoding="utf-8")
    else:
        text = DEFAULT_ROBOTS_TXT.format(base_url=settings.BASE_URL)
    return HttpResponse(text, content_type="text/plain")


IMAGE_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*\.(webp|png|jpe?g|gif)$", re.I)


@admin_api
@require_http_methods(["GET", "DELETE"])
def images_api(request):
    if request.method == "DELETE":
        name = request.GET.get("fileName", "")
        if not IMAGE_NAME_RE.match(name):
            return json_error("A valid file name is required.", 400)
        path = f"images/{name}"
        if not default_storage.exists(path):
            return json_error("Image not found.", 404)
        default_storage.delete(path)
        logger.info("Deleted image %s", path)
        return JsonResponse({"message": "Image deleted successfully."})

    try:
        _dirs, files = default_storage.listdir("images")
    except FileNotFoundError:
        files = []
    images = [
        {"name": name, "url": default_storage.url(f"images/{name}")}
        for name in sorted(files) if IMAGE_NAME_RE.match(name)
    ]
    return JsonResponse(images, safe=False)


@admin_required
def gallery(request):
    return render(request, 'content/gallery.html')
