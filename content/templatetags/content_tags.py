import re

from django import template
from django.utils.safestring import mark_safe

from content.rendering import render_markdown
from content.store import as_datetime

register = template.Library()

YOUTUBE_ID_RE = re.compile(r"^.*(youtu\.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*")


@register.filter
def markdownify(text):
    return mark_safe(render_markdown(text))


@register.filter
def youtube_id(url):
    match = YOUTUBE_ID_RE.match(url or "")
    if match and len(match.group(2)) == 11:
        return match.group(2)
    return ""


@register.filter
def as_date(value):
    """Front matter dates may be strings; give templates a real date when possible."""
    return as_datetime(value) or value
