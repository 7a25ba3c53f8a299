import logging

from django import template

from content import store
from content.exceptions import ContentError

logger = logging.getLogger(__name__)

register = template.Library()


@register.inclusion_tag('popups/popup.html', takes_context=True)
def popup(context):
    """Render the popup named by the ``rp`` query parameter, if it exists and is active."""
    request = context.get('request')
    slug = request.GET.get('rp', '').strip() if request else ''
    if not slug:
        return {'popup': None}
    try:
        data = store.get_popup(slug)
    except ContentError as exc:
        logger.warning("Popup '%s' could not be shown: %s", slug, exc)
        return {'popup': None}
    if not data or not data.get('isActive'):
        return {'popup': None}
    return {'popup': data}
