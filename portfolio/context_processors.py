from django.conf import settings

from accounts.permissions import is_admin
from content import store


def site(request):
    return {
        "seo": store.get_seo_settings(),
        "base_url": settings.BASE_URL,
        "yandex_metrica_id": settings.YANDEX_METRICA_ID,
        "turnstile_site_key": settings.TURNSTILE_SITE_KEY,
        "is_admin": is_admin(getattr(request, "user", None)),
    }
