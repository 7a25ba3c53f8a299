# accounts/permissions.py
from functools import wraps

from django.contrib.auth.decorators import user_passes_test
from django.http import JsonResponse

ADMIN_GROUP = "Admin"


def is_admin(user):
    if user is None or not user.is_authenticated:
        return False
    return user.is_superuser or user.is_staff or user.groups.filter(name=ADMIN_GROUP).exists()


# HTML views: anonymous users and non-admins are sent to the login page.
admin_required = user_passes_test(is_admin)


def admin_api(view_func):
    """JSON counterpart of ``admin_required``: 401 without a session, 403 without the admin role."""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({"error": "Unauthorized. Please log in."}, status=401)
        if not is_admin(request.user):
            return JsonResponse({"error": "You need admin rights to do this."}, status=403)
        return view_func(request, *args, **kwargs)
    return wrapper
