# dashboard/routing.py
from django.urls import re_path
from . import consumers

websocket_urlpatterns = [
    # live feed for the admin dashboard: ws/admin/dashboard/
    re_path(r"ws/admin/dashboard/$", consumers.DashboardConsumer.as_asgi()),
]
