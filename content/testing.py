"""Helpers shared by the test suites of the content apps."""
import shutil
import tempfile
from pathlib import Path

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import override_settings

from . import store

PASSWORD = "s3cret-pass!"


class TempContentMixin:
    """Point CONTENT_DIR and MEDIA_ROOT at a fresh temporary directory for each test."""

    def setUp(self):
        super().setUp()
        self.tmp_dir = Path(tempfile.mkdtemp())
        self.addCleanup(shutil.rmtree, self.tmp_dir, ignore_errors=True)
        self.content_dir = self.tmp_dir / "content"
        self.content_dir.mkdir()

        overrides = override_settings(
            CONTENT_DIR=self.content_dir,
            ROBOTS_TXT_PATH=self.content_dir / "robots.txt",
            MEDIA_ROOT=self.tmp_dir / "media",
            GIT_AUTOCOMMIT=False,
            TURNSTILE_SECRET_KEY="test-secret",
            EMAIL_BACKEND="django.core.mail.backends.locmem.EmailBackend",
        )
        overrides.enable()
        self.addCleanup(overrides.disable)
        cache.clear()

    def write_post(self, slug, content="Body", **data):
        data.setdefault("title", slug.replace("-", " ").title())
        data.setdefault("date", "2024-01-01")
        return store.save_content("blog", slug, data, content)

    def write_project(self, slug, content="Body", **data):
        data.setdefault("title", slug.replace("-", " ").title())
        data.setdefault("date", "2024-01-01")
        return store.save_content("projects", slug, data, content)

    def write_popup(self, slug, **data):
        data.setdefault("title", "Popup")
        data.setdefault("isActive", True)
        data.setdefault("buttons", [])
        return store.save_content("popups", slug, data)


def make_admin(username="owner@example.com"):
    return get_user_model().objects.create_user(
        username=username, email=username, password=PASSWORD, is_staff=True
    )


def make_user(username="visitor@example.com"):
    return get_user_model().objects.create_user(username=username, email=username, password=PASSWORD)
