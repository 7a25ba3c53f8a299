import json
from io import BytesIO
from unittest import mock

from django.contrib.auth.models import AnonymousUser
from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.http import HttpResponse
from django.test import RequestFactory, SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from PIL import Image

from history.git import GitError

from . import store
from .cache import cached_page, page_cache_key, revalidate_content_paths, revalidate_path
from .exceptions import ContentFormatError, ContentNotFound, InvalidContentPath
from .rendering import render_markdown
from .testing import PASSWORD, TempContentMixin, make_admin, make_user


class ContentPathTests(TempContentMixin, SimpleTestCase):
    def test_markdown_types_use_md_files(self):
        path = store.get_full_path("blog", "hello")
        self.assertEqual(path, self.content_dir.resolve() / "blog" / "hello.md")

    def test_extension_in_slug_is_stripped(self):
        self.assertEqual(store.get_full_path("popups", "promo.json").name, "promo.json")
        self.assertEqual(store.get_full_path("projects", "site.md").name, "site.md")

    def test_root_settings_files_ignore_the_slug(self):
        path = store.get_full_path("seo-settings", "whatever")
        self.assertEqual(path, self.content_dir.resolve() / "seo-settings.json")

    def test_traversal_attempts_are_rejected(self):
        for slug in ("../secret", "a/b", "..", "", ".hidden", "a..b"):
            with self.subTest(slug=slug):
                with self.assertRaises(InvalidContentPath):
                    store.get_full_path("blog", slug)

    def test_unknown_type_is_rejected(self):
        with self.assertRaises(InvalidContentPath):
            store.get_full_path("messages", "x")

    def test_resolve_content_file_stays_inside(self):
        self.assertEqual(store.resolve_content_file("seo-settings.json").name, "seo-settings.json")
        with self.assertRaises(InvalidContentPath):
            store.resolve_content_file("../settings.json")


class ContentStoreTests(TempContentMixin, SimpleTestCase):
    def test_markdown_round_trip_keeps_front_matter(self):
        store.save_content("blog", "hello", {"title": "Hello", "date": "2024-05-01", "tags": ["a", "b"]}, "# Hi")
        result = store.get_content("blog", "hello")
        self.assertEqual(result["data"], {"title": "Hello", "date": "2024-05-01", "tags": ["a", "b"]})
        self.assertEqual(result["content"], "# Hi")

    def test_missing_file_raises_not_found(self):
        with self.assertRaises(ContentNotFound):
            store.get_content("blog", "nope")

    def test_empty_files_yield_empty_data(self):
        (self.content_dir / "blog").mkdir()
        (self.content_dir / "blog" / "empty.md").write_text("")
        (self.content_dir / "testimonials.json").write_text("  ")
        self.assertEqual(store.get_content("blog", "empty"), {"data": {}, "content": ""})
        self.assertEqual(store.get_content("testimonials", "testimonials")["data"], [])

    def test_malformed_json_raises_and_is_skipped_when_listing(self):
        self.write_popup("good", title="Good")
        (self.content_dir / "popups" / "bad.json").write_text("{not json")
        with self.assertRaises(ContentFormatError):
            store.get_content("popups", "bad")
        self.assertEqual([item["slug"] for item in store.list_content("popups")], ["good"])

    def test_list_content_of_missing_directory_is_empty(self):
        self.assertEqual(store.list_content("projects"), [])

    def test_list_content_ignores_other_extensions(self):
        self.write_post("one")
        (self.content_dir / "blog" / "notes.txt").write_text("x")
        self.assertEqual([item["slug"] for item in store.list_content("blog")], ["one"])

    def test_json_array_file_is_listed_flat(self):
        store.save_content("testimonials", "testimonials", [{"name": "A"}, {"name": "B"}])
        self.assertEqual(store.list_content("testimonials"), [{"name": "A"}, {"name": "B"}])

    def test_delete_of_missing_file_is_not_an_error(self):
        path = store.delete_content("blog", "ghost")
        self.assertFalse(path.exists())

    def test_sorting_puts_ordered_items_first(self):
        self.write_project("old", date="2020-01-01")
        self.write_project("new", date="2024-01-01")
        self.write_project("second", date="2019-01-01", order=2)
        self.write_project("first", date="2018-01-01", order=1)
        self.write_project("undated", date="")
        slugs = [item["slug"] for item in store.get_sorted("projects")]
        self.assertEqual(slugs, ["first", "second", "new", "old", "undated"])

    def test_settings_fall_back_to_defaults(self):
        self.assertEqual(store.get_seo_settings(), store.DEFAULT_SEO_SETTINGS)
        self.assertEqual(store.get_testimonials(), [])

        store.save_content("seo-settings", "seo-settings", {"siteTitle": "Mine"})
        seo = store.get_seo_settings()
        self.assertEqual(seo["siteTitle"], "Mine")
        self.assertEqual(seo["og"], store.DEFAULT_SEO_SETTINGS["og"])

    def test_unreadable_settings_fall_back_to_defaults(self):
        (self.content_dir / "home-settings.json").write_text("[broken")
        self.assertEqual(store.get_home_settings(), store.DEFAULT_HOME_SETTINGS)

    def test_get_popup(self):
        self.write_popup("promo", title="Sale")
        self.assertEqual(store.get_popup("promo")["title"], "Sale")
        self.assertEqual(store.get_popup("promo")["slug"], "promo")
        self.assertIsNone(store.get_popup("missing"))


class RenderMarkdownTests(SimpleTestCase):
    def test_raw_html_is_escaped(self):
        html = render_markdown("Hello <script>alert(1)</script>")
        self.assertNotIn("<script>", html)
        self.assertIn("&lt;script&gt;", html)

    def test_html_blocks_are_escaped(self):
        html = render_markdown('<div onclick="x()">hi</div>')
        self.assertNotIn("<div", html)

    def test_javascript_links_are_neutralised(self):
        html = render_markdown("[click](javascript:alert(1))")
        self.assertIn('href="#"', html)
        self.assertNotIn("javascript:", html)

    def test_tables_and_fenced_code(self):
        html = render_markdown("| a | b |\n|---|---|\n| 1 | 2 |\n\n```python\nprint(1)\n```\n")
        self.assertIn("<table>", html)
        self.assertIn("language-python", html)


class PageCacheTests(TestCase):
    def setUp(self):
        cache.clear()
        self.factory = RequestFactory()
        self.calls = 0

        @cached_page
        def view(request):
            self.calls += 1
            return HttpResponse(f"render {self.calls}")

        self.view = view

    def get(self, path):
        request = self.factory.get(path)
        request.user = AnonymousUser()
        return self.view(request)

    def test_anonymous_get_is_cached_until_revalidated(self):
        self.assertEqual(self.get("/blog/").content, b"render 1")
        self.assertEqual(self.get("/blog/").content, b"render 1")
        revalidate_path("/blog/")
        self.assertEqual(self.get("/blog/").content, b"render 2")

    def test_query_strings_are_cached_separately(self):
        self.get("/blog/")
        self.assertEqual(self.get("/blog/?page=2").content, b"render 2")

    def test_long_urls_give_short_keys(self):
        path = "/blog/" + "a" * 300 + "/?q=" + "b" * 500
        request = self.factory.get(path)
        self.assertLessEqual(len(page_cache_key(request)), 250)
        request.user = AnonymousUser()
        self.assertEqual(self.view(request).content, b"render 1")
        self.assertEqual(self.get(path).content, b"render 1")

    def test_layout_revalidation_clears_every_page(self):
        self.get("/about/")
        self.get("/blog/")
        revalidate_path("/", layout=True)
        self.assertEqual(self.get("/about/").content, b"render 3")
        self.assertEqual(self.get("/blog/").content, b"render 4")

    def test_content_revalidation_covers_listing_and_detail(self):
        self.get("/blog/post/")
        self.get("/")
        revalidate_content_paths("blog", "post")
        self.assertEqual(self.get("/blog/post/").content, b"render 3")
        self.assertEqual(self.get("/").content, b"render 4")

    def test_authenticated_users_bypass_the_cache(self):
        request = self.factory.get("/blog/")
        request.user = make_user()
        self.view(request)
        self.view(request)
        self.assertEqual(self.calls, 2)


class AdminApiTestCase(TempContentMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.admin = make_admin()
        self.client.login(username=self.admin.username, password=PASSWORD)

    def post_json(self, url, payload):
        return self.client.post(url, json.dumps(payload), content_type="application/json")


class ContentApiTests(AdminApiTestCase):
    url = "/api/admin/content/"

    def test_requires_login(self):
        self.client.logout()
        response = self.client.get(self.url, {"type": "blog"})
        self.assertEqual(response.status_code, 401)

    def test_requires_admin(self):
        self.client.logout()
        user = make_user()
        self.client.login(username=user.username, password=PASSWORD)
        response = self.client.get(self.url, {"type": "blog"})
        self.assertEqual(response.status_code, 403)

    def test_invalid_type(self):
        response = self.client.get(self.url, {"type": "secrets"})
        self.assertEqual(response.status_code, 400)

    def test_list_and_get(self):
        self.write_post("hello", title="Hello")
        response = self.client.get(self.url, {"type": "blog"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()[0]["slug"], "hello")

        response = self.client.get(self.url, {"type": "blog", "slug": "hello"})
        self.assertEqual(response.json()["data"]["title"], "Hello")

        response = self.client.get(self.url, {"type": "blog", "slug": "missing"})
        self.assertEqual(response.status_code, 404)

    def test_create_and_rename(self):
        response = self.post_json(self.url, {
            "type": "blog", "slug": "first", "data": {"title": "First"}, "content": "Text",
        })
        self.assertEqual(response.status_code, 200)
        self.assertTrue((self.content_dir / "blog" / "first.md").exists())

        response = self.post_json(self.url, {
            "type": "blog", "slug": "renamed", "originalSlug": "first",
            "data": {"title": "First"}, "content": "Text",
        })
        self.assertEqual(response.status_code, 200)
        self.assertFalse((self.content_dir / "blog" / "first.md").exists())
        self.assertTrue((self.content_dir / "blog" / "renamed.md").exists())

    def test_validation_errors(self):
        response = self.post_json(self.url, {"type": "blog", "slug": "x", "data": {"title": ""}})
        self.assertEqual(response.status_code, 400)
        self.assertIn("Validation error", response.json()["error"])

        response = self.post_json(self.url, {"type": "blog", "slug": "../x", "data": {"title": "T"}})
        self.assertEqual(response.status_code, 400)

        response = self.post_json(self.url, {
            "type": "popups", "slug": "p",
            "data": {"title": "P", "buttons": [{"text": "Go", "actionType": "explode"}]},
        })
        self.assertEqual(response.status_code, 400)

    def test_malformed_body(self):
        response = self.client.post(self.url, "{nope", content_type="application/json")
        self.assertEqual(response.status_code, 400)

    def test_delete(self):
        self.write_post("bye")
        response = self.client.delete(f"{self.url}?type=blog&slug=bye")
        self.assertEqual(response.status_code, 200)
        self.assertFalse((self.content_dir / "blog" / "bye.md").exists())

        response = self.client.delete(f"{self.url}?type=blog")
        self.assertEqual(response.status_code, 400)

    def test_save_revalidates_public_pages(self):
        with mock.patch("content.editing.revalidate_content_paths") as revalidate:
            self.post_json(self.url, {"type": "projects", "slug": "site", "data": {"title": "Site"}})
        revalidate.assert_called_with("projects", "site")

    def test_slug_with_extension_refreshes_the_cached_page(self):
        self.write_post("hello", title="Old title")
        self.client.logout()
        self.assertContains(self.client.get("/blog/hello/"), "Old title")

        self.client.login(username=self.admin.username, password=PASSWORD)
        response = self.post_json(self.url, {"type": "blog", "slug": "hello.md", "data": {"title": "New title"}})
        self.assertEqual(response.status_code, 200)
        self.client.logout()
        self.assertContains(self.client.get("/blog/hello/"), "New title")

    def test_delete_with_extension_revalidates_the_bare_slug(self):
        self.write_post("bye")
        with mock.patch("content.editing.revalidate_content_paths") as revalidate:
            self.client.delete(f"{self.url}?type=blog&slug=bye.md")
        revalidate.assert_called_with("blog", "bye")

    @override_settings(GIT_AUTOCOMMIT=True)
    def test_commit_failure_is_reported_as_warning(self):
        with mock.patch("history.git.run_git", side_effect=GitError("boom")):
            response = self.post_json(self.url, {"type": "blog", "slug": "w", "data": {"title": "W"}})
        self.assertEqual(response.status_code, 200)
        self.assertIn("boom", response.json()["warning"])


class SettingsApiTests(AdminApiTestCase):
    url = "/api/admin/settings/"

    def test_read_and_write_settings(self):
        response = self.post_json(self.url, {
            "file": "seo-settings.json", "data": {"siteTitle": "Hi"}, "robotsTxt": "User-agent: *\n",
        })
        self.assertEqual(response.status_code, 200)
        self.assertEqual((self.content_dir / "robots.txt").read_text(), "User-agent: *\n")

        response = self.client.get(self.url, {"file": "seo-settings.json"})
        self.assertEqual(response.json(), {"siteTitle": "Hi"})

    def test_path_escape_is_rejected(self):
        response = self.client.get(self.url, {"file": "../../etc/passwd.json"})
        self.assertEqual(response.status_code, 400)

    def test_missing_file_is_404(self):
        response = self.client.get(self.url, {"file": "home-settings.json"})
        self.assertEqual(response.status_code, 404)

    def test_missing_fields(self):
        response = self.post_json(self.url, {"file": "seo-settings.json"})
        self.assertEqual(response.status_code, 400)

    def test_empty_object_and_list_are_saved(self):
        for value in ({}, []):
            with self.subTest(value=value):
                response = self.post_json(self.url, {"file": "home-settings.json", "data": value})
                self.assertEqual(response.status_code, 200)
                self.assertEqual(self.client.get(self.url, {"file": "home-settings.json"}).json(), value)


class UploadTests(AdminApiTestCase):
    def make_image(self, size=(3000, 1500)):
        buffer = BytesIO()
        Image.new("RGB", size, "red").save(buffer, "PNG")
        return SimpleUploadedFile("photo.png", buffer.getvalue(), content_type="image/png")

    def test_upload_resizes_and_converts_to_webp(self):
        response = self.client.post(reverse("content:upload_image"), {"file": self.make_image()})
        self.assertEqual(response.status_code, 200)
        result = response.json()
        self.assertTrue(result["success"])
        self.assertTrue(result["url"].endswith(".webp"))

        saved = next((self.tmp_dir / "media" / "images").iterdir())
        with Image.open(saved) as image:
            self.assertEqual(image.format, "WEBP")
            self.assertLessEqual(image.width, 1920)
            self.assertLessEqual(image.height, 1080)

    def test_non_image_is_rejected(self):
        upload = SimpleUploadedFile("notes.txt", b"hello", content_type="text/plain")
        response = self.client.post(reverse("content:upload_image"), {"file": upload})
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()["success"])

    def test_gallery_lists_and_deletes_images(self):
        self.client.post(reverse("content:upload_image"), {"file": self.make_image((10, 10))})
        images = self.client.get(reverse("content:images_api")).json()
        self.assertEqual(len(images), 1)

        url = reverse("content:images_api")
        response = self.client.delete(f"{url}?fileName={images[0]['name']}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.client.get(url).json(), [])

        response = self.client.delete(f"{url}?fileName=../settings.py")
        self.assertEqual(response.status_code, 400)


class RobotsTxtTests(TempContentMixin, TestCase):
    def test_default_robots_txt(self):
        response = self.client.get("/robots.txt")
        self.assertEqual(response.status_code, 200)
        self.assertIn(b"Disallow: /panel/", response.content)
        self.assertIn(b"Sitemap:", response.content)

    def test_override_file_wins(self):
        (self.content_dir / "robots.txt").write_text("User-agent: *\nDisallow: /\n")
        response = self.client.get("/robots.txt")
        self.assertEqual(response.content, b"User-agent: *\nDisallow: /\n")


class SitemapTests(TempContentMixin, TestCase):
    def test_lists_pages_and_content(self):
        self.write_post('hello', date="2024-03-01")
        self.write_project('api')
        response = self.client.get("/sitemap.xml")
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "http://testserver/blog/hello/")
        self.assertContains(response, "http://testserver/projects/api/")
        self.assertContains(response, "<lastmod>2024-03-01")
        self.assertContains(response, "http://testserver/about/")


class SecurityHeadersTests(TempContentMixin, TestCase):
    def test_pages_get_the_policy(self):
        response = self.client.get("/")
        self.assertIn("frame-ancestors 'none'", response["Content-Security-Policy"])
        self.assertEqual(response["X-Content-Type-Options"], "nosniff")
        self.assertEqual(response["X-Frame-Options"], "DENY")

    def test_api_responses_are_left_alone(self):
        response = self.client.get("/api/popups/")
        self.assertNotIn("Content-Security-Policy", response)
