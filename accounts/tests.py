from io import StringIO

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser, Group
from django.core.management import CommandError, call_command
from django.http import HttpResponse
from django.test import RequestFactory, TestCase
from django.urls import reverse

from content.testing import PASSWORD, make_admin, make_user

from .permissions import ADMIN_GROUP, admin_api, is_admin


class IsAdminTests(TestCase):
    def test_roles(self):
        self.assertFalse(is_admin(AnonymousUser()))
        self.assertFalse(is_admin(None))
        self.assertFalse(is_admin(make_user()))
        self.assertTrue(is_admin(make_admin()))

    def test_admin_group_member(self):
        user = make_user("editor@example.com")
        group, _ = Group.objects.get_or_create(name=ADMIN_GROUP)
        user.groups.add(group)
        self.assertTrue(is_admin(user))


class AdminApiDecoratorTests(TestCase):
    def setUp(self):
        self.factory = RequestFactory()
        self.view = admin_api(lambda request: HttpResponse("ok"))

    def call(self, user):
        request = self.factory.get("/api/admin/anything/")
        request.user = user
        return self.view(request)

    def test_anonymous_gets_401(self):
        response = self.call(AnonymousUser())
        self.assertEqual(response.status_code, 401)
        self.assertIn("error", response.json())

    def test_non_admin_gets_403(self):
        self.assertEqual(self.call(make_user()).status_code, 403)

    def test_admin_passes(self):
        self.assertEqual(self.call(make_admin()).content, b"ok")


class LoginTests(TestCase):
    def test_admin_can_log_in(self):
        admin = make_admin()
        response = self.client.post(reverse("login"), {"username": admin.username, "password": PASSWORD})
        self.assertRedirects(response, reverse("dashboard:home"), fetch_redirect_response=False)

    def test_non_admin_is_refused(self):
        user = make_user()
        response = self.client.post(reverse("login"), {"username": user.username, "password": PASSWORD})
        self.assertEqual(response.status_code, 200)
        self.assertNotIn("_auth_user_id", self.client.session)

    def test_wrong_password(self):
        admin = make_admin()
        response = self.client.post(reverse("login"), {"username": admin.username, "password": "nope"})
        self.assertEqual(response.status_code, 200)
        self.assertNotIn("_auth_user_id", self.client.session)

    def test_panel_redirects_anonymous_users_to_login(self):
        response = self.client.get(reverse("dashboard:home"))
        self.assertEqual(response.status_code, 302)
        self.assertIn(reverse("login"), response["Location"])

    def test_logout_requires_post(self):
        admin = make_admin()
        self.client.login(username=admin.username, password=PASSWORD)
        self.assertEqual(self.client.get(reverse("logout")).status_code, 405)

        response = self.client.post(reverse("logout"))
        self.assertRedirects(response, reverse("login"), fetch_redirect_response=False)
        self.assertNotIn("_auth_user_id", self.client.session)


class InitRolesCommandTests(TestCase):
    def test_creates_group_and_admin(self):
        call_command("init_roles", email="boss@example.com", password="pass-1234", stdout=StringIO())
        user = get_user_model().objects.get(username="boss@example.com")
        self.assertTrue(user.is_staff)
        self.assertTrue(user.check_password("pass-1234"))
        self.assertTrue(user.groups.filter(name=ADMIN_GROUP).exists())

    def test_password_is_required_with_an_email(self):
        with self.assertRaises(CommandError):
            call_command("init_roles", email="boss@example.com", password="", stdout=StringIO())
