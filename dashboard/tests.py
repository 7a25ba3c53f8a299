import json
from unittest import mock

from channels.db import database_sync_to_async
from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser
from django.test import TestCase, TransactionTestCase
from django.urls import reverse

from contact.models import Message
from content import store
from content.testing import PASSWORD, TempContentMixin, make_admin, make_user

from .consumers import DashboardConsumer
from .notify import DASHBOARD_GROUP, notify_dashboard
from .stats import dashboard_stats


def create_message(**kwargs):
    kwargs.setdefault('name', "Ann")
    kwargs.setdefault('email', "ann@example.com")
    kwargs.setdefault('subject', "Hello")
    kwargs.setdefault('message', "Hi there")
    return Message.objects.create(**kwargs)


class StatsTests(TempContentMixin, TestCase):
    def test_counts(self):
        self.write_post('a')
        self.write_post('b')
        self.write_project('p')
        create_message()
        create_message(is_read=True)
        self.assertEqual(dashboard_stats(), {
            'blog': 2, 'projects': 1, 'popups': 0, 'messages': 2, 'unread_messages': 1,
        })


class NotifyTests(TestCase):
    def test_failures_are_logged_not_raised(self):
        with mock.patch('dashboard.notify.get_channel_layer') as get_layer:
            get_layer.return_value.group_send = mock.AsyncMock(side_effect=RuntimeError("layer down"))
            with self.assertLogs('dashboard.notify', level='WARNING'):
                notify_dashboard("new_message", {})


class DashboardViewTests(TempContentMixin, TestCase):
    def setUp(self):
        super().setUp()
        admin = make_admin()
        self.client.login(username=admin.username, password=PASSWORD)

    @mock.patch('dashboard.views.get_commit_history', return_value=[])
    def test_home(self, history):
        create_message(subject="Question")
        response = self.client.get(reverse('dashboard:home'))
        self.assertContains(response, "Question")
        self.assertEqual(response.context['stats']['unread_messages'], 1)

    def test_non_admin_is_redirected(self):
        self.client.logout()
        user = make_user()
        self.client.login(username=user.username, password=PASSWORD)
        self.assertEqual(self.client.get(reverse('dashboard:home')).status_code, 302)

    def test_home_settings(self):
        response = self.client.post(reverse('dashboard:home_settings'), {
            'featured_type': 'video', 'youtube_url': "https://youtu.be/dQw4w9WgXcQ",
        })
        self.assertRedirects(response, reverse('dashboard:home_settings'))
        featured = store.get_home_settings()['featuredContent']
        self.assertEqual(featured['type'], 'video')
        self.assertEqual(featured['youtubeUrl'], "https://youtu.be/dQw4w9WgXcQ")

    def test_video_needs_url(self):
        response = self.client.post(reverse('dashboard:home_settings'), {'featured_type': 'video'})
        self.assertEqual(response.status_code, 200)
        self.assertIn('youtube_url', response.context['form'].errors)

    def seo_data(self, **extra):
        return {
            'site_title': "My Site", 'site_description': "About me", 'site_keywords': "django, python",
            'og_title': "OG", 'twitter_card': "summary", **extra,
        }

    def test_seo_settings(self):
        response = self.client.post(reverse('dashboard:seo_settings'), self.seo_data(robots_txt="User-agent: *\n"))
        self.assertRedirects(response, reverse('dashboard:seo_settings'))
        seo = store.get_seo_settings()
        self.assertEqual(seo['siteKeywords'], ["django", "python"])
        self.assertEqual(seo['og']['title'], "OG")
        self.assertEqual((self.content_dir / "robots.txt").read_text(), "User-agent: *\n")

        self.client.logout()
        self.assertContains(self.client.get('/'), "<title>My Site</title>", html=False)

    def test_empty_robots_txt_restores_the_default(self):
        (self.content_dir / "robots.txt").write_text("custom")
        self.client.post(reverse('dashboard:seo_settings'), self.seo_data(robots_txt=""))
        self.assertFalse((self.content_dir / "robots.txt").exists())


class DashboardConsumerTests(TempContentMixin, TransactionTestCase):
    async def connect(self, user):
        communicator = WebsocketCommunicator(DashboardConsumer.as_asgi(), "/ws/admin/dashboard/")
        communicator.scope["user"] = user
        connected, _ = await communicator.connect()
        return communicator, connected

    async def test_anonymous_is_rejected(self):
        communicator, connected = await self.connect(AnonymousUser())
        self.assertFalse(connected)

    async def test_non_admin_is_rejected(self):
        user = await database_sync_to_async(make_user)()
        communicator, connected = await self.connect(user)
        self.assertFalse(connected)

    async def test_admin_receives_stats_and_events(self):
        admin = await database_sync_to_async(make_admin)()
        message = await database_sync_to_async(create_message)()

        communicator, connected = await self.connect(admin)
        self.assertTrue(connected)
        first = await communicator.receive_json_from()
        self.assertEqual(first['action'], "stats")
        self.assertEqual(first['data']['unread_messages'], 1)

        await communicator.send_json_to({'action': "refresh"})
        self.assertEqual((await communicator.receive_json_from())['action'], "stats")

        await communicator.send_json_to({'action': "mark_read", 'message_id': message.id})
        event = await communicator.receive_json_from()
        self.assertEqual(event, {'action': "message_read", 'data': {'id': message.id}})
        stats = await communicator.receive_json_from()
        self.assertEqual(stats['data']['unread_messages'], 0)

        await communicator.disconnect()

    async def test_group_events_are_forwarded(self):
        admin = await database_sync_to_async(make_admin)()
        communicator, connected = await self.connect(admin)
        await communicator.receive_json_from()

        await get_channel_layer().group_send(
            DASHBOARD_GROUP, {'type': "dashboard.event", 'event': "new_message", 'data': {'id': 7}},
        )
        self.assertEqual(await communicator.receive_json_from(), {'action': "new_message", 'data': {'id': 7}})
        self.assertEqual((await communicator.receive_json_from())['action'], "stats")
        await communicator.disconnect()

    async def test_invalid_json(self):
        admin = await database_sync_to_async(make_admin)()
        communicator, connected = await self.connect(admin)
        await communicator.receive_json_from()

        await communicator.send_to(text_data="{oops")
        response = json.loads(await communicator.receive_from())
        self.assertEqual(response['action'], "error")
        await communicator.disconnect()

    async def test_non_object_json(self):
        admin = await database_sync_to_async(make_admin)()
        communicator, connected = await self.connect(admin)
        await communicator.receive_json_from()

        for payload in ("5", "[]"):
            await communicator.send_to(text_data=payload)
            response = json.loads(await communicator.receive_from())
            self.assertEqual(response['action'], "error")

        await communicator.send_json_to({'action': "refresh"})
        self.assertEqual((await communicator.receive_json_from())['action'], "stats")
        await communicator.disconnect()
