import json
from unittest import mock

import requests
from django.core import mail
from django.test import TestCase, override_settings
from django.urls import reverse

from content.testing import PASSWORD, TempContentMixin, make_admin

from .models import Message, Reply
from .turnstile import TurnstileConfigError, verify_token

VALID_MESSAGE = {
    'name': "Ann",
    'email': "ann@example.com",
    'subject': "Hello",
    'message': "Nice site!",
}


class VerifyTokenTests(TestCase):
    @override_settings(TURNSTILE_SECRET_KEY="")
    def test_missing_secret(self):
        with self.assertRaises(TurnstileConfigError):
            verify_token("token")

    @override_settings(TURNSTILE_SECRET_KEY="secret")
    @mock.patch('contact.turnstile.requests.post')
    def test_success(self, post):
        post.return_value.json.return_value = {'success': True}
        self.assertTrue(verify_token("token", "1.2.3.4"))
        payload = post.call_args.kwargs['data']
        self.assertEqual(payload, {'secret': "secret", 'response': "token", 'remoteip': "1.2.3.4"})

    @override_settings(TURNSTILE_SECRET_KEY="secret")
    @mock.patch('contact.turnstile.requests.post')
    def test_rejected_token(self, post):
        post.return_value.json.return_value = {'success': False, 'error-codes': ["invalid-input-response"]}
        self.assertFalse(verify_token("token"))

    @override_settings(TURNSTILE_SECRET_KEY="secret")
    @mock.patch('contact.turnstile.requests.post', side_effect=requests.ConnectionError("down"))
    def test_network_error(self, post):
        self.assertFalse(verify_token("token"))


class ContactApiTests(TempContentMixin, TestCase):
    url = '/api/contact/'

    def post(self, payload, **extra):
        return self.client.post(self.url, json.dumps(payload), content_type='application/json', **extra)

    @mock.patch('contact.views.verify_token', return_value=True)
    def test_message_is_saved(self, verify):
        response = self.post({**VALID_MESSAGE, 'turnstileToken': "ok"})
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()['success'])
        message = Message.objects.get()
        self.assertEqual(message.email, "ann@example.com")
        self.assertFalse(message.is_read)
        verify.assert_called_once_with("ok", "127.0.0.1")

    @mock.patch('contact.views.verify_token', return_value=True)
    def test_missing_token(self, verify):
        response = self.post(VALID_MESSAGE)
        self.assertEqual(response.status_code, 400)
        verify.assert_not_called()

    @mock.patch('contact.views.verify_token', return_value=False)
    def test_failed_verification(self, verify):
        response = self.post({**VALID_MESSAGE, 'turnstileToken': "bad"})
        self.assertEqual(response.status_code, 401)
        self.assertFalse(Message.objects.exists())

    @mock.patch('contact.views.verify_token', side_effect=TurnstileConfigError("no secret"))
    def test_missing_configuration(self, verify):
        response = self.post({**VALID_MESSAGE, 'turnstileToken': "ok"})
        self.assertEqual(response.status_code, 500)

    @mock.patch('contact.views.verify_token', return_value=True)
    def test_invalid_fields(self, verify):
        response = self.post({**VALID_MESSAGE, 'email': "nope", 'turnstileToken': "ok"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("email", response.json()['error'])

    def test_malformed_body(self):
        response = self.client.post(self.url, "not json", content_type='application/json')
        self.assertEqual(response.status_code, 400)

    @override_settings(CONTACT_RATE_LIMIT=2)
    @mock.patch('contact.views.verify_token', return_value=True)
    def test_rate_limit(self, verify):
        for _ in range(2):
            self.assertEqual(self.post({**VALID_MESSAGE, 'turnstileToken': "ok"}).status_code, 200)
        self.assertEqual(self.post({**VALID_MESSAGE, 'turnstileToken': "ok"}).status_code, 429)

        # another client is not affected
        response = self.post({**VALID_MESSAGE, 'turnstileToken': "ok"}, REMOTE_ADDR="10.0.0.9")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(Message.objects.count(), 3)

    @mock.patch('contact.views.notify_dashboard')
    @mock.patch('contact.views.verify_token', return_value=True)
    def test_dashboard_is_notified(self, verify, notify):
        self.post({**VALID_MESSAGE, 'turnstileToken': "ok"})
        event, data = notify.call_args.args
        self.assertEqual(event, "new_message")
        self.assertEqual(data['subject'], "Hello")


class VerifyTurnstileApiTests(TestCase):
    url = '/api/verify-turnstile/'

    def post(self, payload):
        return self.client.post(self.url, json.dumps(payload), content_type='application/json')

    def test_token_is_required(self):
        self.assertEqual(self.post({}).status_code, 400)

    @mock.patch('contact.views.verify_token', return_value=True)
    def test_valid_token(self, verify):
        self.assertEqual(self.post({'token': "ok"}).json(), {'success': True})

    @mock.patch('contact.views.verify_token', return_value=False)
    def test_invalid_token(self, verify):
        response = self.post({'token': "bad"})
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()['success'])


class ContactPageTests(TempContentMixin, TestCase):
    def test_form_renders(self):
        response = self.client.get(reverse('contact:contact'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'name="email"')

    def test_missing_token(self):
        response = self.client.post(reverse('contact:contact'), VALID_MESSAGE)
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context['form'].non_field_errors())
        self.assertFalse(Message.objects.exists())

    @mock.patch('contact.views.verify_token', return_value=True)
    def test_submit(self, verify):
        response = self.client.post(reverse('contact:contact'), {**VALID_MESSAGE, 'cf-turnstile-response': "ok"})
        self.assertRedirects(response, reverse('contact:contact'))
        self.assertEqual(Message.objects.get().subject, "Hello")


class ReplyApiTests(TempContentMixin, TestCase):
    url = '/api/admin/reply/'

    def setUp(self):
        super().setUp()
        self.admin = make_admin()
        self.client.login(username=self.admin.username, password=PASSWORD)
        self.message = Message.objects.create(**VALID_MESSAGE)

    def post(self, payload):
        return self.client.post(self.url, json.dumps(payload), content_type='application/json')

    def test_requires_login(self):
        self.client.logout()
        response = self.post({'to': "ann@example.com", 'subject': "Re", 'html': "<p>Hi</p>"})
        self.assertEqual(response.status_code, 401)

    def test_sends_mail_and_records_reply(self):
        response = self.post({
            'messageId': self.message.pk, 'to': "ann@example.com", 'subject': "Re: Hello", 'html': "<p>Thanks!</p>",
        })
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(mail.outbox), 1)
        email = mail.outbox[0]
        self.assertEqual(email.to, ["ann@example.com"])
        self.assertEqual(email.body, "Thanks!")
        self.assertEqual(email.alternatives[0][0], "<p>Thanks!</p>")

        reply = Reply.objects.get()
        self.assertEqual(reply.message, self.message)
        self.assertEqual(reply.sent_by, self.admin)
        self.message.refresh_from_db()
        self.assertTrue(self.message.is_read)

    def test_validation(self):
        response = self.post({'to': "not-an-email", 'subject': "", 'html': ""})
        self.assertEqual(response.status_code, 400)
        error = response.json()['error']
        self.assertIn("Invalid e-mail address.", error)
        self.assertIn("Subject cannot be empty.", error)
        self.assertEqual(len(mail.outbox), 0)

    def test_unknown_message(self):
        response = self.post({'messageId': 999, 'to': "ann@example.com", 'subject': "Re", 'html': "Hi"})
        self.assertEqual(response.status_code, 404)


class InboxTests(TempContentMixin, TestCase):
    def setUp(self):
        super().setUp()
        admin = make_admin()
        self.client.login(username=admin.username, password=PASSWORD)
        self.message = Message.objects.create(**VALID_MESSAGE)

    def test_list_filters_unread(self):
        Message.objects.create(**{**VALID_MESSAGE, 'subject': "Read one"}, is_read=True)
        response = self.client.get(reverse('contact:message_list'), {'status': "unread"})
        self.assertEqual([message.subject for message in response.context['inbox']], ["Hello"])
        self.assertEqual(response.context['unread_count'], 1)

    def test_opening_marks_as_read(self):
        response = self.client.get(reverse('contact:message_detail', args=[self.message.pk]))
        self.assertContains(response, "Nice site!")
        self.message.refresh_from_db()
        self.assertTrue(self.message.is_read)

    def test_reply_form(self):
        response = self.client.post(reverse('contact:message_detail', args=[self.message.pk]), {
            'to': "ann@example.com", 'subject': "Re: Hello", 'html': "<p>Hi</p>",
        })
        self.assertRedirects(response, reverse('contact:message_detail', args=[self.message.pk]))
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(self.message.replies.count(), 1)

    def test_toggle_and_delete(self):
        self.client.post(reverse('contact:toggle_read', args=[self.message.pk]))
        self.message.refresh_from_db()
        self.assertTrue(self.message.is_read)

        self.client.post(reverse('contact:delete_message', args=[self.message.pk]))
        self.assertFalse(Message.objects.exists())
