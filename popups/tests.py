import json

from django.test import TestCase
from django.urls import reverse

from content import store
from content.testing import PASSWORD, TempContentMixin, make_admin

from .forms import PopupForm


class PopupApiTests(TempContentMixin, TestCase):
    def test_list(self):
        self.write_popup('promo', title="Sale")
        self.write_popup('old', isActive=False)
        response = self.client.get(reverse('popup_list_api'))
        self.assertEqual(sorted(popup['slug'] for popup in response.json()), ['old', 'promo'])

    def test_detail_of_active_popup(self):
        self.write_popup('promo', title="Sale", buttons=[{'text': "Go", 'actionType': "redirect", 'actionValue': "/"}])
        data = self.client.get(reverse('popup_detail_api', args=['promo'])).json()
        self.assertEqual(data['title'], "Sale")
        self.assertEqual(data['slug'], "promo")
        self.assertEqual(data['buttons'][0]['actionType'], "redirect")

    def test_inactive_popup_is_forbidden(self):
        self.write_popup('old', isActive=False)
        self.assertEqual(self.client.get(reverse('popup_detail_api', args=['old'])).status_code, 403)

    def test_missing_popup(self):
        self.assertEqual(self.client.get(reverse('popup_detail_api', args=['none'])).status_code, 404)

    def test_invalid_slug(self):
        self.assertEqual(self.client.get('/api/popups/a..b/').status_code, 400)


class PopupRenderingTests(TempContentMixin, TestCase):
    def test_page_shows_requested_popup(self):
        self.write_popup('promo', title="Big Sale", content="<p>Half price</p>")
        response = self.client.get('/', {'rp': 'promo'})
        self.assertContains(response, 'id="site-popup"')
        self.assertContains(response, "Big Sale")
        self.assertContains(response, "<p>Half price</p>", html=False)

    def test_inactive_or_missing_popup_is_not_rendered(self):
        self.write_popup('old', title="Old", isActive=False)
        self.assertNotContains(self.client.get('/', {'rp': 'old'}), 'id="site-popup"')
        self.assertNotContains(self.client.get('/', {'rp': 'missing'}), 'id="site-popup"')
        self.assertNotContains(self.client.get('/', {'rp': '../x'}), 'id="site-popup"')

    def test_youtube_embed_wins_over_image(self):
        self.write_popup(
            'video', title="Watch", imageUrl="/media/images/a.webp",
            youtubeEmbedUrl="https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        )
        response = self.client.get('/', {'rp': 'video'})
        self.assertContains(response, "https://www.youtube.com/embed/dQw4w9WgXcQ")
        self.assertNotContains(response, "/media/images/a.webp")


class PopupFormTests(TestCase):
    def form(self, **data):
        data.setdefault('title', "Sale")
        return PopupForm(data)

    def test_valid_buttons(self):
        form = self.form(buttons=json.dumps([{'text': "Go", 'actionType': "show-text", 'actionValue': "Hi"}]), is_active="on")
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.to_document()['buttons'][0]['text'], "Go")
        self.assertTrue(form.to_document()['isActive'])

    def test_empty_buttons_become_a_list(self):
        form = self.form()
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.to_document()['buttons'], [])

    def test_unknown_action_type(self):
        form = self.form(buttons=json.dumps([{'text': "Go", 'actionType': "explode"}]))
        self.assertFalse(form.is_valid())
        self.assertIn('buttons', form.errors)

    def test_button_text_is_required(self):
        form = self.form(buttons=json.dumps([{'text': " ", 'actionType': "redirect"}]))
        self.assertFalse(form.is_valid())

    def test_buttons_must_be_a_list(self):
        form = self.form(buttons=json.dumps({'text': "Go"}))
        self.assertFalse(form.is_valid())


class ManagePopupsTests(TempContentMixin, TestCase):
    def setUp(self):
        super().setUp()
        admin = make_admin()
        self.client.login(username=admin.username, password=PASSWORD)

    def test_create(self):
        response = self.client.post(reverse('popups:new_popup'), {
            'title': "Summer Sale", 'content': "<b>Now</b>", 'buttons': "[]", 'is_active': "on",
        })
        self.assertRedirects(response, reverse('popups:manage_popups'))
        popup = store.get_popup('summer-sale')
        self.assertTrue(popup['isActive'])
        self.assertEqual(popup['content'], "<b>Now</b>")

    def test_edit_and_deactivate(self):
        self.write_popup('promo', title="Sale")
        response = self.client.post(reverse('popups:edit_popup', args=['promo']), {
            'title': "Sale", 'slug': "promo", 'buttons': "[]",
        })
        self.assertRedirects(response, reverse('popups:manage_popups'))
        self.assertFalse(store.get_popup('promo')['isActive'])

    def test_edit_unknown_popup(self):
        self.assertEqual(self.client.get(reverse('popups:edit_popup', args=['nope'])).status_code, 404)

    def test_delete(self):
        self.write_popup('promo')
        response = self.client.post(reverse('popups:delete_popup', args=['promo']))
        self.assertRedirects(response, reverse('popups:manage_popups'))
        self.assertIsNone(store.get_popup('promo'))

    def test_saving_drops_every_cached_page(self):
        self.write_popup('promo', title="Before")
        self.client.logout()
        self.assertContains(self.client.get('/', {'rp': 'promo'}), "Before")

        self.client.login(username="owner@example.com", password=PASSWORD)
        self.client.post(reverse('popups:edit_popup', args=['promo']), {
            'title': "After", 'slug': "promo", 'buttons': "[]", 'is_active': "on",
        })
        self.client.logout()
        self.assertContains(self.client.get('/', {'rp': 'promo'}), "After")
