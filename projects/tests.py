from django.test import TestCase
from django.urls import reverse

from content import store
from content.testing import PASSWORD, TempContentMixin, make_admin

from .forms import ProjectForm
from .views import featured_projects


class ProjectFormTests(TestCase):
    def test_to_document_uses_stored_keys(self):
        form = ProjectForm({
            'title': "Site", 'date': "2024-01-01", 'technologies': "Django, Redis",
            'live_demo': "https://example.com", 'featured': "on",
        })
        self.assertTrue(form.is_valid(), form.errors)
        document = form.to_document()
        self.assertEqual(document['technologies'], ["Django", "Redis"])
        self.assertEqual(document['liveDemo'], "https://example.com")
        self.assertTrue(document['featured'])
        self.assertFalse(document['isLive'])
        self.assertNotIn('order', document)

    def test_order_is_kept_when_set(self):
        form = ProjectForm({'title': "Site", 'date': "2024-01-01", 'order': "0"})
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.to_document()['order'], 0)

    def test_invalid_url(self):
        form = ProjectForm({'title': "Site", 'date': "2024-01-01", 'github_repo': "not a url"})
        self.assertFalse(form.is_valid())
        self.assertIn('github_repo', form.errors)

    def test_initial_from_document(self):
        initial = ProjectForm.initial_from({'title': "T", 'mainImage': "/m.webp", 'isLive': True})
        self.assertEqual(initial['main_image'], "/m.webp")
        self.assertTrue(initial['is_live'])
        self.assertIsNone(initial['date'])


class PublicProjectTests(TempContentMixin, TestCase):
    def test_list_puts_ordered_projects_first(self):
        self.write_project('recent', date="2024-06-01")
        self.write_project('pinned', date="2020-01-01", order=1)
        response = self.client.get(reverse('projects:project_list'))
        self.assertEqual([project['slug'] for project in response.context['projects']], ['pinned', 'recent'])

    def test_technology_filter(self):
        self.write_project('api', technologies=["Django", "Postgres"])
        self.write_project('cli', technologies=["Go"])
        response = self.client.get(reverse('projects:project_list'), {'technology': "django"})
        self.assertEqual([project['slug'] for project in response.context['projects']], ['api'])

    def test_detail(self):
        self.write_project('api', title="Booking API", content="**bold**")
        response = self.client.get(reverse('projects:project_detail', args=['api']))
        self.assertContains(response, "Booking API")
        self.assertContains(response, "<strong>bold</strong>")

    def test_unknown_project_is_404(self):
        response = self.client.get(reverse('projects:project_detail', args=['nope']))
        self.assertEqual(response.status_code, 404)

    def test_featured_projects_are_limited(self):
        for number in range(5):
            self.write_project(f'p{number}', featured=True, order=number)
        self.write_project('hidden', featured=False, order=0)
        self.assertEqual([project['slug'] for project in featured_projects()], ['p0', 'p1', 'p2'])


class ManageProjectsTests(TempContentMixin, TestCase):
    def setUp(self):
        super().setUp()
        admin = make_admin()
        self.client.login(username=admin.username, password=PASSWORD)

    def test_list(self):
        self.write_project('api')
        response = self.client.get(reverse('projects:manage_projects'))
        self.assertContains(response, "Api")

    def test_create(self):
        response = self.client.post(reverse('projects:new_project'), {
            'title': "Booking API", 'date': "2024-02-02", 'technologies': "Django", 'is_live': "on",
        })
        self.assertRedirects(response, reverse('projects:manage_projects'))
        data = store.get_content('projects', 'booking-api')['data']
        self.assertEqual(data['technologies'], ["Django"])
        self.assertTrue(data['isLive'])

    def test_edit_keeps_slug(self):
        self.write_project('api', title="API")
        response = self.client.post(reverse('projects:edit_project', args=['api']), {
            'title': "Renamed API", 'date': "2024-02-02",
        })
        self.assertRedirects(response, reverse('projects:manage_projects'))
        self.assertEqual(store.get_content('projects', 'api')['data']['title'], "Renamed API")

    def test_delete(self):
        self.write_project('api')
        response = self.client.post(reverse('projects:delete_project', args=['api']))
        self.assertRedirects(response, reverse('projects:manage_projects'))
        self.assertEqual(store.list_content('projects'), [])
