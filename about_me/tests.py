import json
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from django.urls import reverse

from content import store
from content.testing import PASSWORD, TempContentMixin, make_admin

from .models import AboutMe, Experience, Skill


def create_about(**kwargs):
    kwargs.setdefault('name', "Jane Doe")
    kwargs.setdefault('title', "Developer")
    about = AboutMe.objects.create(**kwargs)
    about.skills.create(name="Python", icon="SiPython", order=0)
    about.skills.create(name="Django", icon="SiDjango", order=1)
    about.experiences.create(
        title="Developer", company="Acme", date="2023 - Present", description="Builds things.", order=0
    )
    return about


class AboutPageTests(TempContentMixin, TestCase):
    def test_page_without_record(self):
        response = self.client.get(reverse('about_me:about_me'))
        self.assertEqual(response.status_code, 200)

    def test_page_shows_skills_experiences_and_testimonials(self):
        create_about(working_on="Portfolio\nBooking app")
        store.save_content('testimonials', 'testimonials', [{'name': "John", 'text': "Great work."}])

        response = self.client.get(reverse('about_me:about_me'))
        self.assertContains(response, "Jane Doe")
        self.assertContains(response, "Django")
        self.assertContains(response, "Acme")
        self.assertContains(response, "Great work.")
        self.assertEqual(list(response.context['skills'].values_list('name', flat=True)), ["Python", "Django"])


class AboutApiTests(TempContentMixin, TestCase):
    def test_missing_record_is_404(self):
        response = self.client.get(reverse('about_api'))
        self.assertEqual(response.status_code, 404)

    def test_returns_the_profile(self):
        create_about(github="https://github.com/jane", working_on="One\n\nTwo ")
        data = self.client.get(reverse('about_api')).json()
        self.assertEqual(data['name'], "Jane Doe")
        self.assertEqual(data['social']['github'], "https://github.com/jane")
        self.assertEqual(data['working_on'], ["One", "Two"])
        self.assertEqual([skill['name'] for skill in data['skills']], ["Python", "Django"])
        self.assertEqual(data['experiences'][0]['company'], "Acme")


class UpdateAboutApiTests(TempContentMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.admin = make_admin()
        self.client.login(username=self.admin.username, password=PASSWORD)
        self.about = create_about()
        self.python, self.django = self.about.skills.all()

    def post(self, payload):
        return self.client.post(reverse('update_about_api'), json.dumps(payload), content_type='application/json')

    def payload(self, **about):
        return {
            'about': {'id': self.about.id, **about},
            'skills': [
                {'id': str(self.django.id), 'name': "Django", 'icon': "SiDjango"},
                {'id': "new_1", 'name': "Go", 'icon': "SiGo"},
            ],
            'experiences': [
                {'title': "Lead", 'company': "Beta", 'date': "2024", 'description': "Leads."},
            ],
        }

    def test_requires_admin(self):
        self.client.logout()
        self.assertEqual(self.post(self.payload()).status_code, 401)

    def test_synchronises_skills_and_experiences(self):
        response = self.post(self.payload(title="Engineer", working_on=["A", "B"]))
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()['success'])

        self.about.refresh_from_db()
        self.assertEqual(self.about.title, "Engineer")
        self.assertEqual(self.about.name, "Jane Doe")
        self.assertEqual(self.about.working_on_list, ["A", "B"])

        skills = list(self.about.skills.values_list('name', 'order'))
        self.assertEqual(skills, [("Django", 0), ("Go", 1)])
        self.assertFalse(Skill.objects.filter(pk=self.python.pk).exists())
        self.assertTrue(Skill.objects.filter(pk=self.django.pk).exists())

        self.assertEqual(list(Experience.objects.values_list('company', flat=True)), ["Beta"])

    def test_unknown_about_id_is_404(self):
        payload = self.payload()
        payload['about']['id'] = 999
        self.assertEqual(self.post(payload).status_code, 404)

    def test_missing_sections_are_rejected(self):
        response = self.post({'about': {'id': self.about.id}})
        self.assertEqual(response.status_code, 400)

    def test_invalid_items_change_nothing(self):
        payload = self.payload()
        payload['skills'].append({'id': "new_2", 'name': ""})
        payload['experiences'][0]['company'] = ""
        response = self.post(payload)

        self.assertEqual(response.status_code, 400)
        self.assertIn("Skill name cannot be empty.", response.json()['error'])
        self.assertIn("Company cannot be empty.", response.json()['error'])
        self.assertEqual(self.about.skills.count(), 2)
        self.assertEqual(self.about.experiences.get().company, "Acme")

    def test_skill_ids_of_other_records_are_rejected(self):
        other = create_about(name="Someone else")
        payload = self.payload()
        payload['skills'][0]['id'] = str(other.skills.first().id)
        self.assertEqual(self.post(payload).status_code, 400)


class EditAboutViewTests(TempContentMixin, TestCase):
    def setUp(self):
        super().setUp()
        admin = make_admin()
        self.client.login(username=admin.username, password=PASSWORD)

    def management_form(self, prefix, total, initial):
        return {
            f'{prefix}-TOTAL_FORMS': str(total),
            f'{prefix}-INITIAL_FORMS': str(initial),
            f'{prefix}-MIN_NUM_FORMS': '0',
            f'{prefix}-MAX_NUM_FORMS': '1000',
        }

    def test_creates_the_record(self):
        data = {
            'name': "Jane Doe",
            'title': "Developer",
            **self.management_form('skills', 1, 0),
            'skills-0-name': "Python",
            'skills-0-icon': "SiPython",
            'skills-0-order': '0',
            **self.management_form('experiences', 0, 0),
        }
        response = self.client.post(reverse('about_me:edit_about'), data)
        self.assertRedirects(response, reverse('about_me:edit_about'))

        about = AboutMe.objects.get()
        self.assertEqual(about.skills.get().name, "Python")

    def test_get_renders_the_formsets(self):
        create_about()
        response = self.client.get(reverse('about_me:edit_about'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'skills-TOTAL_FORMS')


class SeedContentCommandTests(TempContentMixin, TestCase):
    def test_seeds_the_database_and_files(self):
        call_command('seed_content', stdout=StringIO())
        self.assertEqual(AboutMe.objects.count(), 1)
        self.assertTrue(AboutMe.objects.get().skills.exists())
        self.assertEqual(store.get_content('blog', 'hello-world')['data']['title'], "Hello World")
        self.assertTrue(store.get_full_path('seo-settings', 'seo-settings').exists())

    def test_second_run_keeps_existing_data(self):
        call_command('seed_content', stdout=StringIO())
        AboutMe.objects.update(name="Changed")
        call_command('seed_content', stdout=StringIO())
        self.assertEqual(AboutMe.objects.get().name, "Changed")
