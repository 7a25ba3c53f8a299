from datetime import date

from django.test import TestCase
from django.urls import reverse

from content import store
from content.editing import generate_unique_slug
from content.testing import PASSWORD, TempContentMixin, make_admin

from .forms import BlogPostForm, split_list
from .views import filter_posts


class FilterPostsTests(TestCase):
    posts = [
        {'slug': 'a', 'title': "Django tips", 'description': "", 'category': "Web", 'tags': ["python"]},
        {'slug': 'b', 'title': "Rust", 'description': "Systems and django", 'category': "Systems", 'tags': []},
        {'slug': 'c', 'title': "Notes", 'category': "web", 'tags': ["Python", "misc"]},
    ]

    def slugs(self, **filters):
        return [post['slug'] for post in filter_posts(self.posts, **filters)]

    def test_query_matches_title_or_description(self):
        self.assertEqual(self.slugs(query="DJANGO"), ['a', 'b'])

    def test_category_is_case_insensitive(self):
        self.assertEqual(self.slugs(category="web"), ['a', 'c'])

    def test_tag(self):
        self.assertEqual(self.slugs(tag="python"), ['a', 'c'])
        self.assertEqual(self.slugs(tag="python", category="Web", query="notes"), ['c'])


class BlogFormTests(TestCase):
    def test_to_document(self):
        form = BlogPostForm({'title': "Hello", 'date': "2024-03-01", 'tags': "a, b,,c "})
        self.assertTrue(form.is_valid(), form.errors)
        document = form.to_document()
        self.assertEqual(document['date'], "2024-03-01")
        self.assertEqual(document['tags'], ["a", "b", "c"])

    def test_title_is_required(self):
        form = BlogPostForm({'title': "", 'date': "2024-03-01"})
        self.assertFalse(form.is_valid())
        self.assertIn("Title cannot be empty.", form.errors['title'])

    def test_initial_from_document(self):
        initial = BlogPostForm.initial_from({'title': "T", 'date': "2024-01-02", 'tags': ["x", "y"], 'slug': "t"})
        self.assertEqual(initial['date'], date(2024, 1, 2))
        self.assertEqual(initial['tags'], "x, y")

    def test_split_list(self):
        self.assertEqual(split_list(None), [])


class PublicBlogTests(TempContentMixin, TestCase):
    def test_list_is_newest_first(self):
        self.write_post('older', date="2023-01-01")
        self.write_post('newer', date="2024-01-01")
        response = self.client.get(reverse('blog:post_list'))
        self.assertEqual([post['slug'] for post in response.context['posts']], ['newer', 'older'])

    def test_list_is_paginated(self):
        for day in range(1, 9):
            self.write_post(f'post-{day}', date=f"2024-01-0{day}")
        response = self.client.get(reverse('blog:post_list'))
        self.assertEqual(len(response.context['posts']), 6)

        response = self.client.get(reverse('blog:post_list'), {'page': 2})
        self.assertEqual([post['slug'] for post in response.context['posts']], ['post-2', 'post-1'])

    def test_list_filters_and_categories(self):
        self.write_post('one', category="Web", tags=["django"])
        self.write_post('two', category="Data")
        response = self.client.get(reverse('blog:post_list'), {'tag': "django"})
        self.assertEqual([post['slug'] for post in response.context['posts']], ['one'])
        self.assertEqual(response.context['categories'], ["Data", "Web"])

    def test_categories_of_mixed_types(self):
        self.write_post('one', category="News")
        self.write_post('two', category=2024)
        self.write_post('three', category=["a", "b"])
        response = self.client.get(reverse('blog:post_list'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['categories'], ["2024", "News"])

    def test_empty_list(self):
        response = self.client.get(reverse('blog:post_list'))
        self.assertContains(response, "No posts found.")

    def test_detail_renders_markdown(self):
        self.write_post('hello', content="# Title\n\n<script>alert(1)</script>", title="Hello")
        response = self.client.get(reverse('blog:post_detail', args=['hello']))
        self.assertContains(response, "<h1")
        self.assertNotContains(response, "<script>alert(1)</script>")

    def test_unknown_post_is_404(self):
        self.assertEqual(self.client.get(reverse('blog:post_detail', args=['missing'])).status_code, 404)
        self.assertEqual(self.client.get('/blog/bad..slug/').status_code, 404)

    def test_home_page(self):
        for day in range(1, 5):
            self.write_post(f'post-{day}', date=f"2024-02-0{day}")
        self.write_project('featured', featured=True)
        self.write_project('plain')

        response = self.client.get(reverse('home'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual([post['slug'] for post in response.context['latest_posts']], ['post-4', 'post-3', 'post-2'])
        self.assertEqual([project['slug'] for project in response.context['featured_projects']], ['featured'])
        self.assertEqual(response.context['home_settings'], store.DEFAULT_HOME_SETTINGS)


class ManagePostsTests(TempContentMixin, TestCase):
    def setUp(self):
        super().setUp()
        admin = make_admin()
        self.client.login(username=admin.username, password=PASSWORD)

    def test_requires_admin(self):
        self.client.logout()
        response = self.client.get(reverse('blog:manage_posts'))
        self.assertEqual(response.status_code, 302)

    def test_create_post_builds_slug_from_title(self):
        response = self.client.post(reverse('blog:new_post'), {
            'title': "My First Post", 'date': "2024-05-01", 'tags': "a, b", 'content': "Hello",
        })
        self.assertRedirects(response, reverse('blog:manage_posts'))
        saved = store.get_content('blog', 'my-first-post')
        self.assertEqual(saved['data']['tags'], ["a", "b"])
        self.assertEqual(saved['content'], "Hello")

    def test_duplicate_slug_is_rejected(self):
        self.write_post('taken')
        response = self.client.post(reverse('blog:new_post'), {'title': "Other", 'slug': "taken", 'date': "2024-05-01"})
        self.assertEqual(response.status_code, 200)
        self.assertIn('slug', response.context['form'].errors)

    def test_reserved_slug_is_skipped(self):
        self.assertEqual(generate_unique_slug('blog', "New"), "new-1")
        self.write_post('hello')
        self.assertEqual(generate_unique_slug('blog', "Hello"), "hello-1")
        self.assertEqual(generate_unique_slug('blog', "Hello", exclude='hello'), "hello")
        self.assertEqual(generate_unique_slug('blog', "!!!"), "blog")

    def test_edit_renames_the_file(self):
        self.write_post('old-name', title="Old")
        response = self.client.post(reverse('blog:edit_post', args=['old-name']), {
            'title': "Old", 'slug': "new-name", 'date': "2024-01-01",
        })
        self.assertRedirects(response, reverse('blog:manage_posts'))
        self.assertFalse(store.get_full_path('blog', 'old-name').exists())
        self.assertTrue(store.get_full_path('blog', 'new-name').exists())

    def test_edit_form_is_prefilled(self):
        self.write_post('hello', title="Hello", tags=["x"])
        response = self.client.get(reverse('blog:edit_post', args=['hello']))
        self.assertEqual(response.context['form'].initial['title'], "Hello")

    def test_delete(self):
        self.write_post('bye')
        self.assertEqual(self.client.get(reverse('blog:delete_post', args=['bye'])).status_code, 405)
        response = self.client.post(reverse('blog:delete_post', args=['bye']))
        self.assertRedirects(response, reverse('blog:manage_posts'))
        self.assertFalse(store.get_full_path('blog', 'bye').exists())

    def test_edit_invalidates_the_cached_page(self):
        self.write_post('hello', title="Before")
        self.client.logout()
        self.assertContains(self.client.get(reverse('blog:post_detail', args=['hello'])), "Before")

        admin = make_admin("second@example.com")
        self.client.login(username=admin.username, password=PASSWORD)
        self.client.post(reverse('blog:edit_post', args=['hello']), {'title': "After", 'date': "2024-01-01"})
        self.client.logout()
        self.assertContains(self.client.get(reverse('blog:post_detail', args=['hello'])), "After")
