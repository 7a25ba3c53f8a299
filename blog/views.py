from django.contrib import messages
from django.core.paginator import Paginator
from django.http import Http404
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from about_me.models import AboutMe
from accounts.permissions import admin_required
from content import store
from content.cache import cached_page
from content.editing import delete_document, save_form
from content.exceptions import ContentNotFound, InvalidContentPath
from projects.views import featured_projects

from .forms import BlogPostForm

POSTS_PER_PAGE = 6
LATEST_POSTS = 3


def get_post_or_404(slug):
    try:
        return store.get_document('blog', slug)
    except (ContentNotFound, InvalidContentPath):
        raise Http404("Post not found")


def filter_posts(posts, query='', category='', tag=''):
    if query:
        needle = query.lower()
        posts = [
            post for post in posts
            if needle in str(post.get('title', '')).lower()
            or needle in str(post.get('description', '')).lower()
        ]
    if category:
        posts = [post for post in posts if str(post.get('category', '')).lower() == category.lower()]
    if tag:
        posts = [post for post in posts if tag.lower() in [str(t).lower() for t in post.get('tags') or []]]
    return posts


@cached_page
def post_list(request):
    posts = store.get_sorted('blog')
    categories = sorted({
        str(post['category']) for post in posts
        if post.get('category') and not isinstance(post['category'], (list, dict))
    })

    # --- Filters ---
    query = request.GET.get('q', '').strip()
    category = request.GET.get('category', '').strip()
    tag = request.GET.get('tag', '').strip()
    posts = filter_posts(posts, query, category, tag)

    paginator = Paginator(posts, POSTS_PER_PAGE)
    page_obj = paginator.get_page(request.GET.get('page'))

    return render(request, 'blog/post_list.html', {
        'posts': page_obj,
        'categories': categories,
        'query': query,
        'category': category,
        'tag': tag,
    })


@cached_page
def post_detail(request, slug):
    post = get_post_or_404(slug)
    return render(request, 'blog/post_detail.html', {'post': post})


@admin_required
def manage_posts(request):
    return render(request, 'blog/manage_posts.html', {'posts': store.get_sorted('blog')})


@admin_required
def new_post(request):
    form = BlogPostForm(request.POST or None)
    if request.method == 'POST' and form.is_valid():
        slug = save_form(request, form, 'blog')
        if slug:
            messages.success(request, "✅ The post has been created.")
            return redirect('blog:manage_posts')
    return render(request, 'blog/edit_post.html', {'form': form})


@admin_required
def edit_post(request, slug):
    post = get_post_or_404(slug)
    form = BlogPostForm(request.POST or None, initial=BlogPostForm.initial_from(post))
    if request.method == 'POST' and form.is_valid():
        new_slug = save_form(request, form, 'blog', original_slug=post['slug'])
        if new_slug:
            messages.success(request, "✅ The post has been updated.")
            return redirect('blog:manage_posts')
    return render(request, 'blog/edit_post.html', {'form': form, 'post': post})


@admin_required
@require_POST
def delete_post(request, slug):
    try:
        warning = delete_document(request.user, 'blog', slug)
    except InvalidContentPath:
        raise Http404("Post not found")
    if warning:
        messages.warning(request, f"⚠️ {warning}")
    messages.success(request, "🗑️ The post has been deleted.")
    return redirect('blog:manage_posts')


@cached_page
def home(request):
    about = AboutMe.objects.current()
    return render(request, 'home.html', {
        'about': about,
        'home_settings': store.get_home_settings(),
        'featured_projects': featured_projects(),
        'latest_posts': store.get_sorted('blog')[:LATEST_POSTS],
    })
