from django.contrib import messages
from django.http import Http404
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from accounts.permissions import admin_required
from content import store
from content.cache import cached_page
from content.editing import delete_document, save_form
from content.exceptions import ContentNotFound, InvalidContentPath

from .forms import ProjectForm


def get_project_or_404(slug):
    try:
        return store.get_document('projects', slug)
    except (ContentNotFound, InvalidContentPath):
        raise Http404("Project not found")


def featured_projects(limit=3):
    projects = [project for project in store.get_sorted('projects') if project.get('featured')]
    return projects[:limit]


@cached_page
def project_list(request):
    projects = store.get_sorted('projects')
    technology = request.GET.get('technology', '').strip()
    if technology:
        projects = [
            project for project in projects
            if technology.lower() in [str(t).lower() for t in project.get('technologies') or []]
        ]
    return render(request, 'projects/project_list.html', {
        'projects': projects,
        'technology': technology,
    })


@cached_page
def project_detail(request, slug):
    project = get_project_or_404(slug)
    return render(request, 'projects/project_detail.html', {'project': project})


@admin_required
def manage_projects(request):
    return render(request, 'projects/manage_projects.html', {'projects': store.get_sorted('projects')})


@admin_required
def new_project(request):
    form = ProjectForm(request.POST or None)
    if request.method == 'POST' and form.is_valid():
        if save_form(request, form, 'projects'):
            messages.success(request, "✅ The project has been created.")
            return redirect('projects:manage_projects')
    return render(request, 'projects/edit_project.html', {'form': form})


@admin_required
def edit_project(request, slug):
    project = get_project_or_404(slug)
    form = ProjectForm(request.POST or None, initial=ProjectForm.initial_from(project))
    if request.method == 'POST' and form.is_valid():
        if save_form(request, form, 'projects', original_slug=project['slug']):
            messages.success(request, "✅ The project has been updated.")
            return redirect('projects:manage_projects')
    return render(request, 'projects/edit_project.html', {'form': form, 'project': project})


@admin_required
@require_POST
def delete_project(request, slug):
    try:
        warning = delete_document(request.user, 'projects', slug)
    except InvalidContentPath:
        raise Http404("Project not found")
    if warning:
        messages.warning(request, f"⚠️ {warning}")
    messages.success(request, "🗑️ The project has been deleted.")
    return redirect('projects:manage_projects')
