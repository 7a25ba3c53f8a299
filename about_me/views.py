import logging

from django.contrib import messages
from django.db import transaction
from django.forms.models import model_to_dict
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET, require_POST

from accounts.permissions import admin_api, admin_required
from content import store
from content.api import json_error, load_json_body
from content.cache import cached_page, revalidate_content_paths
from content.forms import form_error_message

from .form import AboutMeForm, ExperienceFormSet, ExperiencePayloadForm, SkillFormSet, SkillPayloadForm
from .models import AboutMe

logger = logging.getLogger(__name__)


@cached_page
def about_view(request):
    about = AboutMe.objects.prefetch_related('skills', 'experiences').current()
    return render(request, 'about_me.html', {
        'about': about,
        'skills': about.skills.all() if about else [],
        'experiences': about.experiences.all() if about else [],
        'testimonials': store.get_testimonials(),
    })


@require_GET
def about_api(request):
    about = AboutMe.objects.prefetch_related('skills', 'experiences').current()
    if about is None:
        return json_error("About data not found.", 404)
    return JsonResponse(about.to_dict())


@admin_required
def edit_about(request):
    about = AboutMe.objects.current()
    form = AboutMeForm(request.POST or None, instance=about)
    skill_formset = SkillFormSet(request.POST or None, instance=about or AboutMe(), prefix='skills')
    experience_formset = ExperienceFormSet(request.POST or None, instance=about or AboutMe(), prefix='experiences')

    if request.method == 'POST':
        if form.is_valid() and skill_formset.is_valid() and experience_formset.is_valid():
            with transaction.atomic():
                about = form.save()
                skill_formset.instance = about
                skill_formset.save()
                experience_formset.instance = about
                experience_formset.save()
            revalidate_content_paths('about')
            messages.success(request, "✅ The about page has been updated.")
            return redirect('about_me:edit_about')
        messages.error(request, "❌ Please check the form for errors.")

    return render(request, 'about_me/edit_about.html', {
        'form': form,
        'skill_formset': skill_formset,
        'experience_formset': experience_formset,
    })


def _clean_items(items, form_class, label):
    cleaned, errors = [], []
    for index, item in enumerate(items):
        form = form_class(item if isinstance(item, dict) else {})
        if form.is_valid():
            cleaned.append(form.cleaned_data)
        else:
            errors.append(f"{label}.{index}.{form_error_message(form)}")
    return cleaned, errors


@admin_api
@require_POST
def update_about_api(request):
    body = load_json_body(request)
    if body is None:
        return json_error("The request body is malformed or empty.", 400)

    about_data = body.get('about')
    if not isinstance(about_data, dict) or not isinstance(body.get('skills'), list) \
            or not isinstance(body.get('experiences'), list):
        return json_error("Validation error: 'about', 'skills' and 'experiences' are required.", 400)

    about_id = about_data.get('id')
    if about_id:
        about = AboutMe.objects.filter(pk=about_id).first() if str(about_id).isdigit() else None
        if about is None:
            return json_error("About record not found.", 404)
    else:
        about = AboutMe.objects.current()

    fields = AboutMeForm.Meta.fields
    values = model_to_dict(about, fields=fields) if about else {}
    values.update({key: value for key, value in about_data.items() if key in fields})
    if isinstance(values.get('working_on'), list):
        values['working_on'] = "\n".join(str(item) for item in values['working_on'])
    form = AboutMeForm(values, instance=about)

    skills, skill_errors = _clean_items(body['skills'], SkillPayloadForm, 'skills')
    experiences, experience_errors = _clean_items(body['experiences'], ExperiencePayloadForm, 'experiences')
    errors = skill_errors + experience_errors
    if not form.is_valid():
        errors.insert(0, f"about.{form_error_message(form)}")

    kept_ids = {int(skill['id']) for skill in skills if not skill['id'].startswith('new_')}
    known_ids = set(about.skills.values_list('id', flat=True)) if about else set()
    if kept_ids - known_ids:
        errors.append(f"skills: unknown ids {sorted(kept_ids - known_ids)}")
    if errors:
        return json_error(f"Validation error: {'; '.join(errors)}", 400)

    with transaction.atomic():
        about = form.save()

        about.skills.exclude(id__in=kept_ids).delete()
        for position, skill in enumerate(skills):
            values = {'name': skill['name'], 'icon': skill['icon'], 'order': position}
            if skill['id'].startswith('new_'):
                about.skills.create(**values)
            else:
                about.skills.filter(id=int(skill['id'])).update(**values)

        # Experiences are small; replacing them wholesale keeps the order simple
        about.experiences.all().delete()
        about.experiences.bulk_create([
            about.experiences.model(
                about=about,
                title=experience['title'],
                company=experience['company'],
                date=experience['date'],
                description=experience['description'],
                order=position,
            )
            for position, experience in enumerate(experiences)
        ])

    revalidate_content_paths('about')
    logger.info("About page updated by %s", request.user)
    return JsonResponse({"success": True, "message": "About page updated successfully."})
