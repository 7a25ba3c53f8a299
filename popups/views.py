from django.contrib import messages
from django.http import Http404, JsonResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET, require_POST

from accounts.permissions import admin_required
from content import store
from content.api import json_error
from content.editing import delete_document, save_form
from content.exceptions import ContentError, InvalidContentPath

from .forms import PopupForm


@require_GET
def popup_list_api(request):
    try:
        popups = store.list_popups()
    except ContentError as exc:
        return json_error("Popups could not be loaded.", 500, exc)
    return JsonResponse(popups, safe=False)


@require_GET
def popup_detail_api(request, slug):
    try:
        popup = store.get_popup(slug)
    except InvalidContentPath as exc:
        return json_error(str(exc), 400)
    except ContentError as exc:
        return json_error("Popup could not be loaded.", 500, exc)

    if popup is None:
        return json_error("Popup not found.", 404)
    if not popup.get('isActive'):
        return json_error("Popup is not active.", 403)
    return JsonResponse(popup)


def get_popup_or_404(slug):
    try:
        popup = store.get_popup(slug)
    except InvalidContentPath:
        popup = None
    if popup is None:
        raise Http404("Popup not found")
    return popup


@admin_required
def manage_popups(request):
    return render(request, 'popups/manage_popups.html', {'popups': store.list_popups()})


@admin_required
def new_popup(request):
    form = PopupForm(request.POST or None)
    if request.method == 'POST' and form.is_valid():
        if save_form(request, form, 'popups'):
            messages.success(request, "✅ The popup has been created.")
            return redirect('popups:manage_popups')
    return render(request, 'popups/edit_popup.html', {'form': form})


@admin_required
def edit_popup(request, slug):
    popup = get_popup_or_404(slug)
    form = PopupForm(request.POST or None, initial=PopupForm.initial_from(popup))
    if request.method == 'POST' and form.is_valid():
        if save_form(request, form, 'popups', original_slug=popup['slug']):
            messages.success(request, "✅ The popup has been updated.")
            return redirect('popups:manage_popups')
    return render(request, 'popups/edit_popup.html', {'form': form, 'popup': popup})


@admin_required
@require_POST
def delete_popup(request, slug):
    try:
        warning = delete_document(request.user, 'popups', slug)
    except InvalidContentPath:
        raise Http404("Popup not found")
    if warning:
        messages.warning(request, f"⚠️ {warning}")
    messages.success(request, "🗑️ The popup has been deleted.")
    return redirect('popups:manage_popups')
