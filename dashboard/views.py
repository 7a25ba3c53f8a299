import logging

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect, render

from accounts.permissions import admin_required
from contact.models import Message
from content import store
from content.editing import save_document
from content.exceptions import ContentError
from history.git import get_commit_history

from .forms import HomeSettingsForm, SeoSettingsForm
from .stats import dashboard_stats

logger = logging.getLogger(__name__)

RECENT_MESSAGES = 5
RECENT_COMMITS = 5


@admin_required
def home(request):
    return render(request, 'dashboard/home.html', {
        'stats': dashboard_stats(),
        'recent_messages': Message.objects.all()[:RECENT_MESSAGES],
        'recent_commits': get_commit_history(limit=RECENT_COMMITS),
    })


def _save_settings(request, content_type, document):
    try:
        warning = save_document(request.user, content_type, content_type, document)
    except (ContentError, OSError) as exc:
        logger.error("Saving %s failed: %s", content_type, exc)
        messages.error(request, "❌ The settings could not be saved.")
        return False
    if warning:
        messages.warning(request, f"⚠️ {warning}")
    messages.success(request, "✅ Settings saved.")
    return True


@admin_required
def home_settings(request):
    current = store.get_home_settings()
    form = HomeSettingsForm(request.POST or None, initial=HomeSettingsForm.initial_from(current))
    if request.method == 'POST' and form.is_valid():
        if _save_settings(request, 'home-settings', form.to_document(current)):
            return redirect('dashboard:home_settings')
    return render(request, 'dashboard/home_settings.html', {'form': form})


def _read_robots_txt():
    robots_path = settings.ROBOTS_TXT_PATH
    return robots_path.read_text(encoding='utf-8') if robots_path.is_file() else ''


def _write_robots_txt(text):
    robots_path = settings.ROBOTS_TXT_PATH
    if text.strip():
        robots_path.parent.mkdir(parents=True, exist_ok=True)
        robots_path.write_text(text, encoding='utf-8')
    else:
        robots_path.unlink(missing_ok=True)


@admin_required
def seo_settings(request):
    form = SeoSettingsForm(
        request.POST or None,
        initial=SeoSettingsForm.initial_from(store.get_seo_settings(), _read_robots_txt()),
    )
    if request.method == 'POST' and form.is_valid():
        try:
            _write_robots_txt(form.cleaned_data['robots_txt'])
        except OSError as exc:
            logger.error("Writing robots.txt failed: %s", exc)
            messages.error(request, "❌ robots.txt could not be saved.")
        else:
            if _save_settings(request, 'seo-settings', form.to_document()):
                return redirect('dashboard:seo_settings')
    return render(request, 'dashboard/seo_settings.html', {'form': form})
