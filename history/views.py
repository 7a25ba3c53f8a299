import logging

from django.http import JsonResponse
from django.shortcuts import render
from django.views.decorators.http import require_GET, require_POST

from accounts.permissions import admin_api, admin_required
from content.api import json_error, load_json_body, user_label

from . import git

logger = logging.getLogger(__name__)


@admin_required
def history_page(request):
    try:
        branches = git.get_branches()
    except git.GitError as exc:
        logger.error("Could not list branches: %s", exc)
        branches = {"current": "", "all": []}
    return render(request, 'history/history.html', {
        'history': git.get_commit_history(),
        'branches': branches,
        'repo_url': git.get_repo_url(),
    })


@admin_api
@require_GET
def log_api(request):
    return JsonResponse(git.get_commit_history(), safe=False)


@admin_api
@require_POST
def commit_all_api(request):
    body = load_json_body(request) or {}
    message = body.get('message')
    if not isinstance(message, str) or not message.strip():
        return json_error("A valid commit message is required.", 400)
    try:
        result = git.commit_all_changes(message.strip(), user_label(request.user))
    except git.GitError as exc:
        return json_error(str(exc), 500, exc)
    return JsonResponse(result)


@admin_api
@require_POST
def revert_api(request):
    body = load_json_body(request) or {}
    commit_hash = body.get('hash')
    if not isinstance(commit_hash, str):
        return json_error("A valid commit hash is required.", 400)
    try:
        git.revert_commit(commit_hash, user_label(request.user))
    except ValueError as exc:
        return json_error(str(exc), 400)
    except git.GitError as exc:
        return json_error(str(exc), 500, exc)
    return JsonResponse({"message": f"Commit '{commit_hash[:7]}' was reverted successfully."})


@admin_api
@require_GET
def analyze_changes_api(request):
    try:
        suggestion = git.analyze_changes()
    except git.GitError as exc:
        return json_error(str(exc), 500, exc)
    return JsonResponse(suggestion)


@admin_api
@require_GET
def branches_api(request):
    try:
        branches = git.get_branches()
    except git.GitError as exc:
        return json_error(str(exc), 500, exc)
    return JsonResponse({"branches": branches})


@admin_api
@require_POST
def switch_branch_api(request):
    body = load_json_body(request) or {}
    branch = body.get('branch')
    if not isinstance(branch, str):
        return json_error("A valid branch name is required.", 400)
    try:
        result = git.switch_branch(branch)
    except ValueError as exc:
        return json_error(str(exc), 400)
    except git.GitError as exc:
        return json_error(str(exc), 500, exc)
    return JsonResponse(result)


@admin_api
@require_POST
def test_connection_api(request):
    result = git.check_connection()
    if not result["ok"]:
        return JsonResponse({"message": f"GitHub connection test failed: {result['message']}"}, status=500)
    return JsonResponse({"message": result["message"]})
