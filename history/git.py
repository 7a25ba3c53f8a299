"""
Git versioning of the site's content.

Every helper shells out to the ``git`` executable inside ``GIT_REPO_DIR``.
Pushing goes through an https URL carrying ``GITHUB_USERNAME`` and
``GITHUB_TOKEN`` and only happens when ``GIT_PUSH_ENABLED`` is set.
"""
import logging
import re
import subprocess
from pathlib import Path, PurePosixPath

from django.conf import settings

logger = logging.getLogger(__name__)

ACTION_LABELS = {"create": "created", "update": "updated", "delete": "deleted"}

FIELD_SEP = "\x1f"
RECORD_SEP = "\x1e"
LOG_FORMAT = "%H%x1f%an%x1f%aI%x1f%s%x1e"

COMMIT_HASH_RE = re.compile(r"^[0-9a-fA-F]{4,40}$")

# Later entries win when files of several kinds changed together
TYPE_PRIORITY = ("chore", "build", "ci", "perf", "fix", "feat", "refactor", "style", "docs", "test")
DEPENDENCY_FILES = ("pyproject.toml", "requirements.txt", "requirements-dev.txt", "poetry.lock")


class GitError(Exception):
    status_code = 500


def _redact(text):
    token = settings.GITHUB_TOKEN
    return text.replace(token, "***") if token else text


def run_git(*args, check=True, timeout=60):
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=str(settings.GIT_REPO_DIR),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except OSError as exc:
        raise GitError(f"git could not be started: {exc}") from exc
    except subprocess.TimeoutExpired as exc:
        raise GitError(f"git {args[0]} timed out.") from exc

    if check and result.returncode != 0:
        output = (result.stderr or result.stdout or "").strip()
        raise GitError(_redact(f"git {args[0]} failed: {output}"))
    return result.stdout


def get_remote_url(name="origin"):
    try:
        return run_git("remote", "get-url", name).strip()
    except GitError as exc:
        raise GitError(f'No remote named "{name}" was found.') from exc


def get_repo_url():
    """Public (browser) URL of the origin remote, or None."""
    try:
        url = get_remote_url()
    except GitError as exc:
        logger.error("Could not read the repository URL: %s", exc)
        return None
    url = re.sub(r"^git@github\.com:", "https://github.com/", url)
    return re.sub(r"\.git$", "", url)


def get_authenticated_repo_url():
    username, token = settings.GITHUB_USERNAME, settings.GITHUB_TOKEN
    if not username or not token:
        logger.error("GitHub credentials are missing")
        raise GitError("GITHUB_USERNAME and GITHUB_TOKEN must be set to push changes.")

    url = get_remote_url()
    url = re.sub(r"^git@github\.com:", "github.com/", url)
    url = re.sub(r"^https?://([^@/]*@)?", "", url)
    return f"https://{username}:{token}@{url}"


def current_branch():
    return run_git("rev-parse", "--abbrev-ref", "HEAD").strip()


def push_changes():
    if not settings.GIT_PUSH_ENABLED:
        logger.info("Push skipped, GIT_PUSH_ENABLED is off")
        return False

    authenticated_url = get_authenticated_repo_url()
    branch = current_branch()
    try:
        run_git("push", authenticated_url, branch, timeout=120)
    except GitError as exc:
        logger.error("Push to '%s' failed: %s", branch, exc)
        if "authentication failed" in str(exc).lower():
            raise GitError("GitHub authentication failed. Check GITHUB_USERNAME and GITHUB_TOKEN.") from exc
        raise GitError(f"The changes were committed but could not be pushed: {exc}") from exc
    logger.info("Pushed changes to '%s'", branch)
    return True


def get_commit_history(limit=50):
    """Latest commits without author e-mails or message bodies."""
    try:
        output = run_git("log", f"--max-count={limit}", f"--pretty=format:{LOG_FORMAT}")
    except GitError as exc:
        logger.error("Could not read the git history: %s", exc)
        return []

    history = []
    for record in output.split(RECORD_SEP):
        fields = record.strip("\n").split(FIELD_SEP)
        if len(fields) != 4:
            continue
        commit_hash, author_name, date, message = fields
        history.append({
            "hash": commit_hash,
            "author_name": author_name,
            "date": date,
            "message": message,
        })
    return history


def commit_content_change(action, file_type, slug, user, paths):
    """Commit the given content files; returns False when there was nothing to commit."""
    if isinstance(paths, (str, Path)):
        paths = [paths]
    valid_paths = [str(p) for p in paths or [] if isinstance(p, (str, Path)) and str(p).strip()]
    if not valid_paths:
        logger.warning("No file to commit for %s %s '%s', skipping", action, file_type, slug)
        return False

    message = f"content: {file_type} '{slug}' {ACTION_LABELS.get(action, action)} by {user}. [ci skip]"
    try:
        for path in valid_paths:
            if Path(path).exists():
                run_git("add", "--", path)
            else:
                run_git("rm", "--cached", "--ignore-unmatch", "-q", "--", path)

        staged = run_git("diff", "--cached", "--name-only", "--", *valid_paths).splitlines()
        if not staged:
            logger.info("Nothing changed in %s, no commit created", ", ".join(valid_paths))
            return False
        run_git("commit", "-m", message, "--", *staged)
    except GitError as exc:
        raise GitError(f"The content change could not be committed: {exc}") from exc

    push_changes()
    return True


def autocommit(action, file_type, slug, user, paths):
    """Version a content edit when GIT_AUTOCOMMIT is on; returns a warning message if that failed."""
    if not settings.GIT_AUTOCOMMIT:
        return None
    try:
        commit_content_change(action, file_type, slug, user, paths)
    except GitError as exc:
        logger.error("Autocommit of %s '%s' failed: %s", file_type, slug, exc)
        return str(exc)
    return None


def commit_all_changes(message, user):
    try:
        if not run_git("status", "--porcelain").strip():
            logger.info("No changes to commit")
            return {"success": True, "message": "There were no changes to commit."}
        run_git("add", ".")
        run_git("commit", "-m", f"{message} (by {user})")
    except GitError as exc:
        raise GitError(f"The changes could not be committed: {exc}") from exc

    pushed = push_changes()
    suffix = " and pushed." if pushed else "."
    return {"success": True, "message": f"All changes were committed{suffix}"}


def revert_commit(commit_hash, user):
    if not COMMIT_HASH_RE.match(commit_hash or ""):
        raise ValueError("A valid commit hash is required.")
    try:
        run_git("revert", "--no-edit", commit_hash)
        push_changes()
    except GitError as exc:
        logger.error("Reverting %s for %s failed: %s", commit_hash, user, exc)
        try:
            run_git("revert", "--abort")
        except GitError as abort_exc:
            logger.error("git revert --abort failed as well: %s", abort_exc)
        raise GitError(f"Commit '{commit_hash[:7]}' could not be reverted: {exc}") from exc
    logger.info("%s reverted %s", user, commit_hash)


def parse_status(output):
    """``git status --porcelain`` output as (code, path) pairs."""
    entries = []
    for line in output.splitlines():
        if len(line) < 4:
            continue
        code, path = line[:2], line[3:]
        if " -> " in path:
            path = path.split(" -> ", 1)[1]
        entries.append((code, path.strip('"')))
    return entries


def _change_type(path):
    name = PurePosixPath(path).name
    if name in DEPENDENCY_FILES:
        return "build"
    if path.startswith((".github/", ".docker/")) or name == "Dockerfile":
        return "ci"
    if name == "tests.py" or name.startswith("test_") or "/tests/" in f"/{path}":
        return "test"
    if "/migrations/" in path:
        return "fix"
    if name in ("views.py", "urls.py", "consumers.py", "forms.py") or path.startswith("templates/"):
        return "feat"
    if name.endswith(".py"):
        return "refactor"
    if name.endswith((".css", ".scss")) or path.startswith("static/css/"):
        return "style"
    if name.endswith(".md"):
        return "docs"
    return "chore"


def suggest_commit(entries):
    if not entries:
        return {"type": "chore", "scope": "git", "subject": "no changes detected to commit"}

    detected = "chore"
    scopes = set()
    created = [path for code, path in entries if code == "??" or "A" in code]
    deleted = [path for code, path in entries if "D" in code]
    modified = [path for code, path in entries if path not in created and path not in deleted]

    for _code, path in entries:
        change_type = _change_type(path)
        if TYPE_PRIORITY.index(change_type) > TYPE_PRIORITY.index(detected):
            detected = change_type
        parts = path.split("/")
        if len(parts) > 1:
            scopes.add(parts[0])

    if len(entries) == 1:
        path = entries[0][1]
        action = "add" if path in created else "remove" if path in deleted else "update"
        subject = f"{action} {PurePosixPath(path).name}"
    elif created and not modified and not deleted:
        subject = f"add {len(created)} new file(s)"
    elif deleted and not modified and not created:
        subject = f"remove {len(deleted)} file(s)"
    else:
        subject = f"update {len(entries)} files across {len(scopes)} scope(s)"

    if all(PurePosixPath(path).name in DEPENDENCY_FILES for _code, path in entries):
        detected = "build"
        scopes = {"deps"}
        subject = "update dependencies"

    return {"type": detected, "scope": ", ".join(sorted(scopes)), "subject": subject.lower()}


def analyze_changes():
    """Suggest a conventional commit message for the working tree."""
    return suggest_commit(parse_status(run_git("status", "--porcelain")))


def check_connection():
    try:
        authenticated_url = get_authenticated_repo_url()
        run_git("ls-remote", "--heads", authenticated_url, timeout=30)
    except GitError as exc:
        logger.error("GitHub connection test failed: %s", exc)
        return {"ok": False, "message": str(exc)}
    return {"ok": True, "message": "GitHub connection and credentials verified."}


def get_branches():
    output = run_git("branch", "--format=%(refname:short)")
    return {
        "current": current_branch(),
        "all": [line.strip() for line in output.splitlines() if line.strip()],
    }


def switch_branch(name):
    if not name or name.startswith("-"):
        raise ValueError("A valid branch name is required.")
    run_git("check-ref-format", "--branch", name)
    run_git("checkout", name)
    logger.info("Switched to branch '%s'", name)
    return {"success": True, "message": f"Switched to branch '{name}'."}
