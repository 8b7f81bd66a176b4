"""Detect the GitLab project from local git metadata."""

from __future__ import annotations

import logging
import re
import subprocess

from cc_ci_setup.errors import GitError
from cc_ci_setup.logging_utils import LOGGER_NAME
from cc_ci_setup.models import DEFAULT_REMOTE, ProjectInfo

logger = logging.getLogger(LOGGER_NAME)

# git@gitlab.com:namespace/project.git
SSH_REMOTE = re.compile(r"^[\w.+-]+@(?P<host>[^:/]+):(?P<path>.+?)(?:\.git)?/?$")
# https://gitlab.com/namespace/project.git, with optional user[:password]@
HTTP_REMOTE = re.compile(r"^https?://(?:[^@/]+@)?(?P<host>[^/@]+)/(?P<path>.+?)(?:\.git)?/?$")


def _git(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(["git", *args], capture_output=True, text=True, check=False)


def is_git_repo() -> bool:
    return _git("rev-parse", "--is-inside-work-tree").returncode == 0


def get_remote_url(remote: str = DEFAULT_REMOTE) -> str:
    """Return the URL of a git remote, or an empty string if it is not configured."""
    result = _git("remote", "get-url", remote)
    if result.returncode != 0:
        return ""
    return result.stdout.strip()


def _strip_project_suffix(path: str) -> str:
    """Cut browser page paths such as ``/-/settings/ci_cd`` off a project path."""
    path = path.split("/-/", 1)[0]
    if path.endswith("/-"):
        path = path[:-2]
    return path.strip("/").removesuffix(".git")


def parse_remote_url(url: str) -> tuple[str, str]:
    """
    Split a remote URL into (host, path).

    Recognizes SSH-style ``user@host:path.git`` and HTTP(S)-style
    ``scheme://host/path[.git]``. Anything else yields ``("", "")``.
    """
    url = url.strip()
    for pattern in (SSH_REMOTE, HTTP_REMOTE):
        match = pattern.match(url)
        if match:
            return match.group("host"), _strip_project_suffix(match.group("path"))
    return "", ""


def detect_project(project_url: str = "", remote: str = DEFAULT_REMOTE) -> ProjectInfo:
    """Resolve the project from ``project_url`` or, failing that, the git remote."""
    if not is_git_repo():
        raise GitError("Not a git repository. Please run this from your project directory.")

    url = project_url or get_remote_url(remote)
    if not url:
        raise GitError("No git remote found. Please set up a git remote first.")

    logger.debug(f"Remote URL: {url}")

    host, path = parse_remote_url(url)
    if not host or not path:
        raise GitError(f"Could not parse GitLab project from remote URL: {url}")

    return ProjectInfo(host=host, path=path)
