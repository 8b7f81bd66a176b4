"""
cc-ci-setup: configure Claude Code for a GitLab CI/CD pipeline with a single command.

Detects the GitLab project from the local git remote, adds a ``claude`` job to
``.gitlab-ci.yml`` (merging into an existing file without touching other jobs),
and registers the API key as a masked CI/CD variable when a token is available.

Environment:
    GITLAB_TOKEN - GitLab Personal Access Token (optional, enables the Variables API)
"""

from cc_ci_setup.cli import main
from cc_ci_setup.models import VERSION as __version__

__all__ = ["main", "__version__"]
