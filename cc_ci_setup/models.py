"""Data models and constants for cc-ci-setup."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from enum import Enum

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VERSION = "0.1.0"

API_V4 = "/api/v4"
REQUEST_TIMEOUT = 30  # seconds

CI_FILE = ".gitlab-ci.yml"
JOB_NAME = "claude"
JOB_STAGE = "ai"
JOB_TEMPLATE = "gitlab-claude-job.yml"

DEFAULT_REMOTE = "origin"

YQ_RELEASE_URL = "https://github.com/mikefarah/yq/releases/latest/download"

DOCS_URL = "https://code.claude.com/docs/gitlab-ci-cd"

# uname -m -> yq release architecture
ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "arm64": "arm64",
    "aarch64": "arm64",
}


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Platform(Enum):
    GITLAB = "gitlab"
    GITHUB = "github"


class Provider(Enum):
    ANTHROPIC = "anthropic"
    BEDROCK = "bedrock"
    VERTEX = "vertex"


# ---------------------------------------------------------------------------
# Data Classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RunConfig:
    """Options for a single run, built once from the command line."""

    platform: Platform
    provider: Provider = Provider.ANTHROPIC
    api_key: str = ""
    region: str = ""
    project_url: str = ""
    gitlab_token: str = ""
    dry_run: bool = False
    force: bool = False
    verbose: bool = False

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> RunConfig:
        return cls(
            platform=Platform(args.platform),
            provider=Provider(args.provider),
            api_key=args.api_key or "",
            region=args.region or "",
            project_url=args.project_url or "",
            gitlab_token=args.gitlab_token or "",
            dry_run=args.dry_run,
            force=args.force,
            verbose=args.verbose,
        )


@dataclass(frozen=True)
class ProjectInfo:
    """GitLab project resolved from the git remote."""

    host: str
    path: str

    @property
    def base_url(self) -> str:
        return f"https://{self.host}"

    @property
    def api_url(self) -> str:
        return f"{self.base_url}{API_V4}"

    @property
    def settings_url(self) -> str:
        return f"{self.base_url}/{self.path}/-/settings/ci_cd"
