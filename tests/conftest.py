"""Shared test fixtures for cc-ci-setup tests."""

import logging
import sys
from dataclasses import replace
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cc_ci_setup.client import GitLabClient
from cc_ci_setup.models import Platform, ProjectInfo, Provider, RunConfig

# Constants for use in tests - pytest makes conftest.py fixtures available,
# but these constants need to be imported directly from tests
MOCK_GITLAB_HOST = "gitlab.example.com"
MOCK_GITLAB_URL = f"https://{MOCK_GITLAB_HOST}"
MOCK_API_URL = f"{MOCK_GITLAB_URL}/api/v4"
MOCK_PROJECT_PATH = "myorg/my-project"
MOCK_VARIABLES_URL = f"{MOCK_API_URL}/projects/myorg%2Fmy-project/variables"

EXISTING_PIPELINE = """\
# Project pipeline
stages:
  - build
  - test

variables:
  PYTHON_VERSION: "3.12"

build:
  stage: build
  script:
    - make build

test:
  stage: test
  script:
    - make test  # runs the unit tests
"""


@pytest.fixture(autouse=True)
def no_gitlab_token(monkeypatch):
    """Keep a real GITLAB_TOKEN from the environment out of the tests."""
    monkeypatch.delenv("GITLAB_TOKEN", raising=False)


@pytest.fixture
def mock_client():
    """GitLabClient pointing at mock server."""
    return GitLabClient(MOCK_GITLAB_URL, "test-token")


@pytest.fixture
def project() -> ProjectInfo:
    return ProjectInfo(host=MOCK_GITLAB_HOST, path=MOCK_PROJECT_PATH)


@pytest.fixture
def make_config():
    """Factory for RunConfig with GitLab/anthropic defaults."""
    base = RunConfig(platform=Platform.GITLAB, provider=Provider.ANTHROPIC)

    def _make(**kwargs) -> RunConfig:
        return replace(base, **kwargs)

    return _make


@pytest.fixture
def workspace(tmp_path, monkeypatch) -> Path:
    """Temporary project directory used as the current working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def fake_repo(workspace, monkeypatch) -> Path:
    """Pretend the workspace is a git checkout whose origin points at the mock project."""
    monkeypatch.setattr("cc_ci_setup.git.is_git_repo", lambda: True)
    monkeypatch.setattr(
        "cc_ci_setup.git.get_remote_url", lambda remote="origin": f"git@{MOCK_GITLAB_HOST}:{MOCK_PROJECT_PATH}.git"
    )
    monkeypatch.setattr("cc_ci_setup.cli.check_dependencies", lambda workdir: None)
    monkeypatch.setattr("cc_ci_setup.pipeline.query", lambda path, expression: "stage: ai")
    return workspace


@pytest.fixture
def debug_logs(caplog):
    caplog.set_level(logging.DEBUG, logger="cc-ci-setup")
    return caplog


def backups(directory: Path) -> list[Path]:
    return sorted(directory.glob(".gitlab-ci.yml.backup.*"))
