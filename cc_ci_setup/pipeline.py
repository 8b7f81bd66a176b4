"""
Merge the Claude job into a GitLab pipeline document.

The existing ``.gitlab-ci.yml`` is loaded with ruamel.yaml in round-trip mode so
comments, key order and quoting of everything we do not touch survive the write.
"""

from __future__ import annotations

import io
import logging
import os
import shutil
import subprocess
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from importlib import resources
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import YAMLError

from cc_ci_setup.errors import PipelineError
from cc_ci_setup.logging_utils import LOGGER_NAME, SUCCESS
from cc_ci_setup.models import JOB_NAME, JOB_TEMPLATE, Provider

logger = logging.getLogger(LOGGER_NAME)

BEDROCK_SETUP = "pip install --no-cache-dir awscli"


class MergeOutcome(Enum):
    CREATED = "created"
    MERGED = "merged"
    REPLACED = "replaced"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"


def _yaml() -> YAML:
    # YAML instances carry state between load/dump; use a fresh one per call.
    yaml = YAML()
    yaml.preserve_quotes = True
    yaml.indent(mapping=2, sequence=4, offset=2)
    yaml.width = 4096
    return yaml


def _dumps(data: Any) -> str:
    stream = io.StringIO()
    _yaml().dump(data, stream)
    return stream.getvalue()


def _plain(node: Any) -> Any:
    """Strip ruamel wrapper types so two documents compare by content only."""
    if isinstance(node, dict):
        return {str(k): _plain(v) for k, v in node.items()}
    if isinstance(node, list):
        return [_plain(v) for v in node]
    if isinstance(node, str):
        return str(node)
    return node


def _append(seq: list, value: Any) -> None:
    """Append to a sequence, keeping blank lines that followed the old last item after the new one."""
    last = len(seq) - 1
    seq.append(value)
    if not isinstance(seq, CommentedSeq) or last not in seq.ca.items:
        return
    tokens = [t for t in seq.ca.items[last] if t is not None]
    if tokens and all(hasattr(t, "value") and not t.value.strip() for t in tokens):
        seq.ca.items[last + 1] = seq.ca.items.pop(last)


# ---------------------------------------------------------------------------
# Job template
# ---------------------------------------------------------------------------


def load_job_template(path: Path | None = None, job_name: str = JOB_NAME) -> CommentedMap:
    """Load the job mapping from ``path``, or from the bundled template."""
    source = Path(path) if path is not None else resources.files("cc_ci_setup.templates").joinpath(JOB_TEMPLATE)
    if not source.is_file():
        raise PipelineError(f"Template file not found: {source}")

    try:
        data = _yaml().load(source.read_text(encoding="utf-8"))
    except YAMLError as e:
        raise PipelineError(f"Could not parse template {source}: {e}") from e

    job = data.get(job_name) if isinstance(data, dict) else None
    if not isinstance(job, dict):
        raise PipelineError(f"Template {source} does not define a '{job_name}' job")
    return job


def build_job(provider: Provider, region: str = "", template: Path | None = None) -> CommentedMap:
    """Return the job block for ``provider``, patched from a fresh copy of the template."""
    job = load_job_template(template)

    if provider is Provider.BEDROCK:
        job.setdefault("before_script", CommentedSeq()).append(BEDROCK_SETUP)
        variables = job.setdefault("variables", CommentedMap())
        variables["CLAUDE_CODE_USE_BEDROCK"] = "1"
        variables["AWS_REGION"] = region
    elif provider is Provider.VERTEX:
        variables = job.setdefault("variables", CommentedMap())
        variables["CLAUDE_CODE_USE_VERTEX"] = "1"
        variables["CLOUD_ML_REGION"] = region

    return job


def dump_job(job: CommentedMap, job_name: str = JOB_NAME) -> str:
    block = CommentedMap()
    block[job_name] = job
    return _dumps(block)


# ---------------------------------------------------------------------------
# Pipeline document
# ---------------------------------------------------------------------------


class PipelineDocument:
    """A pipeline file on disk: a mapping with an optional ``stages`` list and job mappings."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self.data: CommentedMap = CommentedMap()

    @property
    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> CommentedMap:
        """Read the file. A missing file loads as an empty document; a broken one raises."""
        if not self.exists:
            self.data = CommentedMap()
            return self.data

        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PipelineError(f"Could not read {self.path}: {e}") from e
        try:
            data = _yaml().load(text)
        except YAMLError as e:
            raise PipelineError(f"Could not parse {self.path}: {e}") from e

        if data is None:
            data = CommentedMap()
        if not isinstance(data, dict):
            raise PipelineError(f"{self.path} must contain a mapping at the top level")
        stages = data.get("stages")
        if stages is not None and not isinstance(stages, list):
            raise PipelineError(f"'stages' in {self.path} must be a list")

        self.data = data
        return data

    def get_job(self, name: str) -> Any:
        return self.data.get(name)

    def has_stage(self, stage: str) -> bool:
        return stage in (self.data.get("stages") or [])

    def ensure_stage(self, stage: str) -> bool:
        """Make ``stage`` appear once in ``stages``. Returns True if the document changed."""
        stages = self.data.get("stages")
        if stages is None:
            if "stages" in self.data:
                self.data["stages"] = CommentedSeq([stage])
            else:
                self.data.insert(0, "stages", CommentedSeq([stage]))
            logger.log(SUCCESS, f"Created stages with '{stage}'")
            return True
        if stage in stages:
            logger.info(f"'{stage}' stage already exists")
            return False
        _append(stages, stage)
        logger.log(SUCCESS, f"Added '{stage}' to stages")
        return True

    def set_job(self, name: str, job: CommentedMap) -> None:
        self.data[name] = job

    def dumps(self) -> str:
        return _dumps(self.data)

    def backup(self, now: datetime | None = None) -> Path:
        """Copy the file to ``<file>.backup.YYYYMMDD_HHMMSS``."""
        now = now or datetime.now()
        target = self.path.with_name(f"{self.path.name}.backup.{now:%Y%m%d_%H%M%S}")
        try:
            shutil.copy2(self.path, target)
        except OSError as e:
            raise PipelineError(f"Could not back up {self.path}: {e}") from e
        logger.debug(f"Backed up {self.path} to {target}")
        return target

    def save(self, text: str | None = None) -> None:
        """Back up the current file, then atomically replace it."""
        if self.exists:
            self.backup()
        tmp = self.path.with_name(f"{self.path.name}.tmp")
        try:
            tmp.write_text(self.dumps() if text is None else text, encoding="utf-8")
            if self.exists:
                shutil.copymode(self.path, tmp)
            os.replace(tmp, self.path)
        except OSError as e:
            tmp.unlink(missing_ok=True)
            raise PipelineError(f"Could not write {self.path}: {e}") from e


def merge_job(
    document: PipelineDocument,
    job: CommentedMap,
    stage: str,
    overwrite: Callable[[], bool],
    job_name: str = JOB_NAME,
) -> MergeOutcome:
    """
    Merge ``job`` into ``document`` under ``job_name`` and register ``stage``.

    An existing job that differs is replaced wholesale, and only if ``overwrite()`` agrees.
    An identical existing job with its stage already registered is left alone,
    so running the setup twice writes nothing the second time.
    """
    document.load()

    if not document.exists:
        stages = CommentedMap()
        stages["stages"] = CommentedSeq([stage])
        document.save(_dumps(stages) + "\n" + dump_job(job, job_name))
        document.load()
        logger.log(SUCCESS, f"Created new {document.path.name}")
        return MergeOutcome.CREATED

    existing = document.get_job(job_name)
    replacing = existing is not None and _plain(existing) != _plain(job)
    if replacing:
        if not overwrite():
            logger.info("Skipping CI configuration update")
            return MergeOutcome.SKIPPED
    elif existing is not None and document.has_stage(stage):
        logger.info(f"{job_name} job in {document.path.name} is already up to date")
        return MergeOutcome.UNCHANGED

    document.ensure_stage(stage)
    document.set_job(job_name, job)
    document.save()

    if replacing:
        logger.log(SUCCESS, f"Replaced {job_name} job in {document.path.name}")
        return MergeOutcome.REPLACED
    logger.log(SUCCESS, f"Merged {job_name} job into {document.path.name}")
    return MergeOutcome.MERGED


def query(path: Path, expression: str) -> str | None:
    """Evaluate a yq expression against ``path``. Returns None if yq fails."""
    result = subprocess.run(
        ["yq", "eval", expression, str(path)], capture_output=True, text=True, check=False
    )
    if result.returncode != 0:
        logger.debug(f"yq exited {result.returncode}: {result.stderr.strip()}")
        return None
    return result.stdout.strip()
