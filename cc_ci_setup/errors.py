"""Exceptions raised by cc-ci-setup steps."""


class SetupError(Exception):
    """A fatal problem that stops the run with exit code 1."""


class DependencyError(SetupError):
    """A required external tool is missing and could not be installed."""


class GitError(SetupError):
    """The working directory is not a usable git checkout."""


class PipelineError(SetupError):
    """The job template or the pipeline document cannot be used."""
