"""GitLab CI/CD setup: detect the project, add the Claude job, configure variables."""

from __future__ import annotations

from pathlib import Path

from cc_ci_setup import git, pipeline, variables
from cc_ci_setup.console import confirm, console, show_yaml, step
from cc_ci_setup.logging_utils import SUCCESS
from cc_ci_setup.models import CI_FILE, JOB_NAME, JOB_STAGE, ProjectInfo, RunConfig
from cc_ci_setup.platforms.base import PlatformSetup, register_platform


@register_platform("gitlab")
class GitLabSetup(PlatformSetup):
    """Configure Claude Code for GitLab CI/CD."""

    TOTAL_STEPS = 4

    def __init__(self, config: RunConfig, ci_file: Path | str = CI_FILE):
        super().__init__(config)
        self.ci_file = Path(ci_file)
        self.project: ProjectInfo | None = None

    def run(self) -> None:
        self.detect_project()
        self.update_pipeline()
        self.configure_variables()
        self.verify()

    # 1. Project detection
    def detect_project(self) -> ProjectInfo:
        step(1, self.TOTAL_STEPS, "Detecting project...")

        self.project = git.detect_project(self.config.project_url)
        self.logger.log(SUCCESS, f"GitLab host: {self.project.host}")
        self.logger.log(SUCCESS, f"Project: {self.project.path}")

        if self.ci_file.is_file():
            self.logger.log(SUCCESS, f"Existing {self.ci_file.name} found")
        else:
            self.logger.info(f"No existing {self.ci_file.name} (will create new)")
        return self.project

    # 2. Pipeline file
    def update_pipeline(self) -> pipeline.MergeOutcome | None:
        step(2, self.TOTAL_STEPS, "Updating CI/CD configuration...")

        job = pipeline.build_job(self.config.provider, self.config.region)

        if self.config.dry_run:
            self.logger.info("Dry run - showing changes that would be made:")
            console.print(f"[dim]--- New {JOB_NAME} job to be added ---[/dim]")
            show_yaml(pipeline.dump_job(job))
            console.print("[dim]--- End of changes ---[/dim]")
            return None

        document = pipeline.PipelineDocument(self.ci_file)
        return pipeline.merge_job(document, job, JOB_STAGE, overwrite=self._confirm_overwrite)

    def _confirm_overwrite(self) -> bool:
        if self.config.force:
            self.logger.warning(f"Overwriting existing {JOB_NAME} job (--force)")
            return True
        self.logger.warning(f"{JOB_NAME} job already exists in {self.ci_file.name}")
        return confirm(f"Overwrite existing {JOB_NAME} job?")

    # 3. CI/CD variables
    def configure_variables(self) -> None:
        step(3, self.TOTAL_STEPS, "Configuring CI/CD variables...")
        variables.configure_variables(self.config, self.project)

    # 4. Verification
    def verify(self) -> bool:
        step(4, self.TOTAL_STEPS, "Verifying setup...")

        if self.config.dry_run:
            self.logger.info("Dry run complete - no changes were made")
            return True

        if not self.ci_file.is_file():
            self.logger.error(f"{self.ci_file.name} not found")
            return False

        result = pipeline.query(self.ci_file, f".{JOB_NAME}")
        if result in (None, "", "null"):
            self.logger.warning(f"{JOB_NAME} job not found in {self.ci_file.name}")
            return False

        self.logger.log(SUCCESS, f"{JOB_NAME} job configured in {self.ci_file.name}")
        return True
