"""Register provider secrets as GitLab CI/CD variables, or explain how to do it by hand."""

from __future__ import annotations

import logging

import requests
from rich.markup import escape

from cc_ci_setup.client import GitLabClient
from cc_ci_setup.console import console
from cc_ci_setup.logging_utils import LOGGER_NAME, SUCCESS
from cc_ci_setup.models import ProjectInfo, Provider, RunConfig

logger = logging.getLogger(LOGGER_NAME)

API_KEY_VARIABLE = "ANTHROPIC_API_KEY"

# Variables each provider needs, as listed in dry-run output
PROVIDER_VARIABLES = {
    Provider.ANTHROPIC: [f"{API_KEY_VARIABLE} (masked, protected)"],
    Provider.BEDROCK: ["AWS_ROLE_TO_ASSUME", "AWS_REGION"],
    Provider.VERTEX: ["GCP_WORKLOAD_IDENTITY_PROVIDER", "GCP_SERVICE_ACCOUNT", "CLOUD_ML_REGION"],
}


def mask_value(value: str) -> str:
    """Keep the first and last four characters of long secrets; hide short ones entirely."""
    if len(value) > 8:
        return f"{value[:4]}...{value[-4:]}"
    return "****"


def set_variable(
    client: GitLabClient,
    project_path: str,
    key: str,
    value: str,
    masked: bool = True,
    protected: bool = False,
) -> bool:
    """
    Create or update a project CI/CD variable.

    Looks the key up first: an existing variable is updated, a missing one created.
    Any failure is reported as False so the caller can fall back to manual setup.
    """
    try:
        existing = client.get_variable(project_path, key)
        if existing is not None:
            logger.debug(f"Variable {key} exists, updating")
            result = client.update_variable(project_path, key, value, masked=masked, protected=protected)
        else:
            logger.debug(f"Variable {key} not found, creating")
            result = client.create_variable(project_path, key, value, masked=masked, protected=protected)
    except requests.RequestException as e:
        logger.debug(f"Variables API request failed: {e}")
        return False

    return isinstance(result, dict) and result.get("key") == key


def print_manual_instructions(project: ProjectInfo, key: str, display_value: str) -> None:
    console.print()
    console.print("  [bold]Add variable manually:[/bold]")
    console.print(f"  1. Go to [accent]{escape(project.settings_url)}[/accent]")
    console.print("  2. Expand 'Variables' section")
    console.print("  3. Add variable:")
    console.print(f"     Key: [accent]{escape(key)}[/accent]")
    console.print(f"     Value: [dim]{escape(display_value)}[/dim]")
    console.print("     [dim]✓ Mask variable[/dim]")
    console.print("     [dim]✓ Protect variable (optional)[/dim]")


def _print_bedrock_instructions(region: str) -> None:
    logger.info("AWS Bedrock uses OIDC authentication")
    console.print()
    console.print("  [bold]Configure AWS OIDC:[/bold]")
    console.print("  1. Set up GitLab as OIDC provider in AWS IAM")
    console.print("  2. Create IAM role with Bedrock permissions")
    console.print("  3. Add these variables in GitLab CI/CD settings:")
    console.print("     [accent]AWS_ROLE_TO_ASSUME[/accent]: arn:aws:iam::xxx:role/your-role")
    console.print(f"     [accent]AWS_REGION[/accent]: {escape(region)}")
    console.print()
    console.print("  [dim]Docs: https://docs.gitlab.com/ee/ci/cloud_services/aws/[/dim]")


def _print_vertex_instructions(region: str) -> None:
    logger.info("Google Vertex AI uses Workload Identity Federation")
    console.print()
    console.print("  [bold]Configure GCP Workload Identity:[/bold]")
    console.print("  1. Set up Workload Identity Federation in GCP")
    console.print("  2. Create service account with Vertex AI permissions")
    console.print("  3. Add these variables in GitLab CI/CD settings:")
    console.print("     [accent]GCP_WORKLOAD_IDENTITY_PROVIDER[/accent]: projects/xxx/...")
    console.print("     [accent]GCP_SERVICE_ACCOUNT[/accent]: sa@project.iam.gserviceaccount.com")
    console.print(f"     [accent]CLOUD_ML_REGION[/accent]: {escape(region)}")
    console.print()
    console.print("  [dim]Docs: https://docs.gitlab.com/ee/ci/cloud_services/google_cloud/[/dim]")


def configure_variables(config: RunConfig, project: ProjectInfo, client: GitLabClient | None = None) -> None:
    """Set up the variables ``config.provider`` needs. Never aborts the run."""
    if config.dry_run:
        logger.info("Dry run - would configure the following variables:")
        for name in PROVIDER_VARIABLES[config.provider]:
            logger.info(f"  {name}")
        return

    if config.provider is Provider.BEDROCK:
        _print_bedrock_instructions(config.region)
        return
    if config.provider is Provider.VERTEX:
        _print_vertex_instructions(config.region)
        return

    if not config.api_key:
        logger.warning("No API key provided")
        print_manual_instructions(project, API_KEY_VARIABLE, "your-api-key")
        return

    if not config.gitlab_token:
        logger.debug("No GitLab token provided, skipping variables API")
        print_manual_instructions(project, API_KEY_VARIABLE, mask_value(config.api_key))
        return

    client = client or GitLabClient(project.base_url, config.gitlab_token)
    if set_variable(client, project.path, API_KEY_VARIABLE, config.api_key, masked=True, protected=True):
        logger.log(SUCCESS, f"{API_KEY_VARIABLE} configured (masked)")
    else:
        logger.warning("Could not set variable via API")
        print_manual_instructions(project, API_KEY_VARIABLE, mask_value(config.api_key))
