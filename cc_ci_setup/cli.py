"""CLI entry point for cc-ci-setup."""

from __future__ import annotations

import argparse
import os
import sys
import tempfile
from pathlib import Path

# Ensure all platforms are registered by importing the platforms package
import cc_ci_setup.platforms  # noqa: F401
from cc_ci_setup.console import console, print_completion, print_header
from cc_ci_setup.deps import check_dependencies
from cc_ci_setup.errors import SetupError
from cc_ci_setup.logging_utils import setup_logging
from cc_ci_setup.models import VERSION, Platform, Provider, RunConfig
from cc_ci_setup.platforms import get_platform_registry


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="cc-ci-setup",
        description="Setup Claude Code for your CI/CD pipeline with a single command.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
    GITLAB_TOKEN - GitLab personal access token (default for --gitlab-token)

Examples:
    # Basic GitLab setup with Anthropic API
    cc-ci-setup --platform gitlab --api-key "sk-ant-xxx"

    # GitLab with AWS Bedrock
    cc-ci-setup --platform gitlab --provider bedrock --region us-west-2

    # Dry run to preview changes
    cc-ci-setup --platform gitlab --dry-run

    # Read API key securely from stdin
    echo "sk-ant-xxx" | cc-ci-setup --platform gitlab --api-key-stdin

Documentation:
    https://code.claude.com/docs/gitlab-ci-cd
""",
    )
    parser.add_argument(
        "--platform",
        required=True,
        choices=[p.value for p in Platform],
        help="CI/CD platform to configure",
    )
    parser.add_argument(
        "--provider",
        default=Provider.ANTHROPIC.value,
        choices=[p.value for p in Provider],
        help="API provider (default: anthropic)",
    )
    key_group = parser.add_mutually_exclusive_group()
    key_group.add_argument("--api-key", default="", help="API key (will be stored as masked CI/CD variable)")
    key_group.add_argument("--api-key-stdin", action="store_true", help="Read API key from stdin (more secure)")
    parser.add_argument("--region", default="", help="AWS/GCP region (required for bedrock/vertex)")
    parser.add_argument("--project-url", default="", help="GitLab project URL (auto-detected from git remote)")
    parser.add_argument(
        "--gitlab-token",
        default=os.environ.get("GITLAB_TOKEN", ""),
        help="GitLab personal access token for the Variables API (default: from GITLAB_TOKEN env)",
    )
    parser.add_argument("--dry-run", action="store_true", help="Preview changes without applying them")
    parser.add_argument("--force", action="store_true", help="Overwrite existing configuration")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument("-v", "--version", action="version", version=f"Claude Code CI Setup v{VERSION}")
    return parser


def parse_config(parser: ArgumentParser, argv: list[str] | None = None) -> RunConfig:
    """Parse and validate arguments. Usage errors exit with status 1."""
    args = parser.parse_args(argv)

    if args.provider != Provider.ANTHROPIC.value and not args.region:
        parser.error(f"--region is required for provider '{args.provider}'")

    if args.api_key_stdin:
        args.api_key = sys.stdin.readline().strip()

    return RunConfig.from_args(args)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    config = parse_config(parser, argv)

    registry = get_platform_registry()
    if config.platform.value not in registry:
        console.print("[yellow]GitHub Actions support is coming soon![/yellow]")
        console.print("For now, please use GitLab CI/CD.")
        return 0

    logger = setup_logging(verbose=config.verbose)

    try:
        with tempfile.TemporaryDirectory(prefix="cc-ci-setup-") as workdir:
            check_dependencies(Path(workdir))
            print_header()
            if config.dry_run:
                logger.info("DRY-RUN MODE - no changes will be made")
            registry[config.platform.value](config).run()
    except SetupError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    print_completion()
    return 0


if __name__ == "__main__":
    sys.exit(main())
