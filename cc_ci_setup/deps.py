"""Check for the external tools the setup shells out to, installing yq if needed."""

from __future__ import annotations

import logging
import os
import platform
import shutil
import stat
import subprocess
import sys
from pathlib import Path

from rich.markup import escape

from cc_ci_setup.console import console
from cc_ci_setup.errors import DependencyError
from cc_ci_setup.logging_utils import LOGGER_NAME, SUCCESS
from cc_ci_setup.models import ARCH_ALIASES, YQ_RELEASE_URL

logger = logging.getLogger(LOGGER_NAME)

# curl first: the yq install downloads with it
REQUIRED_TOOLS = ("curl", "git")
YQ = "yq"


def find_tool(name: str) -> str | None:
    path = shutil.which(name)
    if path:
        logger.debug(f"{name} found: {path}")
    return path


def detect_os() -> str | None:
    if sys.platform.startswith("darwin"):
        return "darwin"
    if sys.platform.startswith("linux"):
        return "linux"
    return None


def detect_arch() -> str | None:
    return ARCH_ALIASES.get(platform.machine().lower())


def yq_download_url(os_name: str, arch: str) -> str:
    return f"{YQ_RELEASE_URL}/yq_{os_name}_{arch}"


def install_yq(workdir: Path, install_dir: Path | None = None) -> bool:
    """
    Download the yq release binary for this machine into ``install_dir``.

    The binary is fetched into ``workdir`` first so that a partial download never
    lands on PATH. On success ``install_dir`` is prepended to PATH for this process.
    """
    install_dir = install_dir or Path.home() / ".local" / "bin"
    logger.info("yq not found. Installing...")

    os_name = detect_os()
    if os_name is None:
        logger.error(f"Unsupported OS: {sys.platform}")
        return False
    arch = detect_arch()
    if arch is None:
        logger.error(f"Unsupported architecture: {platform.machine()}")
        return False

    url = yq_download_url(os_name, arch)
    staged = Path(workdir) / YQ
    console.print("  [accent]→[/accent] Downloading yq from GitHub...")
    result = subprocess.run(
        ["curl", "-fsSL", url, "-o", str(staged)], capture_output=True, text=True, check=False
    )
    if result.returncode != 0:
        logger.debug(f"curl exited {result.returncode}: {result.stderr.strip()}")
        logger.error("Failed to download yq")
        return False

    install_dir.mkdir(parents=True, exist_ok=True)
    target = install_dir / YQ
    shutil.move(str(staged), str(target))
    target.chmod(target.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    logger.log(SUCCESS, f"yq installed to {target}")

    path_entries = os.environ.get("PATH", "").split(os.pathsep)
    if str(install_dir) not in path_entries:
        os.environ["PATH"] = os.pathsep.join([str(install_dir), *path_entries])
        console.print()
        console.print(f"  [warning]⚠[/warning] Add [accent]{escape(str(install_dir))}[/accent] to your PATH:")
        console.print("     [dim]echo 'export PATH=\"$HOME/.local/bin:$PATH\"' >> ~/.bashrc[/dim]")
        console.print("     [dim]# or for zsh: >> ~/.zshrc[/dim]")
    return True


def print_yq_install_instructions() -> None:
    release = f"{YQ_RELEASE_URL}/yq_linux_amd64"
    console.print()
    console.print("[error]Error: yq is required but automatic installation failed.[/error]")
    console.print()
    console.print("[bold]Install yq manually:[/bold]")
    console.print()
    if detect_os() == "darwin":
        console.print("  [accent]macOS (Homebrew):[/accent]")
        console.print("    brew install yq")
    elif Path("/etc/debian_version").is_file():
        console.print("  [accent]Debian/Ubuntu:[/accent]")
        console.print("    sudo apt update && sudo apt install yq")
        console.print()
        console.print("  Or install latest version:")
        console.print(f"    sudo wget {release} -O /usr/bin/yq")
        console.print("    sudo chmod +x /usr/bin/yq")
    elif Path("/etc/redhat-release").is_file():
        console.print("  [accent]RHEL/CentOS/Fedora:[/accent]")
        console.print("    sudo dnf install yq")
        console.print()
        console.print("  Or install latest version:")
        console.print(f"    sudo wget {release} -O /usr/bin/yq")
        console.print("    sudo chmod +x /usr/bin/yq")
    else:
        console.print("  [accent]Using Go:[/accent]")
        console.print("    go install github.com/mikefarah/yq/v4@latest")
        console.print()
        console.print("  [accent]Manual download:[/accent]")
        console.print("    https://github.com/mikefarah/yq/releases")
    console.print()


def check_dependencies(workdir: Path) -> None:
    """Raise DependencyError unless curl, git and yq are all available."""
    missing = [name for name in REQUIRED_TOOLS if not find_tool(name)]
    for name in missing:
        logger.error(f"{name} is required but not installed.")

    if not find_tool(YQ):
        # yq is downloaded with curl
        if "curl" in missing or not install_yq(workdir):
            print_yq_install_instructions()
            missing.append(YQ)

    if missing:
        raise DependencyError(f"Missing required tools: {', '.join(missing)}")

    logger.debug("All dependencies satisfied")
