"""Platform setups for cc-ci-setup."""

from cc_ci_setup.platforms.base import PlatformSetup, get_platform_registry, register_platform

# Import all platforms to register them
from cc_ci_setup.platforms.gitlab import GitLabSetup

__all__ = [
    "PlatformSetup",
    "register_platform",
    "get_platform_registry",
    "GitLabSetup",
]
