"""Base class and registry for platform setups."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from cc_ci_setup.logging_utils import LOGGER_NAME
from cc_ci_setup.models import RunConfig

# ---------------------------------------------------------------------------
# Platform Registry
# ---------------------------------------------------------------------------

_platform_registry: dict[str, type[PlatformSetup]] = {}


def register_platform(name: str):
    """Decorator to register a setup class under a ``--platform`` value."""

    def decorator(cls):
        _platform_registry[name] = cls
        cls.platform_name = name
        return cls

    return decorator


def get_platform_registry() -> dict[str, type[PlatformSetup]]:
    """Get the platform registry."""
    return _platform_registry


# ---------------------------------------------------------------------------
# Platform Setup Base Class
# ---------------------------------------------------------------------------


class PlatformSetup(ABC):
    """Base class for a platform's setup flow."""

    platform_name: str = ""

    def __init__(self, config: RunConfig):
        self.config = config
        self.logger = logging.getLogger(LOGGER_NAME)

    @abstractmethod
    def run(self) -> None:
        """Run every setup step. Raise SetupError to abort."""
        ...
