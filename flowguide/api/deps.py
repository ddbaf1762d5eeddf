"""API dependencies.

Shared dependencies for API routes: settings and the build-order service.
"""

from typing import Annotated

from fastapi import Depends

from flowguide.core.config import Settings, get_settings
from flowguide.services.build_order_service import BuildOrderService

# =============================================================================
# Settings Dependency
# =============================================================================

SettingsDep = Annotated[Settings, Depends(get_settings)]
"""Type alias for settings dependency injection.

Tests override ``get_settings`` through ``app.dependency_overrides`` to
tighten limits without touching the environment.
"""


# =============================================================================
# Service Dependencies
# =============================================================================


def get_build_order_service(settings: SettingsDep) -> BuildOrderService:
    """Build-order service bound to the current settings."""
    return BuildOrderService(settings)


BuildOrderServiceDep = Annotated[BuildOrderService, Depends(get_build_order_service)]


__all__ = [
    "BuildOrderServiceDep",
    "SettingsDep",
    "get_build_order_service",
]
