"""Simple dependency injection for FastAPI endpoints."""

import logging
from typing import Annotated, Optional

from fastapi import Depends

from secureeye.config import Settings
from secureeye.controller import DashboardController
from secureeye.gateway import AssistantGateway
from secureeye.store import VulnerabilityStore

logger = logging.getLogger(__name__)


def load_store(settings: Settings) -> VulnerabilityStore:
    """Load the configured data file, or the built-in findings."""
    if settings.SECUREEYE_DATA_FILE:
        return VulnerabilityStore.from_file(settings.SECUREEYE_DATA_FILE)
    return VulnerabilityStore.default()


class AppDependencies:
    """Container for application-wide dependencies."""

    def __init__(self):
        self.store: Optional[VulnerabilityStore] = None
        self.gateway: Optional[AssistantGateway] = None
        self.controller: Optional[DashboardController] = None
        self._initialized = False

    def initialize(self, settings: Settings, store: Optional[VulnerabilityStore] = None):
        """Initialize dependencies."""
        if self._initialized:
            return

        self.store = store or load_store(settings)
        self.gateway = AssistantGateway(settings)
        self.controller = DashboardController(self.store, self.gateway)
        self._initialized = True
        logger.info(
            f"Initialized with {len(self.store)} vulnerabilities "
            f"(assistant {'online' if self.gateway.configured else 'offline'})"
        )

    def cleanup(self):
        """Clean up resources."""
        if self.controller:
            self.controller.discard_session()
        self._initialized = False

    def get_controller(self) -> DashboardController:
        if not self._initialized:
            raise RuntimeError("Dependencies not initialized")
        return self.controller


# Global instance (single instance per app)
_app_deps = AppDependencies()


def get_app_dependencies() -> AppDependencies:
    """Get the global app dependencies instance."""
    return _app_deps


def get_controller() -> DashboardController:
    """FastAPI dependency to inject the dashboard controller."""
    return get_app_dependencies().get_controller()


# Type alias for cleaner function signatures
ControllerDep = Annotated[DashboardController, Depends(get_controller)]
