"""
SecureEye

A security findings dashboard backend: dashboard metrics over a collection
of vulnerabilities, and a conversational AI assistant scoped to one finding
at a time, powered by Pydantic AI.
"""

__version__ = "0.1.0"

# Core models
from .models import (
    Asset,
    AssetType,
    ChatMessage,
    MessageRole,
    MetricsSnapshot,
    Severity,
    Status,
    Vulnerability,
)

# Store and metrics
from .metrics import compute_metrics
from .store import InvalidStoreDataError, VulnerabilityNotFoundError, VulnerabilityStore

# Assistant and sessions
from .gateway import AssistantGateway, GatewayReply
from .session import AnalysisSession, SessionState
from .controller import DashboardController, View

# Configuration
from .config import Settings, get_settings

__all__ = [
    # Models
    "Asset",
    "AssetType",
    "ChatMessage",
    "MessageRole",
    "MetricsSnapshot",
    "Severity",
    "Status",
    "Vulnerability",
    # Store and metrics
    "InvalidStoreDataError",
    "VulnerabilityNotFoundError",
    "VulnerabilityStore",
    "compute_metrics",
    # Assistant and sessions
    "AnalysisSession",
    "AssistantGateway",
    "DashboardController",
    "GatewayReply",
    "SessionState",
    "View",
    # Config
    "Settings",
    "get_settings",
    # Version
    "__version__",
]
