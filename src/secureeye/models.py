"""Pydantic models for the SecureEye dashboard.

This module defines the data contracts shared by the store, the metrics
aggregator, the assistant gateway and the analysis session: findings and the
assets they belong to, chat messages, and the derived dashboard snapshot.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


class Severity(str, Enum):
    """Risk ranking of a finding, most severe first."""

    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    INFORMATIONAL = "Informational"

    @property
    def rank(self) -> int:
        """Position in the severity ordering (0 is Critical)."""
        return list(Severity).index(self)


class Status(str, Enum):
    """Lifecycle stage of a finding."""

    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    CLOSED = "Closed"


class AssetType(str, Enum):
    DOMAIN = "Domain"
    SERVER = "Server"
    APPLICATION = "Application"


class MessageRole(str, Enum):
    ANALYST = "analyst"
    ASSISTANT = "assistant"
    SYSTEM = "system"


# Chart colours keyed by severity (tailwind 500 palette)
SEVERITY_COLORS: dict[Severity, str] = {
    Severity.CRITICAL: "#ef4444",
    Severity.HIGH: "#f97316",
    Severity.MEDIUM: "#eab308",
    Severity.LOW: "#22c55e",
    Severity.INFORMATIONAL: "#3b82f6",
}


class Asset(BaseModel):
    """A domain, server or application that findings are reported against."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        extra="forbid",
        frozen=True
    )

    id: str = Field(
        ...,
        description="Unique asset identifier",
        min_length=1,
        examples=["asset-1"]
    )

    name: str = Field(
        ...,
        description="Display name of the asset",
        min_length=1,
        examples=["api.secureeye.com", "Prod-DB-Server-01"]
    )

    type: AssetType = Field(
        ...,
        description="Asset category: Domain, Server or Application"
    )


class Vulnerability(BaseModel):
    """A single security finding.

    Records are immutable; their lifecycle is owned by whatever system
    supplies the collection at startup. Field aliases accept the camelCase
    keys used by the dashboard's JSON exports.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        extra="forbid",
        frozen=True
    )

    id: str = Field(
        ...,
        description="Unique finding identifier",
        min_length=1,
        examples=["vuln-1"]
    )

    title: str = Field(
        ...,
        description="Short human-readable title of the finding",
        min_length=1,
        max_length=200,
        examples=["SQL Injection in Login Form"]
    )

    description: str = Field(
        ...,
        description="Free-text description of the finding",
        max_length=5000
    )

    severity: Severity
    status: Status

    asset_id: str = Field(
        ...,
        alias="assetId",
        description="Identifier of the asset this finding belongs to",
        min_length=1
    )

    discovered_at: datetime = Field(
        ...,
        alias="discoveredAt",
        description="ISO-8601 instant the finding was discovered"
    )

    poc: Optional[str] = Field(
        default=None,
        description="Path to a proof of concept file or image, if any"
    )


class ChatMessage(BaseModel):
    """One entry in an analysis session's thread.

    Content is kept exactly as written (no whitespace stripping) and may
    contain ``**bold**`` markup and line breaks.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: int = Field(..., description="Creation-ordered identifier within the session", ge=0)
    role: MessageRole
    content: str


class SeverityCount(BaseModel):
    """A single bar in the severity distribution chart."""

    model_config = ConfigDict(frozen=True)

    name: Severity
    count: int = Field(..., ge=1)
    color: str


class MetricsSnapshot(BaseModel):
    """Dashboard counters derived from the vulnerability collection.

    ``severity_distribution`` keeps first-occurrence order of the input and
    never contains zero counts. Resolved findings are counted in ``total``
    only; the headline counters cover Open, In Progress and Closed.
    """

    model_config = ConfigDict(frozen=True)

    open_count: int = Field(default=0, ge=0)
    in_progress_count: int = Field(default=0, ge=0)
    closed_count: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)

    severity_distribution: dict[Severity, int] = Field(default_factory=dict)

    @computed_field
    @property
    def chart_data(self) -> list[SeverityCount]:
        """Chart series in distribution order."""
        return [
            SeverityCount(name=severity, count=count, color=SEVERITY_COLORS[severity])
            for severity, count in self.severity_distribution.items()
        ]


class ChatRequest(BaseModel):
    """Request body for submitting a query to the active session."""

    query: str = Field(
        ...,
        description="Free-text question for the assistant",
        examples=["Suggest a remediation plan"]
    )


class SessionSnapshot(BaseModel):
    """Read-only view of an analysis session for the presentation layer."""

    vulnerability_id: str
    state: str
    awaiting_reply: bool
    messages: list[ChatMessage] = Field(default_factory=list)
    suggested_queries: list[str] = Field(default_factory=list)


class VulnerabilityDetail(BaseModel):
    """A finding together with the asset it belongs to."""

    vulnerability: Vulnerability
    asset: Optional[Asset] = None


class DashboardResponse(BaseModel):
    """Payload for the dashboard view."""

    metrics: MetricsSnapshot
    recent: list[Vulnerability] = Field(default_factory=list)
