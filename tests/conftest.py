"""Shared fixtures for the SecureEye test suite."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock

import pytest

from secureeye.config import Settings
from secureeye.gateway import GatewayReply
from secureeye.models import Asset, AssetType, Severity, Status, Vulnerability
from secureeye.store import VulnerabilityStore


def make_vulnerability(index: int, severity: Severity, status: Status, **overrides) -> Vulnerability:
    """Build a vulnerability with sensible defaults for tests."""
    fields = dict(
        id=f"vuln-{index}",
        title=f"Finding {index}",
        description=f"Description of finding {index}",
        severity=severity,
        status=status,
        asset_id="asset-1",
        discovered_at=datetime(2024, 7, index, tzinfo=timezone.utc),
    )
    fields.update(overrides)
    return Vulnerability(**fields)


@pytest.fixture
def offline_settings():
    """Settings with no API key, ignoring any .env file."""
    return Settings(OPENAI_API_KEY=None, _env_file=None)


@pytest.fixture
def online_settings():
    """Settings with a dummy API key, ignoring any .env file."""
    return Settings(OPENAI_API_KEY="sk-test-key", LLM_MODEL_NAME="gpt-4o", _env_file=None)


@pytest.fixture
def store():
    """The built-in sample store."""
    return VulnerabilityStore.default()


@pytest.fixture
def sql_injection(store):
    return store.get_vulnerability("vuln-1")


@pytest.fixture
def mixed_vulnerabilities():
    """Five findings covering every headline status plus Resolved."""
    return [
        make_vulnerability(1, Severity.CRITICAL, Status.OPEN),
        make_vulnerability(2, Severity.HIGH, Status.IN_PROGRESS),
        make_vulnerability(3, Severity.MEDIUM, Status.OPEN),
        make_vulnerability(4, Severity.LOW, Status.RESOLVED),
        make_vulnerability(5, Severity.MEDIUM, Status.CLOSED),
    ]


@pytest.fixture
def mock_gateway():
    """Gateway whose ask() succeeds with a canned reply."""
    gateway = Mock()
    gateway.ask = AsyncMock(return_value=GatewayReply(text="**Root cause**: unsanitised input"))
    return gateway


@pytest.fixture
def sample_asset():
    return Asset(id="asset-9", name="Staging API", type=AssetType.SERVER)
