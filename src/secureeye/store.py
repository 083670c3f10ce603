"""Read-only, in-memory collection of vulnerabilities and assets.

The store is populated once at startup, either from the built-in seed data
or from a JSON export, and is never mutated afterwards.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, Optional

from pydantic import ValidationError

from secureeye.models import Asset, AssetType, Severity, Status, Vulnerability

logger = logging.getLogger(__name__)


class InvalidStoreDataError(ValueError):
    """Raised when a vulnerability collection cannot be loaded."""
    pass


class VulnerabilityNotFoundError(LookupError):
    """Raised when a vulnerability id is not present in the store."""

    def __init__(self, vulnerability_id: str):
        super().__init__(f"Vulnerability not found: {vulnerability_id}")
        self.vulnerability_id = vulnerability_id


SEED_ASSETS = [
    Asset(id="asset-1", name="api.secureeye.com", type=AssetType.DOMAIN),
    Asset(id="asset-2", name="Prod-DB-Server-01", type=AssetType.SERVER),
    Asset(id="asset-3", name="Customer Portal", type=AssetType.APPLICATION),
    Asset(id="asset-4", name="auth.secureeye.com", type=AssetType.DOMAIN),
]

SEED_VULNERABILITIES = [
    Vulnerability(
        id="vuln-1",
        title="SQL Injection in Login Form",
        description=(
            "The user login form at /login is vulnerable to SQL injection via the "
            "`username` parameter. An attacker can bypass authentication by providing "
            "a crafted payload like `' OR 1=1 --`."
        ),
        severity=Severity.CRITICAL,
        status=Status.OPEN,
        asset_id="asset-4",
        discovered_at="2024-07-20T10:00:00Z",
    ),
    Vulnerability(
        id="vuln-2",
        title="Cross-Site Scripting (XSS) in Search Results",
        description=(
            "The search functionality reflects user input without proper sanitization, "
            "leading to a stored XSS vulnerability. A malicious script can be injected "
            "into the search query, which then executes in the browsers of other users "
            "who view the search results page."
        ),
        severity=Severity.HIGH,
        status=Status.IN_PROGRESS,
        asset_id="asset-3",
        discovered_at="2024-07-18T14:30:00Z",
    ),
    Vulnerability(
        id="vuln-3",
        title="Outdated Nginx Version on Web Server",
        description=(
            "The web server running on api.secureeye.com is using Nginx 1.18.0, which "
            "has several known security vulnerabilities (e.g., CVE-2021-23017). It "
            "should be updated to the latest stable version."
        ),
        severity=Severity.MEDIUM,
        status=Status.OPEN,
        asset_id="asset-1",
        discovered_at="2024-07-15T09:00:00Z",
    ),
    Vulnerability(
        id="vuln-4",
        title="Verbose Error Messages Reveal Internal Paths",
        description=(
            "When an unhandled exception occurs in the Customer Portal, the full stack "
            "trace, including internal file paths, is revealed to the user. This "
            "information could be useful to an attacker for further reconnaissance."
        ),
        severity=Severity.LOW,
        status=Status.RESOLVED,
        asset_id="asset-3",
        discovered_at="2024-07-10T11:45:00Z",
    ),
    Vulnerability(
        id="vuln-5",
        title="Missing Security Headers",
        description=(
            "The main domain is missing important security headers like "
            "Content-Security-Policy (CSP) and Strict-Transport-Security (HSTS), making "
            "it more susceptible to clickjacking and man-in-the-middle attacks."
        ),
        severity=Severity.MEDIUM,
        status=Status.CLOSED,
        asset_id="asset-1",
        discovered_at="2024-06-25T16:00:00Z",
    ),
]


def _index_by_id(records: Iterable, kind: str) -> dict:
    index = {}
    for record in records:
        if record.id in index:
            raise ValueError(f"Duplicate {kind} id: {record.id}")
        index[record.id] = record
    return index


class VulnerabilityStore:
    """Ordered, read-only collection of vulnerabilities and their assets."""

    def __init__(self, vulnerabilities: Iterable[Vulnerability], assets: Iterable[Asset] = ()):
        self._vulnerabilities = tuple(vulnerabilities)
        self._assets = tuple(assets)
        self._vuln_index = _index_by_id(self._vulnerabilities, "vulnerability")
        self._asset_index = _index_by_id(self._assets, "asset")

        dangling = [v.id for v in self._vulnerabilities if v.asset_id not in self._asset_index]
        if dangling:
            logger.warning(f"Vulnerabilities reference unknown assets: {dangling}")

    @classmethod
    def default(cls) -> "VulnerabilityStore":
        """Store populated with the built-in sample findings."""
        return cls(SEED_VULNERABILITIES, SEED_ASSETS)

    @classmethod
    def from_file(cls, path: Path) -> "VulnerabilityStore":
        """Load a store from a JSON export.

        Args:
            path: JSON file with ``assets`` and ``vulnerabilities`` arrays

        Returns:
            Populated store preserving the file's record order

        Raises:
            InvalidStoreDataError: If the file cannot be read or validated
        """
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise InvalidStoreDataError(f"Could not read {path}: {e}") from e

        if not isinstance(raw, dict):
            raise InvalidStoreDataError("Data file must contain a JSON object")

        try:
            assets = [Asset.model_validate(a) for a in raw.get("assets", [])]
            vulns = [Vulnerability.model_validate(v) for v in raw.get("vulnerabilities", [])]
            store = cls(vulns, assets)
        except (ValidationError, ValueError) as e:
            raise InvalidStoreDataError(f"Invalid data in {path}: {e}") from e

        logger.info(f"Loaded {len(vulns)} vulnerabilities and {len(assets)} assets from {path}")
        return store

    @property
    def vulnerabilities(self) -> tuple[Vulnerability, ...]:
        return self._vulnerabilities

    @property
    def assets(self) -> tuple[Asset, ...]:
        return self._assets

    def get_vulnerability(self, vulnerability_id: str) -> Optional[Vulnerability]:
        return self._vuln_index.get(vulnerability_id)

    def require_vulnerability(self, vulnerability_id: str) -> Vulnerability:
        """Like get_vulnerability(), but raises VulnerabilityNotFoundError."""
        vulnerability = self.get_vulnerability(vulnerability_id)
        if vulnerability is None:
            raise VulnerabilityNotFoundError(vulnerability_id)
        return vulnerability

    def get_asset(self, asset_id: str) -> Optional[Asset]:
        return self._asset_index.get(asset_id)

    def asset_for(self, vulnerability: Vulnerability) -> Optional[Asset]:
        return self.get_asset(vulnerability.asset_id)

    def recent(self, limit: int = 5) -> list[Vulnerability]:
        """First ``limit`` findings in store order."""
        return list(self._vulnerabilities[:limit])

    def __len__(self) -> int:
        return len(self._vulnerabilities)
