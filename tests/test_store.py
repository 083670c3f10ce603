"""Tests for the in-memory vulnerability store."""

import json

import pytest

from secureeye.models import Severity, Status
from secureeye.store import InvalidStoreDataError, VulnerabilityNotFoundError, VulnerabilityStore

from conftest import make_vulnerability


@pytest.fixture
def data_file(tmp_path):
    """Write a small JSON export in the dashboard's camelCase format."""
    path = tmp_path / "findings.json"
    path.write_text(json.dumps({
        "assets": [
            {"id": "asset-1", "name": "api.example.com", "type": "Domain"},
        ],
        "vulnerabilities": [
            {
                "id": "v-2",
                "title": "Weak TLS ciphers",
                "description": "TLS 1.0 enabled",
                "severity": "Medium",
                "status": "Open",
                "assetId": "asset-1",
                "discoveredAt": "2024-05-01T08:00:00Z",
            },
            {
                "id": "v-1",
                "title": "Directory listing",
                "description": "Autoindex enabled on /static",
                "severity": "Low",
                "status": "Closed",
                "assetId": "asset-1",
                "discoveredAt": "2024-04-01T08:00:00Z",
            },
        ],
    }))
    return path


class TestDefaultStore:
    """Test the built-in sample data."""

    def test_contents(self, store):
        assert len(store) == 5
        assert len(store.assets) == 4
        assert [v.id for v in store.vulnerabilities] == [f"vuln-{i}" for i in range(1, 6)]

    def test_lookup(self, store):
        vuln = store.get_vulnerability("vuln-1")

        assert vuln.title == "SQL Injection in Login Form"
        assert vuln.severity is Severity.CRITICAL
        assert store.asset_for(vuln).name == "auth.secureeye.com"

    def test_missing_ids_return_none(self, store):
        assert store.get_vulnerability("vuln-404") is None
        assert store.get_asset("asset-404") is None

    def test_require_vulnerability_raises(self, store):
        with pytest.raises(VulnerabilityNotFoundError, match="vuln-404"):
            store.require_vulnerability("vuln-404")

    def test_recent(self, store):
        assert [v.id for v in store.recent(2)] == ["vuln-1", "vuln-2"]
        assert len(store.recent()) == 5


class TestStoreConstruction:
    """Test building stores from records and files."""

    def test_duplicate_ids_rejected(self):
        vuln = make_vulnerability(1, Severity.HIGH, Status.OPEN)

        with pytest.raises(ValueError, match="Duplicate vulnerability id"):
            VulnerabilityStore([vuln, vuln])

    def test_collections_are_read_only(self, store):
        assert isinstance(store.vulnerabilities, tuple)
        assert isinstance(store.assets, tuple)

    def test_from_file_preserves_order(self, data_file):
        store = VulnerabilityStore.from_file(data_file)

        assert [v.id for v in store.vulnerabilities] == ["v-2", "v-1"]
        assert store.get_asset("asset-1").name == "api.example.com"

    def test_from_file_missing(self, tmp_path):
        with pytest.raises(InvalidStoreDataError, match="Could not read"):
            VulnerabilityStore.from_file(tmp_path / "missing.json")

    def test_from_file_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(InvalidStoreDataError):
            VulnerabilityStore.from_file(path)

    def test_from_file_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]")

        with pytest.raises(InvalidStoreDataError, match="JSON object"):
            VulnerabilityStore.from_file(path)

    def test_from_file_invalid_record(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"vulnerabilities": [{"id": "v-1", "severity": "Nope"}]}))

        with pytest.raises(InvalidStoreDataError, match="Invalid data"):
            VulnerabilityStore.from_file(path)
