"""Tests for dashboard metrics aggregation."""

from secureeye.metrics import compute_metrics
from secureeye.models import Severity, Status

from conftest import make_vulnerability


class TestComputeMetrics:
    """Test compute_metrics()."""

    def test_mixed_collection(self, mixed_vulnerabilities):
        """Test the headline counters and distribution on a mixed collection."""
        snapshot = compute_metrics(mixed_vulnerabilities)

        assert snapshot.open_count == 2
        assert snapshot.in_progress_count == 1
        assert snapshot.closed_count == 1
        assert snapshot.total == 5
        assert snapshot.severity_distribution == {
            Severity.CRITICAL: 1,
            Severity.HIGH: 1,
            Severity.MEDIUM: 2,
            Severity.LOW: 1,
        }
        assert list(snapshot.severity_distribution) == [
            Severity.CRITICAL,
            Severity.HIGH,
            Severity.MEDIUM,
            Severity.LOW,
        ]

    def test_empty_collection(self):
        snapshot = compute_metrics([])

        assert snapshot.open_count == 0
        assert snapshot.in_progress_count == 0
        assert snapshot.closed_count == 0
        assert snapshot.total == 0
        assert snapshot.severity_distribution == {}
        assert snapshot.chart_data == []

    def test_first_occurrence_order_not_rank_order(self):
        """Test that the distribution keeps input order rather than severity rank."""
        vulns = [
            make_vulnerability(1, Severity.LOW, Status.OPEN),
            make_vulnerability(2, Severity.INFORMATIONAL, Status.OPEN),
            make_vulnerability(3, Severity.CRITICAL, Status.OPEN),
            make_vulnerability(4, Severity.LOW, Status.OPEN),
        ]

        snapshot = compute_metrics(vulns)

        assert list(snapshot.severity_distribution) == [
            Severity.LOW,
            Severity.INFORMATIONAL,
            Severity.CRITICAL,
        ]
        assert snapshot.severity_distribution[Severity.LOW] == 2

    def test_absent_severities_omitted(self, mixed_vulnerabilities):
        snapshot = compute_metrics(mixed_vulnerabilities)

        assert Severity.INFORMATIONAL not in snapshot.severity_distribution
        assert all(count > 0 for count in snapshot.severity_distribution.values())

    def test_resolved_excluded_from_headline_counts(self, mixed_vulnerabilities):
        """Test that Resolved findings only show up in the total."""
        snapshot = compute_metrics(mixed_vulnerabilities)

        headline = snapshot.open_count + snapshot.in_progress_count + snapshot.closed_count
        assert headline == snapshot.total - 1
        assert sum(snapshot.severity_distribution.values()) == snapshot.total

    def test_headline_equals_total_without_resolved(self):
        vulns = [
            make_vulnerability(1, Severity.HIGH, Status.OPEN),
            make_vulnerability(2, Severity.HIGH, Status.CLOSED),
        ]

        snapshot = compute_metrics(vulns)

        assert snapshot.open_count + snapshot.in_progress_count + snapshot.closed_count == 2

    def test_idempotent(self, store):
        assert compute_metrics(store.vulnerabilities) == compute_metrics(store.vulnerabilities)

    def test_accepts_generator(self, mixed_vulnerabilities):
        snapshot = compute_metrics(v for v in mixed_vulnerabilities)
        assert snapshot.total == 5
