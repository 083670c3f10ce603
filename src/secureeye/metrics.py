"""Dashboard metrics derived from the vulnerability collection."""

from typing import Iterable

from secureeye.models import MetricsSnapshot, Status, Vulnerability


def compute_metrics(vulnerabilities: Iterable[Vulnerability]) -> MetricsSnapshot:
    """Summarise a vulnerability collection for the dashboard.

    Pure and total: an empty collection yields zero counts and an empty
    distribution. Severities appear in the order they are first seen in the
    input, not in rank order, since the chart renders them in that order.

    Args:
        vulnerabilities: The current collection, in store order

    Returns:
        A freshly computed snapshot
    """
    status_counts = {status: 0 for status in Status}
    severity_distribution = {}
    total = 0

    for vuln in vulnerabilities:
        total += 1
        status_counts[vuln.status] += 1
        severity_distribution[vuln.severity] = severity_distribution.get(vuln.severity, 0) + 1

    return MetricsSnapshot(
        open_count=status_counts[Status.OPEN],
        in_progress_count=status_counts[Status.IN_PROGRESS],
        closed_count=status_counts[Status.CLOSED],
        total=total,
        severity_distribution=severity_distribution,
    )
