"""View state for a single analyst: active view, selection and session."""

import logging
from enum import Enum
from typing import Optional

from secureeye.gateway import AssistantGateway
from secureeye.metrics import compute_metrics
from secureeye.models import MetricsSnapshot
from secureeye.session import AnalysisSession
from secureeye.store import VulnerabilityStore

logger = logging.getLogger(__name__)


class View(str, Enum):
    DASHBOARD = "dashboard"
    VULNERABILITIES = "vulnerabilities"
    ANALYSIS = "analysis"


class DashboardController:
    """Drives the analysis session lifecycle from view navigation.

    Selecting a finding creates a fresh session; navigating away from the
    analysis view or selecting another finding discards it.
    """

    def __init__(self, store: VulnerabilityStore, gateway: AssistantGateway):
        self.store = store
        self.gateway = gateway
        self.view = View.DASHBOARD
        self._session: Optional[AnalysisSession] = None

    @property
    def session(self) -> Optional[AnalysisSession]:
        return self._session

    def metrics(self) -> MetricsSnapshot:
        """Recompute the dashboard metrics from the store."""
        return compute_metrics(self.store.vulnerabilities)

    def select_vulnerability(self, vulnerability_id: str) -> AnalysisSession:
        """Open the analysis view for a finding.

        Raises:
            VulnerabilityNotFoundError: If the id is not in the store
        """
        vulnerability = self.store.require_vulnerability(vulnerability_id)
        self.discard_session()
        self._session = AnalysisSession(vulnerability, self.gateway)
        self.view = View.ANALYSIS
        return self._session

    def navigate(self, view: View) -> None:
        """Switch views, discarding the session when leaving analysis."""
        view = View(view)
        if view is View.ANALYSIS and self._session is None:
            raise ValueError("Select a vulnerability before opening the analysis view")
        if view is not View.ANALYSIS:
            self.discard_session()
        self.view = view

    def discard_session(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
