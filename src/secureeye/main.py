"""FastAPI application exposing the dashboard and the analysis session."""

import logging
from contextlib import asynccontextmanager
from typing import List

from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

from secureeye import __version__
from secureeye.config import get_settings
from secureeye.controller import View
from secureeye.dependencies import ControllerDep, get_app_dependencies
from secureeye.formatting import render_message_html
from secureeye.models import (
    Asset,
    ChatRequest,
    DashboardResponse,
    SessionSnapshot,
    Vulnerability,
    VulnerabilityDetail,
)
from secureeye.session import AnalysisSession
from secureeye.store import VulnerabilityNotFoundError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - startup and shutdown."""
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)
    app_deps = get_app_dependencies()
    try:
        logger.info("Initializing application dependencies...")
        app_deps.initialize(settings)
        yield
    except Exception as e:
        logger.error(f"Failed to initialize dependencies: {e}")
        raise
    finally:
        logger.info("Cleaning up application dependencies...")
        app_deps.cleanup()


# Create FastAPI application
app = FastAPI(
    title="SecureEye",
    description="Security findings dashboard with an AI analysis assistant",
    version=__version__,
    lifespan=lifespan
)

# Add CORS middleware for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _active_session(controller: ControllerDep) -> AnalysisSession:
    if controller.session is None:
        raise HTTPException(status_code=404, detail="No active analysis session")
    return controller.session


@app.get("/")
async def root():
    """Root endpoint with basic API information."""
    return {
        "message": "SecureEye API",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    if get_app_dependencies()._initialized:
        return {"status": "healthy", "dependencies": "ready"}
    raise HTTPException(status_code=503, detail="Dependencies not initialized")


@app.get("/assets", response_model=List[Asset])
def list_assets(controller: ControllerDep):
    return list(controller.store.assets)


@app.get("/vulnerabilities", response_model=List[Vulnerability])
def list_vulnerabilities(controller: ControllerDep):
    return list(controller.store.vulnerabilities)


@app.get("/vulnerabilities/{vulnerability_id}", response_model=VulnerabilityDetail)
def get_vulnerability(vulnerability_id: str, controller: ControllerDep):
    try:
        vulnerability = controller.store.require_vulnerability(vulnerability_id)
    except VulnerabilityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return VulnerabilityDetail(
        vulnerability=vulnerability,
        asset=controller.store.asset_for(vulnerability),
    )


@app.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(controller: ControllerDep):
    """Metrics are recomputed from the store on every request."""
    return DashboardResponse(
        metrics=controller.metrics(),
        recent=controller.store.recent(5),
    )


@app.post("/vulnerabilities/{vulnerability_id}/analysis", response_model=SessionSnapshot)
def start_analysis(vulnerability_id: str, controller: ControllerDep):
    """Start a fresh analysis session, discarding any previous one."""
    try:
        session = controller.select_vulnerability(vulnerability_id)
    except VulnerabilityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return session.snapshot()


@app.get("/analysis", response_model=SessionSnapshot)
def get_analysis(controller: ControllerDep):
    return _active_session(controller).snapshot()


@app.get("/analysis/transcript", response_class=HTMLResponse)
def get_transcript(controller: ControllerDep):
    """Session thread rendered as HTML fragments, one per message."""
    session = _active_session(controller)
    return "\n".join(
        f'<div class="message {message.role.value}">{render_message_html(message.content)}</div>'
        for message in session.messages
    )


@app.post("/analysis/messages", response_model=SessionSnapshot)
async def submit_query(request: ChatRequest, controller: ControllerDep):
    """Submit a query to the active session.

    Blank queries and submissions while a reply is pending are ignored;
    the returned snapshot shows the resulting thread either way.
    """
    session = _active_session(controller)
    await session.submit(request.query)
    return session.snapshot()


@app.delete("/analysis", status_code=204)
def discard_analysis(controller: ControllerDep):
    controller.discard_session()
    if controller.view is View.ANALYSIS:
        controller.navigate(View.VULNERABILITIES)
    return Response(status_code=204)


@app.put("/view/{view}")
def navigate(view: View, controller: ControllerDep):
    try:
        controller.navigate(view)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"view": controller.view.value}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
