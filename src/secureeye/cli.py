"""Command line interface for the SecureEye dashboard."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import click

from secureeye.config import get_settings
from secureeye.gateway import AssistantGateway
from secureeye.metrics import compute_metrics
from secureeye.session import AnalysisSession
from secureeye.store import InvalidStoreDataError, VulnerabilityStore

logger = logging.getLogger(__name__)


@click.group()
@click.option(
    "--data-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON file with assets and vulnerabilities (default: built-in sample data)"
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    default=None,
    help="Logging level (default: LOG_LEVEL setting)"
)
@click.pass_context
def cli(ctx: click.Context, data_file: Optional[Path], log_level: Optional[str]) -> None:
    """SecureEye security findings dashboard."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, log_level or settings.LOG_LEVEL),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    data_file = data_file or settings.SECUREEYE_DATA_FILE
    try:
        store = VulnerabilityStore.from_file(data_file) if data_file else VulnerabilityStore.default()
    except InvalidStoreDataError as e:
        logger.error(f"Failed to load vulnerabilities: {e}")
        click.echo(f"❌ Error: {e}", err=True)
        raise click.Abort()

    ctx.obj = {"settings": settings, "store": store}


@cli.command()
@click.pass_obj
def metrics(obj: dict) -> None:
    """Print the dashboard summary."""
    snapshot = compute_metrics(obj["store"].vulnerabilities)

    click.echo("\n📊 Dashboard Summary:")
    click.echo(f"   • Open: {snapshot.open_count}")
    click.echo(f"   • In Progress: {snapshot.in_progress_count}")
    click.echo(f"   • Closed: {snapshot.closed_count}")
    click.echo(f"   • Total findings: {snapshot.total}")
    click.echo("\n📈 Severity Distribution:")
    for severity, count in snapshot.severity_distribution.items():
        click.echo(f"   • {severity.value}: {count}")


@cli.command(name="list")
@click.pass_obj
def list_vulnerabilities(obj: dict) -> None:
    """List all findings."""
    store: VulnerabilityStore = obj["store"]
    for vuln in store.vulnerabilities:
        asset = store.asset_for(vuln)
        asset_name = asset.name if asset else vuln.asset_id
        click.echo(
            f"{vuln.id:<10} {vuln.severity.value:<14} {vuln.status.value:<12} "
            f"{asset_name:<22} {vuln.title}"
        )


@cli.command()
@click.argument("vulnerability_id")
@click.argument("query")
@click.pass_obj
def ask(obj: dict, vulnerability_id: str, query: str) -> None:
    """Ask the assistant a single question about a finding."""
    store: VulnerabilityStore = obj["store"]
    vulnerability = store.get_vulnerability(vulnerability_id)
    if vulnerability is None:
        click.echo(f"❌ Unknown vulnerability: {vulnerability_id}", err=True)
        raise click.Abort()
    if not query.strip():
        click.echo("❌ Query must not be blank", err=True)
        raise click.Abort()

    session = AnalysisSession(vulnerability, AssistantGateway(obj["settings"]))
    asyncio.run(session.submit(query))

    for message in session.messages[1:]:
        click.echo(f"\n[{message.role.value}]\n{message.content}")
    session.close()


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address")
@click.option("--port", type=int, default=8000, help="Bind port")
def serve(host: str, port: int) -> None:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("secureeye.main:app", host=host, port=port)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
