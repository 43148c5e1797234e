import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer()
console = Console()


def build_clients(settings):
    from jobsync.sjb_client import SJBClient
    from jobsync.tokens import ZohoTokenProvider
    from jobsync.zoho_client import ZohoClient

    settings.require("sjb_api_key", "zoho_client_id", "zoho_client_secret", "zoho_refresh_token")
    tokens = ZohoTokenProvider(
        settings.zoho_client_id,
        settings.zoho_client_secret,
        settings.zoho_refresh_token,
        accounts_url=settings.zoho_accounts_url,
        timeout=settings.request_timeout,
    )
    sjb = SJBClient(
        settings.sjb_board,
        settings.sjb_api_key,
        job_id=settings.sjb_job_id,
        timeout=settings.request_timeout,
        max_retries=settings.max_retries,
    )
    zoho = ZohoClient(
        tokens,
        base_url=settings.zoho_api_base,
        timeout=settings.request_timeout,
        max_retries=settings.max_retries,
    )
    return sjb, zoho


def build_brazen(settings):
    from jobsync.brazen_client import BrazenClient

    return BrazenClient(
        settings.brazen_api_base,
        settings.brazen_client_id,
        settings.brazen_client_secret,
        timeout=settings.request_timeout,
        max_retries=settings.max_retries,
    )


def build_pipeline(settings, register: bool = True):
    from jobsync.pipeline import SyncPipeline

    sjb, zoho = build_clients(settings)
    brazen = build_brazen(settings) if register and settings.brazen_enabled else None
    return SyncPipeline(
        sjb,
        zoho,
        brazen=brazen,
        event_id=settings.brazen_event_id,
        page_size=settings.page_size,
    )


def print_result(result, title: str = "Sync Result"):
    table = Table(title=title)
    table.add_column("Metric")
    table.add_column("Value")

    table.add_row("Status", "ok" if result.success else f"aborted: {result.error}")
    table.add_row("Candidates", str(result.total))
    table.add_row("Created", str(result.created))
    table.add_row("Updated", str(result.updated))
    table.add_row("Failed", str(result.failed))
    table.add_row("Skipped", str(result.skipped))
    if result.registered:
        table.add_row("Registered", str(result.registered))
    console.print(table)

    for error in result.errors:
        console.print(f"  [red]{error.identifier}[/red]: {error.error}")


@app.command()
def run(
    dry_run: bool = typer.Option(False, "--dry-run", help="Map candidates without writing to Zoho"),
    register: bool = typer.Option(True, help="Register candidates for the Brazen event when configured"),
):
    """Run one SJB -> Zoho sync"""
    from jobsync.config import load_settings
    from jobsync.log import setup_logging

    settings = load_settings()
    setup_logging(settings.log_level)
    result = build_pipeline(settings, register=register).run_sync(dry_run=dry_run)
    print_result(result)
    if not result.success:
        raise typer.Exit(code=1)


@app.command()
def schedule(
    interval: float = typer.Option(None, help="Minutes between runs (default from settings)"),
):
    """Run the sync on a fixed interval until interrupted"""
    from jobsync.config import load_settings
    from jobsync.log import setup_logging
    from jobsync.scheduler import SyncScheduler

    settings = load_settings()
    setup_logging(settings.log_level)
    pipeline = build_pipeline(settings)
    minutes = interval or settings.interval_minutes

    console.print(f"Syncing every {minutes} minutes. Ctrl+C to stop.")
    scheduler = SyncScheduler(pipeline.run_sync, interval_seconds=minutes * 60)
    try:
        scheduler.run_forever()
    except KeyboardInterrupt:
        console.print("Stopped.")


@app.command()
def import_registrations():
    """Import Brazen event registrants into SJB and Zoho"""
    from jobsync.config import load_settings
    from jobsync.log import setup_logging
    from jobsync.pipeline import RegistrationImporter

    settings = load_settings()
    setup_logging(settings.log_level)
    settings.require("brazen_client_id", "brazen_client_secret", "brazen_event_id")
    sjb, zoho = build_clients(settings)

    importer = RegistrationImporter(build_brazen(settings), sjb, zoho, settings.brazen_event_id)
    result = importer.run()
    print_result(result, title="Registration Import")
    if not result.success:
        raise typer.Exit(code=1)


@app.command()
def check_auth():
    """Verify the Zoho (and Brazen, if configured) credentials"""
    from jobsync.config import load_settings
    from jobsync.errors import SyncError

    settings = load_settings()
    ok = True
    try:
        _, zoho = build_clients(settings)
        zoho.tokens.get_token()
        console.print("Zoho: [green]ok[/green]")
    except SyncError as e:
        console.print(f"Zoho: [red]{e}[/red]")
        ok = False

    if settings.brazen_enabled:
        try:
            build_brazen(settings).authenticate()
            console.print("Brazen: [green]ok[/green]")
        except SyncError as e:
            console.print(f"Brazen: [red]{e}[/red]")
            ok = False

    if not ok:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
