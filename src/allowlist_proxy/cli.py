"""
Allowlist Proxy CLI - Command-line interface.

Serve the proxy API and administer a running service from the terminal.
"""

from contextlib import contextmanager
from typing import Iterator, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from allowlist_proxy.client import ProxyClient
from allowlist_proxy.config import ProxySettings
from allowlist_proxy.core.exceptions import AllowlistProxyError, format_exception
from allowlist_proxy.version import __version__

app = typer.Typer(
    name="allowlist-proxy",
    help="Allowlist Proxy - aggregate allow decisions over multiple registries",
    no_args_is_help=True,
)
blacklist_app = typer.Typer(help="Manage the blacklist", no_args_is_help=True)
source_app = typer.Typer(help="Manage hosted allowlist sources", no_args_is_help=True)
app.add_typer(blacklist_app, name="blacklist")
app.add_typer(source_app, name="source")

console = Console()

URL_OPTION = typer.Option(None, "--url", help="Service URL (default: AP_URL)")
USER_OPTION = typer.Option(None, "--user", "-u", help="Principal to act as (x-user-id)")
API_KEY_OPTION = typer.Option(None, "--api-key", help="API key (x-api-key)")


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Print domain errors and exit with status 1."""
    try:
        yield
    except AllowlistProxyError as e:
        console.print(f"[red]Error:[/red] {escape(format_exception(e))}")
        raise typer.Exit(1) from e


def _connect(
    url: Optional[str], user: Optional[str] = None, api_key: Optional[str] = None
) -> ProxyClient:
    return ProxyClient(url or ProxySettings.from_env().url, user_id=user, api_key=api_key)


def _done(message: str) -> None:
    console.print(f"[green]✓[/green] {escape(message)}")


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold blue]Allowlist Proxy[/bold blue] v{__version__}")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default: AP_HOST)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port (default: AP_PORT)"),
):
    """Run the HTTP API."""
    import uvicorn

    with _handle_errors():
        settings = ProxySettings.from_env()

    bind_host = host or settings.host
    bind_port = port or settings.port
    console.print(
        Panel.fit(
            f"[bold blue]Allowlist Proxy API[/bold blue]\n"
            f"Proxy: {escape(settings.proxy_name)}\n"
            f"Owner: {escape(settings.owner)}\n"
            f"Listening on http://{bind_host}:{bind_port}",
        )
    )
    uvicorn.run(
        "allowlist_proxy.api.app:create_app",
        factory=True,
        host=bind_host,
        port=bind_port,
        log_level=settings.log_level.lower(),
    )


@app.command()
def info(url: Optional[str] = URL_OPTION):
    """Show the proxy descriptor."""
    with _handle_errors(), _connect(url) as client:
        data = client.info()

    console.print(
        Panel.fit(
            f"[bold]Name:[/bold] {escape(data['name'])}\n"
            f"[bold]Version:[/bold] {data['version']}\n"
            f"[bold]Owner:[/bold] {escape(str(data['owner']))}\n"
            f"[bold]Registries:[/bold] {data['total_registry']}",
            title="Allowlist Proxy",
        )
    )


@app.command()
def registries(url: Optional[str] = URL_OPTION):
    """List registered sources with their label and status."""
    with _handle_errors(), _connect(url) as client:
        rows = [(address, client.registry_info(address)) for address in client.registries()]

    if not rows:
        console.print("[yellow]No registries registered[/yellow]")
        return

    table = Table(title=f"Registries ({len(rows)})")
    table.add_column("Source", style="cyan")
    table.add_column("Label")
    table.add_column("Status")
    for address, registry in rows:
        status = "[yellow]paused[/yellow]" if registry.paused else "[green]active[/green]"
        table.add_row(address, escape(registry.label), status)

    console.print(table)


@app.command("registry-info")
def registry_info(
    address: str = typer.Argument(..., help="Source address"),
    url: Optional[str] = URL_OPTION,
):
    """Show label and pause status of one registry."""
    with _handle_errors(), _connect(url) as client:
        registered = address in client.registries()
        registry = client.registry_info(address)

    if not registered:
        console.print(f"[yellow]{address} is not registered[/yellow]")
        return
    status = "paused" if registry.paused else "active"
    console.print(f"{address}: label={escape(repr(registry.label))} status={status}")


@app.command("add-registry")
def add_registry(
    label: str = typer.Argument(..., help="Registry label"),
    source: str = typer.Argument(..., help="Hosted source address"),
    url: Optional[str] = URL_OPTION,
    user: Optional[str] = USER_OPTION,
    api_key: Optional[str] = API_KEY_OPTION,
):
    """Register a hosted source (owner only)."""
    with _handle_errors(), _connect(url, user, api_key) as client:
        client.add_registry(label, source)
    _done(f"Registered {source} as {label!r}")


@app.command("remove-registry")
def remove_registry(
    address: str = typer.Argument(..., help="Source address"),
    url: Optional[str] = URL_OPTION,
    user: Optional[str] = USER_OPTION,
    api_key: Optional[str] = API_KEY_OPTION,
):
    """Remove a registry (owner only)."""
    with _handle_errors(), _connect(url, user, api_key) as client:
        client.remove_registry(address)
    _done(f"Removed {address}")


@app.command("pause-registry")
def pause_registry(
    address: str = typer.Argument(..., help="Source address"),
    url: Optional[str] = URL_OPTION,
    user: Optional[str] = USER_OPTION,
    api_key: Optional[str] = API_KEY_OPTION,
):
    """Exclude a registry from decisions (owner only)."""
    with _handle_errors(), _connect(url, user, api_key) as client:
        client.pause_registry(address)
    _done(f"Paused {address}")


@app.command("unpause-registry")
def unpause_registry(
    address: str = typer.Argument(..., help="Source address"),
    url: Optional[str] = URL_OPTION,
    user: Optional[str] = USER_OPTION,
    api_key: Optional[str] = API_KEY_OPTION,
):
    """Put a paused registry back into consideration (owner only)."""
    with _handle_errors(), _connect(url, user, api_key) as client:
        client.unpause_registry(address)
    _done(f"Unpaused {address}")


@app.command("transfer-ownership")
def transfer_ownership(
    new_owner: str = typer.Argument(..., help="Principal to become owner"),
    url: Optional[str] = URL_OPTION,
    user: Optional[str] = USER_OPTION,
    api_key: Optional[str] = API_KEY_OPTION,
):
    """Hand the owner capability to another principal (owner only)."""
    with _handle_errors(), _connect(url, user, api_key) as client:
        client.transfer_ownership(new_owner)
    _done(f"Ownership transferred to {new_owner}")


@app.command()
def check(
    identity: str = typer.Argument(..., help="Identity to check"),
    url: Optional[str] = URL_OPTION,
):
    """Show the aggregate allow decision for an identity."""
    with _handle_errors(), _connect(url) as client:
        allowed = client.is_allowlist(identity)
        blacklisted = client.is_blacklist(identity)

    if allowed:
        console.print(f"[green]ALLOWED[/green] {identity}")
    elif blacklisted:
        console.print(f"[red]DENIED[/red] {identity} (blacklisted)")
    else:
        console.print(f"[red]DENIED[/red] {identity}")


# =============================================================================
# Blacklist
# =============================================================================


@blacklist_app.command("add")
def blacklist_add(
    identity: str = typer.Argument(..., help="Identity to deny"),
    url: Optional[str] = URL_OPTION,
    user: Optional[str] = USER_OPTION,
    api_key: Optional[str] = API_KEY_OPTION,
):
    """Blacklist an identity (owner only)."""
    with _handle_errors(), _connect(url, user, api_key) as client:
        client.add_blacklist(identity)
    _done(f"Blacklisted {identity}")


@blacklist_app.command("remove")
def blacklist_remove(
    identity: str = typer.Argument(..., help="Identity to restore"),
    url: Optional[str] = URL_OPTION,
    user: Optional[str] = USER_OPTION,
    api_key: Optional[str] = API_KEY_OPTION,
):
    """Remove an identity from the blacklist (owner only)."""
    with _handle_errors(), _connect(url, user, api_key) as client:
        client.remove_blacklist(identity)
    _done(f"Removed {identity} from blacklist")


@blacklist_app.command("check")
def blacklist_check(
    identity: str = typer.Argument(..., help="Identity to check"),
    url: Optional[str] = URL_OPTION,
):
    """Show whether an identity is blacklisted."""
    with _handle_errors(), _connect(url) as client:
        blacklisted = client.is_blacklist(identity)

    if blacklisted:
        console.print(f"[red]{identity} is blacklisted[/red]")
    else:
        console.print(f"{identity} is not blacklisted")


# =============================================================================
# Hosted sources
# =============================================================================


@source_app.command("create")
def source_create(
    address: Optional[str] = typer.Option(None, "--address", "-a", help="Address (generated if omitted)"),
    allow: Optional[List[str]] = typer.Option(None, "--allow", help="Identity to allow (repeatable)"),
    url: Optional[str] = URL_OPTION,
    user: Optional[str] = USER_OPTION,
    api_key: Optional[str] = API_KEY_OPTION,
):
    """Host a new allowlist source owned by the caller."""
    with _handle_errors(), _connect(url, user, api_key) as client:
        source = client.create_source(address=address, allowlist=allow or [])
    _done(f"Created source {source['address']} ({source['size']} allowed)")


@source_app.command("list")
def source_list(url: Optional[str] = URL_OPTION):
    """List hosted sources."""
    with _handle_errors(), _connect(url) as client:
        sources = client.list_sources()

    if not sources:
        console.print("[yellow]No sources hosted[/yellow]")
        return

    table = Table(title=f"Hosted Sources ({len(sources)})")
    table.add_column("Address", style="cyan")
    table.add_column("Owner")
    table.add_column("Allowed", justify="right")
    for source in sources:
        table.add_row(source["address"], escape(source["owner"]), str(source["size"]))

    console.print(table)


@source_app.command("allow")
def source_allow(
    address: str = typer.Argument(..., help="Source address"),
    identity: str = typer.Argument(..., help="Identity to allow"),
    url: Optional[str] = URL_OPTION,
    user: Optional[str] = USER_OPTION,
    api_key: Optional[str] = API_KEY_OPTION,
):
    """Allow an identity in one source (source owner only)."""
    with _handle_errors(), _connect(url, user, api_key) as client:
        client.source_add_allowlist(address, identity)
    _done(f"{identity} allowed by {address}")


@source_app.command("disallow")
def source_disallow(
    address: str = typer.Argument(..., help="Source address"),
    identity: str = typer.Argument(..., help="Identity to remove"),
    url: Optional[str] = URL_OPTION,
    user: Optional[str] = USER_OPTION,
    api_key: Optional[str] = API_KEY_OPTION,
):
    """Stop allowing an identity in one source (source owner only)."""
    with _handle_errors(), _connect(url, user, api_key) as client:
        client.source_remove_allowlist(address, identity)
    _done(f"{identity} no longer allowed by {address}")


@source_app.command("check")
def source_check(
    address: str = typer.Argument(..., help="Source address"),
    identity: str = typer.Argument(..., help="Identity to check"),
    url: Optional[str] = URL_OPTION,
):
    """Show whether one source allows an identity."""
    with _handle_errors(), _connect(url) as client:
        allowed = client.source_is_allowlist(address, identity)

    verdict = "[green]allows[/green]" if allowed else "[red]does not allow[/red]"
    console.print(f"{address} {verdict} {identity}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
