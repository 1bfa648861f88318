import asyncio
from typing import Optional

import typer
from rich import print
from rich.table import Table

from .client.api import APIClient
from .client.board import UnknownParticipant
from .client.dashboard import Dashboard
from .client.registration import RegistrationForm
from .client.session import SessionContext
from .config import API_URL, PORT
from .envelope import APIError
from .logs import configure_logging
from .models import PaymentStatus

app = typer.Typer(help="funrun: fun-run registration server and admin client")

TOKEN_ENV = "FUNRUN_TOKEN"


def _client(api_url: str, token: Optional[str] = None) -> APIClient:
    session = SessionContext(token or None)
    session.on_invalidated(lambda: print("[red]Session expired. Run `funrun login` again.[/red]"))
    return APIClient(api_url, session)


def _fail(e: APIError) -> None:
    print(f"[red]{e.code}[/red]: {e.message}")
    raise typer.Exit(code=1)


@app.callback()
def main(log_level: str = typer.Option("WARNING", help="Log level")) -> None:
    configure_logging(log_level)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind address"),
    port: int = typer.Option(PORT, help="Listen port"),
) -> None:
    """Run the registration API."""
    import uvicorn

    from .main import create_app

    uvicorn.run(create_app(), host=host, port=port, log_level="info")


@app.command()
def register(
    name: str = typer.Option(..., help="Full name"),
    email: str = typer.Option(..., help="Email address"),
    phone: str = typer.Option(..., help="Phone number"),
    address: str = typer.Option(..., help="Postal address"),
    instagram: str = typer.Option("", help="Instagram handle"),
    api_url: str = typer.Option(API_URL, help="API base URL"),
) -> None:
    """Register a participant."""

    async def run():
        async with _client(api_url) as api:
            return await RegistrationForm(api).submit(
                {"name": name, "email": email, "phone": phone, "address": address, "instagram_handle": instagram}
            )

    result = asyncio.run(run())
    if result.ok:
        print(f"[green]{result.message}[/green] id={result.registration.id}")
        return
    if result.message:
        print(f"[red]{result.message}[/red]")
    for field, msg in result.errors.items():
        print(f"  {field}: {msg}")
    raise typer.Exit(code=1)


@app.command()
def login(
    email: str = typer.Option(..., help="Admin email"),
    password: str = typer.Option(..., prompt=True, hide_input=True),
    api_url: str = typer.Option(API_URL, help="API base URL"),
) -> None:
    """Log in and print a bearer token (export it as FUNRUN_TOKEN)."""

    async def run():
        async with _client(api_url) as api:
            return await api.login(email, password)

    try:
        out = asyncio.run(run())
    except APIError as e:
        _fail(e)
    print(out.token)
    print(f"[dim]expires {out.expires_at.isoformat()}[/dim]")


@app.command()
def participants(
    token: str = typer.Option("", envvar=TOKEN_ENV, help="Bearer token"),
    api_url: str = typer.Option(API_URL, help="API base URL"),
) -> None:
    """List registrants with payment totals."""

    async def run():
        async with _client(api_url, token) as api:
            dash = Dashboard(api)
            await dash.refresh()
            return dash.board

    try:
        board = asyncio.run(run())
    except APIError as e:
        _fail(e)

    table = Table("ID", "Name", "Email", "Phone", "Registration", "Payment")
    for p in board:
        table.add_row(p.id, p.name, p.email, p.phone, p.registration_status.value, p.payment_status.value)
    print(table)
    s = board.summary()
    print(f"total={s['total']} paid={s['paid']} unpaid={s['unpaid']}")


@app.command()
def toggle(
    participant_id: str,
    status: str = typer.Option("", help="PAID or UNPAID (default: flip current)"),
    token: str = typer.Option("", envvar=TOKEN_ENV, help="Bearer token"),
    api_url: str = typer.Option(API_URL, help="API base URL"),
) -> None:
    """Set or flip a participant's payment status."""

    async def run():
        async with _client(api_url, token) as api:
            dash = Dashboard(api)
            await dash.refresh()
            if status:
                outcome = await dash.set_payment(participant_id, PaymentStatus(status.upper()))
            else:
                outcome = await dash.toggle_payment(participant_id)
            return outcome, dash.board.summary()

    try:
        outcome, summary = asyncio.run(run())
    except APIError as e:
        _fail(e)
    except UnknownParticipant:
        print(f"[red]No participant with id {participant_id}[/red]")
        raise typer.Exit(code=1)
    except ValueError as e:
        print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)
    print(f"{participant_id}: [green]{outcome.value.value}[/green]")
    print(f"paid={summary['paid']} unpaid={summary['unpaid']}")
