"""CLI commands for guest list administration."""

import asyncio
from uuid import UUID

import typer

from guestlist.errors import DomainError
from guestlist.events import get_event_publisher
from guestlist.guests.dtos import NewGuestDTO, TokenKind
from guestlist.guests.features.create_guest.write_model import SqlGuestCreateWriteModel
from guestlist.guests.features.verify_guest.write_model import SqlGuestVerifyWriteModel
from guestlist.tenants.authorizer import Caller, Role, TenantScope
from guestlist.tenants.features.manage_tenants.write_model import (
    SqlOperatorWriteModel,
    SqlTenantWriteModel,
)

app = typer.Typer(help="CLI commands for guest list administration")

CLI_OPERATOR = Caller(role=Role.OPERATOR.value, subject="cli")


def _run(coro):
    """Run a write model call, turning domain errors into a red message and exit code 1."""
    try:
        return asyncio.run(coro)
    except DomainError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)


# Operators


@app.command()
def create_operator(
    username: str = typer.Argument(..., help="Operator login name"),
    password: str = typer.Option(
        ...,
        "--password",
        "-p",
        prompt=True,
        hide_input=True,
        confirmation_prompt=True,
        help="Operator password (prompted when omitted)",
    ),
):
    """Create an operator account able to manage every tenant."""
    operator = _run(SqlOperatorWriteModel().create_operator(username, password))

    typer.secho("Operator created!", fg=typer.colors.GREEN)
    typer.secho(f"  Username: {operator.username}", fg=typer.colors.BLUE)
    typer.secho(f"  ID: {operator.id}", fg=typer.colors.CYAN)


@app.command()
def rotate_operator_password(
    username: str = typer.Argument(..., help="Operator login name"),
    password: str = typer.Option(
        ...,
        "--password",
        "-p",
        prompt="New password",
        hide_input=True,
        confirmation_prompt=True,
        help="New operator password (prompted when omitted)",
    ),
):
    """Replace an operator's password."""
    operator = _run(SqlOperatorWriteModel().rotate_operator_password(username, password))

    typer.secho(f"Password rotated for {operator.username}", fg=typer.colors.GREEN)
    typer.secho("Tokens issued before the rotation no longer work.", fg=typer.colors.YELLOW)


@app.command()
def deactivate_operator(username: str = typer.Argument(..., help="Operator login name")):
    """Disable an operator and revoke its tokens."""
    operator = _run(SqlOperatorWriteModel().deactivate_operator(username))

    typer.secho(f"Operator {operator.username} deactivated", fg=typer.colors.GREEN)


# Tenants and guests


@app.command()
def create_tenant(
    name: str = typer.Argument(..., help="Display name of the couple"),
    email: str = typer.Option(None, "--email", "-e", help="Contact email"),
):
    """Create a tenant and print its generated credentials."""
    created = _run(SqlTenantWriteModel().create_tenant(CLI_OPERATOR, name=name, email=email))

    typer.secho("Tenant created!", fg=typer.colors.GREEN)
    typer.secho(f"  Tenant ID: {created.tenant.id}", fg=typer.colors.CYAN)
    typer.secho(f"  Username: {created.credentials.username}", fg=typer.colors.BLUE)
    typer.secho(f"  Password: {created.credentials.password}", fg=typer.colors.BLUE)
    typer.echo()
    typer.secho("The password is shown only once.", fg=typer.colors.YELLOW)


@app.command()
def create_guest(
    tenant_id: str = typer.Argument(..., help="Tenant UUID"),
    name: str = typer.Argument(..., help="Guest name"),
    phone_number: str = typer.Argument(..., help="Guest phone number, unique within the tenant"),
    companion: bool = typer.Option(False, "--companion", "-c", help="Allow the guest a companion"),
):
    """Add a guest to a tenant's list and print the RSVP link and door code."""
    write_model = SqlGuestCreateWriteModel(event_publisher=get_event_publisher())
    guest = _run(
        write_model.create_guest(
            TenantScope.for_tenant(UUID(tenant_id)),
            NewGuestDTO(name=name, phone_number=phone_number, companion_allowed=companion),
        )
    )

    typer.secho("Guest created!", fg=typer.colors.GREEN)
    typer.secho(f"  Name: {guest.name}", fg=typer.colors.BLUE)
    typer.secho(f"  Guest ID: {guest.id}", fg=typer.colors.CYAN)
    typer.secho(f"  Code: {guest.code}", fg=typer.colors.MAGENTA)
    typer.secho(f"  RSVP URL: {guest.rsvp_link}", fg=typer.colors.CYAN)


@app.command()
def verify_guest(
    token: str = typer.Argument(..., help="Guest identifier or 4-digit code"),
    tenant_id: str = typer.Option(None, "--tenant", "-t", help="Tenant UUID, required for codes"),
    kind: TokenKind = typer.Option(TokenKind.IDENTIFIER, "--kind", "-k", help="Token kind"),
):
    """Check a guest in at the door."""
    scope = TenantScope.for_tenant(UUID(tenant_id)) if tenant_id else TenantScope.all_tenants()
    write_model = SqlGuestVerifyWriteModel(event_publisher=get_event_publisher())
    result = _run(write_model.verify(scope, kind, token))

    color = typer.colors.GREEN if result.first_scan else typer.colors.YELLOW
    typer.secho(result.message, fg=color)
    typer.secho(f"  Guest: {result.guest.name}", fg=typer.colors.BLUE)
    typer.secho(f"  Verified at: {result.guest.verified_at}", fg=typer.colors.CYAN)


if __name__ == "__main__":
    app()
