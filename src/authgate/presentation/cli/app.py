"""authgate CLI application using Typer.

Provides secret generation for deployment configuration and a command
to run the API server.
"""

import secrets
from typing import Optional

import typer
import uvicorn
from rich.console import Console

from authgate_config.settings import get_settings

app = typer.Typer(
    name="authgate",
    help="authgate - credential and session lifecycle service CLI",
    no_args_is_help=True,
)
console = Console()


secrets_app = typer.Typer(
    name="secrets",
    help="Secret generation utilities",
    no_args_is_help=True,
)
app.add_typer(secrets_app)


def generate_jwt_secret() -> str:
    # 64 bytes of entropy for HS256
    return secrets.token_urlsafe(64)


@secrets_app.command("generate")
def generate_secrets() -> None:
    """Generate the secret required by authgate.

    JWT_SECRET_KEY signs every session token. Copy the output to your
    .env file.
    """
    console.print("\n[bold green]authgate Secret Generation[/bold green]")
    console.print("=" * 60)
    console.print(
        "\nGenerated secrets for your [bold].env[/bold] configuration file:\n"
    )

    console.print(f"[cyan]JWT_SECRET_KEY[/cyan]={generate_jwt_secret()}")

    console.print("\n" + "=" * 60)
    console.print(
        "[yellow]Keep these secrets secure and never commit them "
        "to version control![/yellow]"
    )
    console.print(
        "[dim]Copy the above values to your config/.env (production) or "
        "config/.env.dev (local) file.[/dim]\n"
    )


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default: API_HOST)"),
    port: Optional[int] = typer.Option(None, help="Bind port (default: API_PORT)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the authgate API server."""
    settings = get_settings()
    bind_host = host or settings.api_host
    bind_port = port or settings.api_port

    console.print(
        f"[bold green]Starting authgate API[/bold green] on {bind_host}:{bind_port}"
    )
    uvicorn.run(
        "authgate.presentation.api.app:create_app",
        factory=True,
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_config=None,
    )


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
