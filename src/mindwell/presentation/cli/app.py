"""MindWell CLI application using Typer.

Command-line utilities for the MindWell auth backend: running the API
server and generating deployment secrets.
"""

import secrets
from typing import Optional

import typer
import uvicorn
from pydantic import ValidationError
from rich.console import Console

from mindwell_config.settings import get_settings

app = typer.Typer(
    name="mindwell",
    help="MindWell auth backend CLI",
    no_args_is_help=True,
)
console = Console()

secrets_app = typer.Typer(
    name="secrets",
    help="Secret generation utilities",
    no_args_is_help=True,
)
app.add_typer(secrets_app)


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default: API_HOST)"),
    port: Optional[int] = typer.Option(None, help="Bind port (default: API_PORT)"),
    reload: bool = typer.Option(False, help="Reload on code changes (development)"),
) -> None:
    """Run the API server with uvicorn."""
    try:
        settings = get_settings()
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        console.print("[dim]Run 'mindwell secrets generate' to create JWT_SECRET_KEY.[/dim]")
        raise typer.Exit(code=1) from e

    uvicorn.run(
        "mindwell.presentation.api.app:create_app",
        factory=True,
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
        log_config=None,  # the app configures logging itself
    )


@secrets_app.command("generate")
def generate_secrets() -> None:
    """Generate secure secrets for MindWell configuration.

    Generates the required secrets:
    - JWT_SECRET_KEY: Secret for signing session tokens
    - POSTGRES_PASSWORD: Database password

    Copy the output to your .env file.
    """
    console.print("\n[bold green]MindWell Secret Generation[/bold green]")
    console.print("=" * 60)
    console.print("\nAdd these to your [bold].env[/bold] configuration file:\n")

    # 64 bytes of randomness for HS256 signing
    console.print(f"[cyan]JWT_SECRET_KEY[/cyan]={secrets.token_urlsafe(64)}")
    console.print(f"[cyan]POSTGRES_PASSWORD[/cyan]={secrets.token_urlsafe(32)}")

    console.print("\n" + "=" * 60)
    console.print(
        "[yellow]Keep these secrets out of version control.[/yellow]\n"
        "[dim]Use config/.env (Docker) or config/.env.dev (local).[/dim]\n"
    )


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
