"""Contabilito CLI tool."""

import logging

import typer

from contabilito.core.config import settings
from contabilito.db.store import CredentialStore

app = typer.Typer(name="contabilito", help="Contabilito backend CLI")
db_app = typer.Typer(help="Database management commands")
app.add_typer(db_app, name="db")


@db_app.command("init")
def db_init():
    """Create any missing tables and indexes."""
    with CredentialStore(settings.DATABASE_URL) as store:
        store.ensure_schema()
    typer.echo(f"Schema ready at {settings.DATABASE_URL}")


@db_app.command("seed")
def db_seed():
    """Create the demo user, company, accounts and transactions."""
    from contabilito.db.seeds.seed_sample_data import seed_sample_data

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    with CredentialStore(settings.DATABASE_URL) as store:
        store.ensure_schema()
        seed_sample_data(store, settings)
    typer.echo("Demo data applied")


@app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", help="Host"),
    port: int = typer.Option(8000, help="Port"),
    reload: bool = typer.Option(False, help="Auto-reload"),
):
    """Start the API server."""
    import uvicorn
    uvicorn.run("contabilito.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
