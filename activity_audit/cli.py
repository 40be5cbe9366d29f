"""Activity audit CLI tool (activity-audit)."""

from typing import Optional

import typer

app = typer.Typer(name="activity-audit", help="Activity Audit CLI")
db_app = typer.Typer(help="Database management commands")
app.add_typer(db_app, name="db")


@db_app.command("create")
def db_create():
    """Create all tables that don't exist yet."""
    from activity_audit.db.base import Base
    from activity_audit.db.session import engine
    import activity_audit.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    typer.echo("Tables created (or already exist)")


@db_app.command("seed")
def db_seed():
    """Seed user types and the CHED admin user."""
    from activity_audit.db.session import SessionLocal
    from activity_audit.db.seeds.seed_user_types import seed_user_types
    from activity_audit.db.seeds.seed_admin import seed_admin

    db = SessionLocal()
    try:
        seed_user_types(db)
        seed_admin(db)
    finally:
        db.close()
    typer.echo("All seeds applied")


@db_app.command("reset")
def db_reset():
    """Drop and recreate all tables (DANGER)."""
    confirm = typer.confirm("This will DROP every table, including the activity log. Continue?")
    if not confirm:
        raise typer.Abort()
    from activity_audit.db.base import Base
    from activity_audit.db.session import engine
    import activity_audit.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    typer.echo("Database reset")


@app.command("logs")
def list_logs(
    status: Optional[str] = typer.Option(None, help="failed, warning, info or success"),
    search: Optional[str] = typer.Option(None, help="Text to look for in any field"),
    date_from: Optional[str] = typer.Option(None, "--from", help="First day (YYYY-MM-DD)"),
    date_to: Optional[str] = typer.Option(None, "--to", help="Last day (YYYY-MM-DD)"),
    per_page: int = typer.Option(25, help="Entries per page (5-100)"),
    page: int = typer.Option(1, help="Page number"),
):
    """Print a page of the activity log, most recent first."""
    from activity_audit.db.session import SessionLocal
    from activity_audit.schemas.schemas import ActivityLogFilters
    from activity_audit.services.audit_service import audit_service

    filters = ActivityLogFilters(
        status=status,
        search=search,
        date_from=date_from,
        date_to=date_to,
        per_page=per_page,
        page=page,
    )
    db = SessionLocal()
    try:
        result = audit_service.query_logs(db, filters)
    finally:
        db.close()

    for log in result.logs:
        role = f" ({log.user.role})" if log.user.role else ""
        typer.echo(
            f"  [{log.id}] {log.timestamp} {log.status.upper():<7} "
            f"{log.user.name}{role}: {log.description}"
        )
    typer.echo(f"Page {result.page}/{result.last_page}, {result.total} entries")


@app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", help="Host"),
    port: int = typer.Option(8000, help="Port"),
    reload: bool = typer.Option(True, help="Auto-reload"),
):
    """Start the FastAPI development server."""
    import uvicorn
    uvicorn.run("activity_audit.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
