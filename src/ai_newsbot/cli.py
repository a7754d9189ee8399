"""Command-line interface for browsing the newsbot database."""

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ai_newsbot.config import settings
from ai_newsbot.sources import load_sources
from ai_newsbot.storage import ItemDatabase

app = typer.Typer(
    name="ai-newsbot",
    help="AI NewsBot - inspect stored posts and publishing state",
    no_args_is_help=True,
)
console = Console()

DB_OPTION = typer.Option(None, "--db", help="SQLite database path")


def _open_db(db_path: Path | None) -> ItemDatabase:
    return ItemDatabase(db_path=db_path or settings.db_path)


@app.command()
def sources(
    feeds: Path = typer.Option(None, "--feeds", "-f", help="YAML feed list"),
) -> None:
    """List configured subreddit feeds."""
    all_sources = load_sources(feeds or settings.sources_file)

    table = Table(title=f"Configured Feeds ({len(all_sources)} enabled)")
    table.add_column("Name", width=30)
    table.add_column("URL", style="cyan")

    for source in all_sources:
        table.add_row(source.name[:30], source.url)

    console.print(table)


@app.command()
def ready(
    db: Path = DB_OPTION,
) -> None:
    """Show translated posts waiting to be published, oldest first."""
    items = _open_db(db).get_ready_items()

    if not items:
        console.print("[green]Nothing waiting to be published[/green]")
        return

    table = Table(title=f"Ready to Publish ({len(items)})")
    table.add_column("Stored", style="dim", width=16)
    table.add_column("ID", style="cyan", width=10)
    table.add_column("Title", width=50)
    table.add_column("Media", justify="right", width=5)

    for item in items:
        table.add_row(
            item.created_at.strftime("%Y-%m-%d %H:%M") if item.created_at else "",
            item.source_id,
            item.title[:50] + ("..." if len(item.title) > 50 else ""),
            str(len(item.media_refs)),
        )

    console.print(table)


@app.command()
def recent(
    days: int = typer.Option(1, "--days", "-d", help="Show posts stored in the last N days"),
    limit: int = typer.Option(10, "--limit", "-l", help="Max posts to show"),
    db: Path = DB_OPTION,
) -> None:
    """Show recently stored posts and whether they were published."""
    items = _open_db(db).get_recent_items(days=days, limit=limit)

    if not items:
        console.print("[yellow]No recent posts found[/yellow]")
        return

    table = Table(title=f"Recent Posts (last {days} day(s))")
    table.add_column("ID", style="cyan", width=10)
    table.add_column("Title", width=50)
    table.add_column("Published", width=16)

    for item in items:
        published = (
            f"[green]{item.published_at.strftime('%Y-%m-%d %H:%M')}[/green]"
            if item.published_at
            else "[yellow]pending[/yellow]"
        )
        table.add_row(
            item.source_id,
            item.title[:50] + ("..." if len(item.title) > 50 else ""),
            published,
        )

    console.print(table)


@app.command()
def stats(
    days: int = typer.Option(30, "--days", "-d", help="Stats for last N days"),
    db: Path = DB_OPTION,
) -> None:
    """Show storage and run statistics."""
    stats_data = _open_db(db).get_stats(days=days)

    console.print(Panel(f"[bold]NewsBot Statistics[/bold]\nLast {days} days", style="blue"))

    console.print(f"\n[bold]Posts Stored:[/bold] {stats_data['total_items']:,}")
    console.print(f"[bold]Posts Published:[/bold] {stats_data['published_items']:,}")
    console.print(f"[bold]Waiting to Publish:[/bold] {stats_data['ready_items']:,}")
    console.print(f"[bold]Pipeline Runs:[/bold] {stats_data['pipeline_runs']}")


if __name__ == "__main__":
    app()
