"""Templates and exports commands"""

import asyncio
import json
from typing import Optional

import click
from rich import box
from rich.console import Console
from rich.table import Table

from core.config import get_settings
from core.templates import TemplateRegistry

console = Console()


def _duration_range(min_duration: Optional[float], max_duration: Optional[float]) -> str:
    if min_duration is None and max_duration is None:
        return "any"
    low = f"{min_duration:g}s" if min_duration is not None else "0s"
    high = f"{max_duration:g}s" if max_duration is not None else "-"
    return f"{low} - {high}"


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--sections", is_flag=True, help="Show each template's sections")
def templates_cmd(as_json: bool, sections: bool):
    """List script templates"""
    templates = TemplateRegistry().list()

    if as_json:
        click.echo(json.dumps([
            {
                "id": t.id,
                "name": t.name,
                "description": t.description,
                "tags": t.tags,
                "sections": [s.id for s in t.sections],
                "min_duration": t.min_duration,
                "max_duration": t.max_duration,
            }
            for t in templates
        ], indent=2))
        return

    table = Table(title="Script Templates", box=box.ROUNDED)
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Duration", justify="right")
    table.add_column("Sections", justify="right")
    table.add_column("Tags", style="dim")

    for template in templates:
        table.add_row(
            template.id,
            template.name,
            _duration_range(template.min_duration, template.max_duration),
            str(len(template.sections)),
            ", ".join(template.tags[:5]),
        )
    console.print(table)

    if sections:
        for template in templates:
            console.print(f"\n[bold cyan]{template.id}[/bold cyan]")
            for section in template.sections:
                console.print(
                    f"  {section.id:<12} {section.type.value:<11} "
                    f"{section.duration:>4.0%}  ~{section.target_word_count} words"
                )


@click.command()
@click.option("--project", "-p", "project_id", help="Only this project's exports")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def exports_cmd(project_id: Optional[str], as_json: bool):
    """Show export history"""
    from cli.run import build_store

    store = build_store(get_settings())
    records = asyncio.run(store.list_exports(project_id))

    if as_json:
        click.echo(json.dumps([r.to_dict() for r in records], indent=2))
        return

    if not records:
        console.print("[dim]No exports yet[/dim]")
        return

    table = Table(title="Export History", box=box.ROUNDED)
    table.add_column("ID", style="cyan")
    table.add_column("Project")
    table.add_column("Format")
    table.add_column("Quality")
    table.add_column("Clips", justify="right")
    table.add_column("Duration", justify="right")
    table.add_column("File", style="green")

    for record in records:
        table.add_row(
            record.id,
            record.project_id,
            record.format,
            f"{record.quality} / {record.resolution}",
            str(record.total_clips),
            f"{record.duration:.1f}s",
            record.file_path,
        )
    console.print(table)
