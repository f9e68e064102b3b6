"""Agent commands"""

import json

import click
from rich import box
from rich.console import Console
from rich.table import Table

console = Console()


@click.group()
def agents_cmd():
    """Agent information"""
    pass


@agents_cmd.command(name="list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_agents(as_json: bool):
    """List all agents"""
    from agents import get_all_agents

    agents = get_all_agents()

    if as_json:
        click.echo(json.dumps(agents, indent=2))
        return

    table = Table(title="Agents", box=box.ROUNDED)
    table.add_column("Name", style="cyan")
    table.add_column("Class")
    table.add_column("Status")
    table.add_column("Description")

    for agent in agents:
        status_style = "green" if agent["status"] == "implemented" else "yellow"
        table.add_row(
            agent["name"],
            agent["class"],
            f"[{status_style}]{agent['status']}[/{status_style}]",
            agent["description"],
        )

    console.print(table)


@agents_cmd.command()
@click.argument("name")
def schema(name: str):
    """Show input/output schema for an agent"""
    from agents import get_agent_schema

    agent = get_agent_schema(name)

    if not agent:
        console.print(f"[red]Agent '{name}' not found[/red]")
        raise SystemExit(1)

    console.print(f"\n[bold cyan]{name}[/bold cyan] ({agent['module']}.{agent['class']})")
    console.print(f"{agent['description']}\n")

    console.print("[bold]Inputs:[/bold]")
    for input_name, input_info in agent["inputs"].items():
        console.print(f"  {input_name}: {input_info}")

    console.print("\n[bold]Outputs:[/bold]")
    console.print(f"  {agent['outputs']}")
