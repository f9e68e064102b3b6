"""
CLI commands for secure API key management.

Usage:
    clipflow secrets list          # Show configured keys
    clipflow secrets set KEY       # Store a key securely
    clipflow secrets delete KEY    # Remove a key
"""

import click
from rich import box
from rich.console import Console
from rich.table import Table

console = Console()


def _normalize_key_name(key_name: str) -> str:
    from core.secrets import KNOWN_KEYS

    key_name = key_name.upper()
    if key_name not in KNOWN_KEYS and not key_name.endswith("_KEY"):
        key_name = f"{key_name}_API_KEY"
    return key_name


@click.group(name="secrets")
def secrets_cli():
    """Manage API keys securely using OS keychain."""
    pass


@secrets_cli.command(name="list")
def list_keys():
    """Show where each API key comes from."""
    from core.secrets import KNOWN_KEYS, env_names, list_api_keys

    status = list_api_keys()

    table = Table(title="API Keys", box=box.ROUNDED)
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Used for", style="dim")
    table.add_column("Source", style="bold")
    table.add_column("Value", no_wrap=True)

    labels = {
        "keychain": "[green]Keychain[/green]",
        "env": "[yellow]Env var[/yellow]",
        "not_set": "[red]Not set[/red]",
    }
    for key_name, description in KNOWN_KEYS.items():
        entry = status.get(key_name, {"source": "not_set", "preview": "-"})
        table.add_row(key_name, description, labels[entry["source"]], entry["preview"])

    console.print(table)
    if any(entry["source"] == "not_set" for entry in status.values()):
        names = " or ".join(env_names("ANTHROPIC_API_KEY"))
        console.print(f"[dim]Live runs need a key: clipflow secrets set ANTHROPIC_API_KEY, or export {names}[/dim]")


@secrets_cli.command(name="set")
@click.argument("key_name")
@click.option("--value", "-v", help="API key value (will prompt if not provided)")
def set_key(key_name: str, value: str = None):
    """Store an API key in the secure keychain."""
    from core.secrets import KNOWN_KEYS, set_api_key

    key_name = _normalize_key_name(key_name)
    if key_name not in KNOWN_KEYS:
        console.print(f"[yellow]Warning:[/yellow] {key_name} is not a recognized key name.")
        if not click.confirm("Store anyway?"):
            return

    if not value:
        value = click.prompt(f"Enter value for {key_name}", hide_input=True)

    if set_api_key(key_name, value):
        console.print(f"[green]Success:[/green] Stored {key_name} in secure keychain")
    else:
        console.print(f"[red]Error:[/red] Failed to store {key_name}")
        raise SystemExit(1)


@secrets_cli.command(name="delete")
@click.argument("key_name")
@click.option("--force", "-f", is_flag=True, help="Don't ask for confirmation")
def delete_key(key_name: str, force: bool = False):
    """Delete an API key from the keychain."""
    from core.secrets import delete_api_key

    key_name = _normalize_key_name(key_name)
    if not force and not click.confirm(f"Delete {key_name} from keychain?"):
        return

    if delete_api_key(key_name):
        console.print(f"[green]Success:[/green] Deleted {key_name} from keychain")
    else:
        console.print(f"[yellow]Warning:[/yellow] {key_name} not found in keychain")
