"""Run command - Executes the full workflow for one video"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import click
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from core.config import StudioSettings, get_settings
from core.errors import WorkflowError
from core.models.script import AIModelRef, ScriptLength
from core.models.workflow import WorkflowCallbacks, WorkflowConfig, WorkflowData, WorkflowStatus
from core.projects import ProjectStore
from core.providers.mock import MockMediaProvider, MockTextProvider, MockVisionProvider
from core.storage import InMemoryStorage, LocalStorage

console = Console()


def setup_logging(level: str, verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True,
    )


def build_store(settings: StudioSettings, backend: Optional[str] = None) -> ProjectStore:
    backend = backend or settings.storage_backend
    if backend == "memory":
        return ProjectStore(InMemoryStorage())
    return ProjectStore(LocalStorage(settings.storage_dir))


def build_providers(settings: StudioSettings, live: bool):
    """(vision, text, media) for the selected mode"""
    if live:
        from core.claude_client import ClaudeClient
        from core.providers.claude import ClaudeTextProvider
        text = ClaudeTextProvider(
            client=ClaudeClient(model=settings.model_id, max_tokens=settings.max_tokens)
        )
    else:
        text = MockTextProvider()
    return MockVisionProvider(), text, MockMediaProvider()


def load_config(config_file: Optional[str]) -> WorkflowConfig:
    if not config_file:
        return WorkflowConfig()
    with open(config_file, "r", encoding="utf-8") as f:
        return WorkflowConfig.from_dict(json.load(f))


def print_summary(data: WorkflowData, warnings):
    table = Table(title="Run Summary", box=box.ROUNDED)
    table.add_column("Artifact", style="cyan")
    table.add_column("Value")

    if data.video_info:
        table.add_row("Video", f"{data.video_info.name} ({data.video_info.duration:.1f}s)")
    if data.video_analysis:
        table.add_row("Scenes", str(len(data.video_analysis.scenes)))
    if data.selected_template:
        table.add_row("Template", data.selected_template.name)
    script = data.current_script
    if script:
        table.add_row("Script", f"{script.id} ({len(script.segments)} segments)")
    if data.originality_report:
        table.add_row("Originality", f"{data.originality_report.score}/100")
    if data.uniqueness_result:
        status = "unique" if data.uniqueness_result.is_unique else "not unique"
        table.add_row(
            "Uniqueness",
            f"{status}, similarity {data.uniqueness_result.similarity:.2f} "
            f"after {data.uniqueness_result.attempts} check(s)",
        )
    if data.clip_plan:
        table.add_row("Clip plan", f"{len(data.clip_plan.segments)} clips, {data.clip_plan.total_duration:.1f}s")
    if data.timeline:
        table.add_row("Timeline", f"{data.timeline.total_clips} clips, {data.timeline.duration:.1f}s")
    if data.export_path:
        table.add_row("Export", f"[green]{data.export_path}[/green]")

    console.print(table)
    for warning in warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")


@click.command()
@click.argument("video", type=click.Path())
@click.option("--project", "-p", "project_id", default="default", help="Project id")
@click.option("--mock/--live", default=None, help="Use mock providers (default from CLIPFLOW_PROVIDER_MODE)")
@click.option("--config", "-c", "config_file", type=click.Path(exists=True), help="JSON workflow config")
@click.option("--template", "-t", help="Preferred template id")
@click.option("--style", help="Narration style")
@click.option("--tone", help="Narration tone")
@click.option("--length", type=click.Choice([l.value for l in ScriptLength]), help="Script length")
@click.option("--language", "-l", help="Narration language code (en, zh)")
@click.option("--no-dedup", is_flag=True, help="Skip the originality check")
@click.option("--no-uniqueness", is_flag=True, help="Skip the uniqueness check")
@click.option("--ai-clip", is_flag=True, help="Plan automatic cuts")
@click.option("--target-duration", type=float, help="Target output duration for AI clipping (seconds)")
@click.option("--no-export", is_flag=True, help="Stop after the timeline")
@click.option("--storage", type=click.Choice(["memory", "local"]), help="Storage backend")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
def run_cmd(
    video: str,
    project_id: str,
    mock: Optional[bool],
    config_file: Optional[str],
    template: Optional[str],
    style: Optional[str],
    tone: Optional[str],
    length: Optional[str],
    language: Optional[str],
    no_dedup: bool,
    no_uniqueness: bool,
    ai_clip: bool,
    target_duration: Optional[float],
    no_export: bool,
    storage: Optional[str],
    verbose: bool
):
    """Run the workflow on VIDEO: analyze, script, dedup, clip, export

    \b
    Examples:
      clipflow run demo.mp4 --mock
      clipflow run demo.mp4 -p travel -t story-arc --language zh
      clipflow run demo.mp4 --ai-clip --target-duration 60
    """
    settings = get_settings()
    setup_logging(settings.log_level, verbose)

    live = settings.provider_mode == "live" if mock is None else not mock

    config = load_config(config_file)
    if config_file is None:
        config.model = AIModelRef(id=settings.model_id)
        config.timeouts.text_generation = settings.text_timeout
        config.timeouts.export = settings.export_timeout
    config.preferred_template = template or config.preferred_template or settings.default_template
    if style:
        config.script_params.style = style
    if tone:
        config.script_params.tone = tone
    if length:
        config.script_params.length = ScriptLength(length)
    if language:
        config.script_params.language = language
    if no_dedup:
        config.dedup.enabled = False
    if no_uniqueness:
        config.uniqueness.enabled = False
    if ai_clip:
        config.ai_clip.enabled = True
        config.ai_clip.auto_clip = True
    if target_duration is not None:
        config.ai_clip.target_duration = target_duration
    if no_export:
        config.auto_export = False

    try:
        vision, text, media = build_providers(settings, live)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    console.print(Panel(
        f"[bold]{Path(video).name}[/bold]\n"
        f"Project: [cyan]{project_id}[/cyan]   Mode: {'[green]live' if live else '[yellow]mock'}[/]",
        title="ClipFlow Studio",
        box=box.ROUNDED,
    ))

    from workflows import WorkflowController

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Starting", total=100)

        callbacks = WorkflowCallbacks(
            on_step_change=lambda old, new: progress.update(task, description=new.value),
            on_progress=lambda value: progress.update(task, completed=value),
        )
        controller = WorkflowController(
            vision,
            text,
            media,
            store=build_store(settings, storage),
            callbacks=callbacks,
            export_dir=settings.export_dir,
        )

        try:
            data = asyncio.run(controller.run(project_id, video, config))
        except WorkflowError as e:
            progress.stop()
            state = controller.get_state()
            console.print(f"[red]Error:[/red] {state.status_message if state.error else e}")
            raise SystemExit(1)

    state = controller.get_state()
    if state.status == WorkflowStatus.CANCELLED:
        console.print("[yellow]Run cancelled[/yellow]")
    print_summary(data, state.warnings)
