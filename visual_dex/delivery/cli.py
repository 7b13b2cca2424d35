"""
Visual DeX: terminal front end.

Photograph objects, get example sentences and hunt for the day's missions.

Commands:
- visual-dex capture     - Label a photo (free play or mission hunt)
- visual-dex missions    - Show today's missions
- visual-dex status      - Points, streak, photo quota and learned objects
- visual-dex translate   - Translate sentences through the cascade
- visual-dex reset       - Forget all learned objects
- visual-dex language    - Switch the UI language (en/es)
"""
from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from visual_dex.config import get_settings
from visual_dex.missions import environment_display_name, object_display_name
from visual_dex.missions.catalog import ENVIRONMENTS

from .messages import format_duration, t, tier_name
from .session import CaptureMode, CaptureResult, CaptureStatus, SessionCoordinator

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="visual-dex",
    help="Visual DeX: learn vocabulary by photographing the world around you",
    no_args_is_help=True,
)
console = Console()

STATUS_STYLES = {
    CaptureStatus.QUOTA_EXCEEDED: "bold yellow",
    CaptureStatus.INVALID_INPUT: "bold red",
    CaptureStatus.NOT_FOUND: "yellow",
    CaptureStatus.WRONG_OBJECT: "yellow",
    CaptureStatus.MISSION_COMPLETED: "bold green",
    CaptureStatus.SENTENCES: "bold cyan",
}


def _build_coordinator() -> SessionCoordinator:
    return SessionCoordinator.from_settings(get_settings())


# =============================================================================
# Display Helpers
# =============================================================================


def _render_capture(result: CaptureResult, language: str) -> None:
    style = STATUS_STYLES.get(result.status, "white")
    console.print(Panel(f"[{style}]{escape(result.message)}[/{style}]", title=result.status.value, expand=False))

    for index, sentence in enumerate(result.sentences, start=1):
        console.print(f"  {index}. {escape(sentence)}")

    footer = (
        f"[dim]{t('remaining_photos', language)}: {result.photos_remaining} | "
        f"{t('total_points', language)}: {result.points} | "
        f"{t('streak_days', language)}: {result.streak_days}[/dim]"
    )
    console.print(footer)

    if result.limit_reached and result.retry_after is not None:
        console.print(
            f"[yellow]{t('healthy_break', language)}: {t('break_message', language)} "
            f"{t('next_session', language)} {format_duration(result.retry_after, language)}[/yellow]"
        )


# =============================================================================
# Commands
# =============================================================================


@app.command()
def capture(
    image: Path = typer.Argument(..., help="Image file to label"),
    mode: CaptureMode = typer.Option(CaptureMode.FREE, "--mode", "-m", help="free or mission"),
    target: Optional[str] = typer.Option(None, "--target", "-t", help="Mission id being hunted"),
    translate: bool = typer.Option(False, "--translate", help="Also translate the sentences"),
    speak: bool = typer.Option(False, "--speak", help="Read the sentences aloud"),
) -> None:
    """Label a photo and learn from it."""
    image_bytes = image.read_bytes() if image.is_file() else b""

    async def _run() -> None:
        coordinator = _build_coordinator()
        try:
            language = coordinator.repository.load_language()
            result = await coordinator.handle_capture(image_bytes, mode=mode, target_mission_id=target)
            _render_capture(result, language)

            if result.sentences and translate:
                translated = await coordinator.translate_sentences(result.sentences)
                for sentence in translated:
                    console.print(f"  [magenta]{escape(sentence)}[/magenta]")
            if result.sentences and speak:
                for sentence in result.sentences:
                    coordinator.speak(sentence, "en")
        finally:
            await coordinator.close()

    asyncio.run(_run())


@app.command()
def missions() -> None:
    """Show today's missions."""
    coordinator = _build_coordinator()
    state = coordinator.load()
    language = state.language

    if not state.missions:
        console.print("[yellow]No missions available.[/yellow]")
        raise typer.Exit(1)

    env_key = state.missions[0].environment_key
    env = ENVIRONMENTS.get(env_key)
    emoji = env.emoji if env else ""
    done, total = coordinator.scheduler.progress(state.missions)

    table = Table(title=f"{emoji} {t('todays_missions', language)}: {environment_display_name(env_key, language)}")
    table.add_column("ID", style="dim")
    table.add_column(t("find_objects", language))
    table.add_column("Points", justify="right")
    table.add_column("Status")

    for mission in state.missions:
        status = "[green]done[/green]" if mission.completed else "[yellow]open[/yellow]"
        table.add_row(
            mission.id,
            object_display_name(mission.object_key, language),
            f"+{mission.points_award}",
            status,
        )

    console.print(table)
    console.print(f"{t('mission_progress', language)}: {done}/{total}")
    if state.all_missions_completed:
        console.print(f"[bold green]{t('well_done', language)} {t('come_back_tomorrow', language)}[/bold green]")


@app.command()
def status() -> None:
    """Show points, streak, quota and learned objects."""
    coordinator = _build_coordinator()
    state = coordinator.load()
    language = state.language

    if not state.has_seen_welcome:
        console.print(Panel(t("welcome", language), title="Visual DeX", expand=False))
        coordinator.mark_welcome_seen()

    summary = Table(show_header=False, box=None)
    summary.add_column("Metric", style="cyan")
    summary.add_column("Value", style="bold")
    summary.add_row(t("total_points", language), str(state.progress.points))
    summary.add_row(t("streak_days", language), str(state.progress.streak_days))
    summary.add_row(t("remaining_photos", language), str(state.photos_remaining))
    if state.time_until_reset is not None:
        summary.add_row(t("next_session", language), format_duration(state.time_until_reset, language))
    console.print(summary)

    entries = state.profile.entries
    if not entries:
        return

    table = Table(title="Learned objects")
    table.add_column("Object")
    table.add_column("Seen", justify="right")
    table.add_column("Level")
    table.add_column("Last seen", style="dim")
    for key, entry in sorted(entries.items(), key=lambda item: -item[1].frequency):
        table.add_row(
            object_display_name(key, language),
            str(entry.frequency),
            tier_name(entry.tier.value, language),
            entry.last_seen.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


@app.command()
def translate(
    sentences: list[str] = typer.Argument(..., help="Sentences to translate"),
    target_lang: str = typer.Option("es", "--to", help="Target language"),
) -> None:
    """Translate sentences (remote service, then offline glossary)."""

    async def _run() -> list[str]:
        coordinator = _build_coordinator()
        try:
            return await coordinator.translate_sentences(sentences, target_lang=target_lang)
        finally:
            await coordinator.close()

    for original, translated in zip(sentences, asyncio.run(_run())):
        console.print(f"[dim]{escape(original)}[/dim]\n  [magenta]{escape(translated)}[/magenta]")


@app.command()
def reset(
    confirm: bool = typer.Option(
        False,
        "--yes", "-y",
        help="Skip confirmation",
    ),
) -> None:
    """Forget every learned object."""
    if not confirm and not Confirm.ask("Reset ALL learning data? This cannot be undone!", default=False):
        raise typer.Exit(0)

    coordinator = _build_coordinator()
    removed = coordinator.reset_learning_data()
    language = coordinator.repository.load_language()
    console.print(f"[green]{t('reset_done', language, count=removed)}[/green]")


@app.command()
def language(
    code: str = typer.Argument(..., help="Language code: en or es"),
) -> None:
    """Switch the interface language."""
    coordinator = _build_coordinator()
    try:
        coordinator.set_language(code)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]{t('language_set', code)}[/green]")


# =============================================================================
# Entry Point
# =============================================================================

def main() -> None:
    """CLI entry point."""
    settings = get_settings()

    # Configure logging
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{message}</level>",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="10 MB", retention=3)

    app()


if __name__ == "__main__":
    main()
