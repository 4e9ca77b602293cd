"""CLI interface for plugin-health."""

import asyncio
import csv
import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from pluginhealth.consts import DEFAULT_DATA_DIR, PROBE_CONCURRENCY, PROBE_TIMEOUT
from pluginhealth.errors import PluginHealthError
from pluginhealth.models.model_result import ResultStatus
from pluginhealth.pipeline import plan_probe_pipeline, run_probe_pipeline, run_score_pipeline
from pluginhealth.probes.engine import order_probes
from pluginhealth.probes.registry import default_probes
from pluginhealth.scores.registry import default_scorings
from pluginhealth.storage.file_manager import FileManager

app = typer.Typer(
    name="plugin-health",
    help="Plugin Health Scoring - Probe Jenkins plugins and compute their health scores",
)

console = Console()

_STATUS_STYLE = {
    ResultStatus.SUCCESS: "green",
    ResultStatus.FAILURE: "red",
    ResultStatus.ERROR: "yellow",
}


def _get_score_color(score: float) -> str:
    """Get color for score display."""
    if score >= 70:
        return "green"
    elif score >= 50:
        return "yellow"
    else:
        return "red"


def _truncate(text: str, max_len: int = 60) -> str:
    """Truncate text with ellipsis."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def _configure_logging(verbose: bool = False, default: int = logging.WARNING) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else default,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@app.command()
def probes() -> None:
    """List registered probes in execution order."""
    table = Table(title="Registered Probes")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Key", style="bold")
    table.add_column("Version", justify="right")
    table.add_column("Release", justify="center")
    table.add_column("Source", justify="center")
    table.add_column("Requires", style="dim")

    for position, probe in enumerate(order_probes(default_probes()), 1):
        table.add_row(
            str(position),
            probe.key,
            str(probe.version),
            "✓" if probe.requires_release else "",
            "✓" if probe.is_source_code_related else "",
            ", ".join(probe.requirements),
        )

    console.print(table)


@app.command()
def scorings() -> None:
    """List registered scorings."""
    table = Table(title="Registered Scorings")
    table.add_column("Key", style="bold")
    table.add_column("Weight", justify="right", style="magenta")
    table.add_column("Version", justify="right")
    table.add_column("Components", justify="right")
    table.add_column("Description", style="dim")

    for scoring in default_scorings():
        table.add_row(
            scoring.key,
            f"{scoring.weight:g}",
            str(scoring.version),
            str(len(scoring.components())),
            _truncate(scoring.description),
        )

    console.print(table)


@app.command()
def run(
    plugin: list[str] = typer.Option(None, "--plugin", "-p", help="Plugin to probe (repeatable)"),
    concurrency: int = typer.Option(PROBE_CONCURRENCY, "--concurrency", help="Max plugins probed in parallel"),
    timeout: float = typer.Option(PROBE_TIMEOUT, "--timeout", help="Probe timeout (seconds)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="List the probes that would run"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Probe plugins and store their results."""
    _configure_logging(verbose)
    plugin_names = list(plugin) if plugin else None

    if dry_run:
        plan = plan_probe_pipeline(plugin_names=plugin_names, data_dir=DEFAULT_DATA_DIR)
        if not plan:
            console.print("[yellow]No plugins found. Run without --dry-run first.[/yellow]")
            return

        table = Table(title=f"Probes to Run (Dry Run) - {len(plan)} plugins")
        table.add_column("Plugin", style="cyan")
        table.add_column("Count", justify="right", style="magenta")
        table.add_column("Probes", style="dim")
        for name, keys in plan.items():
            table.add_row(name, str(len(keys)), ", ".join(keys))

        console.print(table)
        console.print("\n[dim]Run without --dry-run to perform actual probing[/dim]")
        return

    console.print("\n[bold]Probing plugins...[/bold]\n")

    async def run_probes():
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            console=console,
        ) as progress:
            task = progress.add_task("Probing...", total=None)

            def on_progress(current: int, total: int):
                progress.update(task, completed=current, total=total)

            return await run_probe_pipeline(
                plugin_names=plugin_names,
                concurrency=concurrency,
                probe_timeout=timeout,
                data_dir=DEFAULT_DATA_DIR,
                progress_callback=on_progress,
            )

    try:
        result = asyncio.run(run_probes())
    except PluginHealthError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print("\n[bold green]Probing complete![/bold green]")
    summary_table = Table(title="Probe Summary")
    summary_table.add_column("Metric", style="cyan")
    summary_table.add_column("Count", justify="right", style="magenta")

    summary_table.add_row("Plugins", str(result.total))
    summary_table.add_row("Succeeded", str(result.succeeded))
    summary_table.add_row("Failed", str(result.failed))
    for status in ResultStatus:
        summary_table.add_row(f"Results: {status.value}", str(result.status_counts.get(status, 0)))
    summary_table.add_row("Duration", f"{result.duration_seconds:.1f}s")

    console.print(summary_table)

    if result.failures:
        console.print(f"\n[yellow]Failed plugins ({len(result.failures)}):[/yellow]")
        for name, error in list(result.failures.items())[:5]:
            console.print(f"  [dim]{name}:[/dim] {error[:80]}")
        if len(result.failures) > 5:
            console.print(f"  [dim]... and {len(result.failures) - 5} more[/dim]")


@app.command()
def score(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Score every stored plugin from its probe results."""
    _configure_logging(verbose, default=logging.INFO)

    try:
        scores_file = run_score_pipeline(data_dir=DEFAULT_DATA_DIR)
    except PluginHealthError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not scores_file.scores:
        console.print("[yellow]No plugins scored. Run 'plugin-health run' first.[/yellow]")
        return

    console.print(f"\n[bold green]Scored {len(scores_file.scores)} plugins[/bold green]\n")

    table = Table(title="Average Score by Category")
    table.add_column("Category", style="cyan")
    table.add_column("Weight", justify="right", style="magenta")
    table.add_column("Avg Score", justify="right")

    categories: dict[str, list[int]] = {}
    weights: dict[str, float] = {}
    for plugin_score in scores_file.scores.values():
        for detail in plugin_score.details:
            categories.setdefault(detail.key, []).append(detail.value)
            weights[detail.key] = detail.weight

    for key, values in categories.items():
        average = sum(values) / len(values)
        color = _get_score_color(average)
        table.add_row(key, f"{weights[key]:g}", f"[{color}]{average:.1f}[/{color}]")

    overall = sum(s.value for s in scores_file.scores.values()) / len(scores_file.scores)
    color = _get_score_color(overall)
    table.add_row("[bold]overall[/bold]", "", f"[{color}]{overall:.1f}[/{color}]")

    console.print(table)


@app.command()
def show(
    name: str = typer.Argument(..., help="Plugin name"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
) -> None:
    """Show probe results and the latest score of a plugin."""
    file_manager = FileManager(DEFAULT_DATA_DIR)
    plugin = file_manager.load_plugin(name)
    if plugin is None:
        console.print(f"[red]Error:[/red] Unknown plugin '{name}'")
        raise typer.Exit(1)

    scores_file = file_manager.load_scores()
    plugin_score = scores_file.scores.get(name) if scores_file else None

    if as_json:
        data = {
            "plugin": plugin.model_dump(mode="json"),
            "score": plugin_score.model_dump(mode="json") if plugin_score else None,
        }
        typer.echo(json.dumps(data, indent=2))
        return

    console.print(f"\n[bold]{plugin.name}[/bold] {plugin.version or ''}")
    if plugin.scm:
        console.print(f"[dim]{plugin.scm}[/dim]")

    table = Table(title="Probe Results")
    table.add_column("Probe", style="cyan")
    table.add_column("Status")
    table.add_column("Message")
    table.add_column("Date", style="dim")
    for key in sorted(plugin.details):
        result = plugin.details[key]
        style = _STATUS_STYLE.get(result.status, "white")
        message = result.message if isinstance(result.message, str) else json.dumps(result.message)
        table.add_row(
            key,
            f"[{style}]{result.status.value}[/{style}]",
            _truncate(message),
            result.timestamp.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)

    if plugin_score is None:
        console.print("\n[yellow]Not scored yet. Run 'plugin-health score'.[/yellow]")
        return

    color = _get_score_color(plugin_score.value)
    console.print(f"\nScore: [{color}]{plugin_score.value}[/{color}]/100")
    for detail in plugin_score.details:
        color = _get_score_color(detail.value)
        console.print(f"\n  [bold]{detail.key}[/bold] [{color}]{detail.value}[/{color}] (weight {detail.weight:g})")
        for component in detail.component_results:
            for reason in component.reasons:
                console.print(f"    - {reason}")
            for resolution in component.resolutions:
                console.print(f"      [dim]→ {resolution.link}[/dim]")


@app.command()
def top(
    limit: int = typer.Option(10, "--limit", "-l", help="Number of results"),
) -> None:
    """Show highest scored plugins."""
    scores_file = FileManager(DEFAULT_DATA_DIR).load_scores()
    if not scores_file or not scores_file.scores:
        console.print("[yellow]No scores found.[/yellow]")
        return

    ranked = sorted(scores_file.scores.values(), key=lambda s: (-s.value, s.plugin))[:limit]
    keys = [detail.key for detail in ranked[0].details]

    table = Table(title=f"Top {len(ranked)} Plugins")
    table.add_column("Rank", justify="right", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Score", justify="right")
    for key in keys:
        table.add_column(_truncate(key, 12), justify="right", style="dim")

    for rank, plugin_score in enumerate(ranked, 1):
        color = _get_score_color(plugin_score.value)
        columns = []
        for key in keys:
            detail = plugin_score.get_detail(key)
            columns.append(str(detail.value) if detail else "")
        table.add_row(
            str(rank),
            plugin_score.plugin,
            f"[{color}]{plugin_score.value}[/{color}]",
            *columns,
        )

    console.print(table)


@app.command()
def export(
    format: str = typer.Option("json", "--format", "-f", help="Export format (json, csv)"),
    output: str = typer.Option("scores.json", "--output", "-o", help="Output file path"),
) -> None:
    """Export the latest scores to a file."""
    scores_file = FileManager(DEFAULT_DATA_DIR).load_scores()
    if not scores_file or not scores_file.scores:
        console.print("[yellow]No scores found to export.[/yellow]")
        return

    output_path = Path(output)
    scores = sorted(scores_file.scores.values(), key=lambda s: s.plugin)

    try:
        if format == "json":
            data = [plugin_score.model_dump(mode="json") for plugin_score in scores]
            output_path.write_text(json.dumps(data, indent=2), encoding="utf-8")

        elif format == "csv":
            keys = list(scores_file.scoring_versions)
            with output_path.open("w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f)
                writer.writerow(["plugin", "score", "computed_at", *keys])
                for plugin_score in scores:
                    row = [plugin_score.plugin, plugin_score.value, plugin_score.computed_at.isoformat()]
                    for key in keys:
                        detail = plugin_score.get_detail(key)
                        row.append(detail.value if detail else "")
                    writer.writerow(row)

        else:
            console.print(f"[red]Error:[/red] Unsupported format '{format}'. Use 'json' or 'csv'.")
            raise typer.Exit(1)

        console.print(f"[green]Exported {len(scores)} scores to {output_path}[/green]")

    except OSError as e:
        console.print(f"[red]Error exporting:[/red] {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
