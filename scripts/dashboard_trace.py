# ABOUTME: Provides a CLI that renders the knowledge graph, trend card, and weak points for one student.
# ABOUTME: Reads deserialized analytics payloads from JSON and can export the full dashboard report.

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from src.common.config import load_dashboard_config
from src.common.payloads import load_concepts_by_domain, load_overview
from src.knowledge_graph.builder import lookup_from_mapping, valid_concepts_by_domain
from src.knowledge_graph.elements import EdgeKind
from src.knowledge_graph.interaction import GraphInteractionState, UnknownDomainError
from src.progress.export import build_dashboard_report, write_dashboard_report
from src.progress.trend import SUPPORTED_PERIODS, compute_trend, format_signed_pct, weak_point_count_trend
from src.progress.weak_points import flatten_concepts, top_weak_points

console = Console()
app = typer.Typer(help="Inspect a student's knowledge graph, mastery trend, and weak points.")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _check_period(window_days: int) -> int:
    if window_days not in SUPPORTED_PERIODS:
        raise typer.BadParameter(
            f"Expected one of: {', '.join(str(p) for p in SUPPORTED_PERIODS)}", param_hint="--window-days"
        )
    return window_days


@app.command()
def graph(
    overview_path: Path = typer.Option(..., "--overview", exists=True, dir_okay=False, help="Overview payload JSON."),
    concepts_path: Optional[Path] = typer.Option(None, "--concepts", exists=True, dir_okay=False, help="Domain id -> micro-concepts JSON."),
    expand: List[str] = typer.Option([], "--expand", help="Domain id to expand; repeatable."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Dashboard config YAML."),
) -> None:
    """
    Build and lay out the knowledge graph, expanding the requested domains.
    """
    config = load_dashboard_config(config_path)
    overview = load_overview(overview_path)
    concepts = load_concepts_by_domain(concepts_path)

    state = GraphInteractionState(overview.domains, lookup_from_mapping(concepts), config)
    for domain_id in expand:
        try:
            state.toggle(domain_id)
        except UnknownDomainError:
            console.print(f"[red]Unknown domain id: {domain_id}[/red]")
            raise typer.Exit(code=1)

    elements = state.elements
    console.rule("[bold blue]Knowledge Graph[/bold blue]")
    node_table = Table(show_header=True, header_style="bold magenta")
    node_table.add_column("Node")
    node_table.add_column("Kind")
    node_table.add_column("Mastery")
    node_table.add_column("Weakness")
    node_table.add_column("Position")
    for node in elements.nodes:
        pos = f"({node.position.x:.1f}, {node.position.y:.1f})" if node.position else "-"
        node_table.add_row(node.label, node.kind.value, f"{node.mastery:.2f}", node.weakness_level, pos)
    console.print(node_table)

    cross = len(elements.edges_of_kind(EdgeKind.CROSS_DOMAIN))
    child = len(elements.edges_of_kind(EdgeKind.PARENT_CHILD))
    console.print(f"[bold]Center:[/] {elements.center_id}")
    console.print(f"[bold]Edges:[/] {cross} cross-domain, {child} parent-child")


@app.command()
def trend(
    overview_path: Path = typer.Option(..., "--overview", exists=True, dir_okay=False, help="Overview payload JSON."),
    window_days: int = typer.Option(7, "--window-days", help="Trend window in points (7 or 30)."),
) -> None:
    """
    Compare the latest trend window with the one before it.
    """
    _check_period(window_days)
    overview = load_overview(overview_path)
    summary = compute_trend(overview.trend, window_days=window_days)
    weak_delta = weak_point_count_trend(overview.weak_points_count, overview.previous_weak_points_count)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Metric")
    table.add_column("Change")
    table.add_row("Mastery", summary.mastery_delta_label)
    table.add_row("Activity (attempts)", summary.activity_delta_label)
    table.add_row("Weak points", format_signed_pct(None) if weak_delta is None else f"{weak_delta:+d}")
    console.print(table)
    if not summary.is_sufficient:
        console.print("[yellow]Not enough trend data for a comparison.[/yellow]")


@app.command("weak-points")
def weak_points(
    concepts_path: Path = typer.Option(..., "--concepts", exists=True, dir_okay=False, help="Domain id -> micro-concepts JSON."),
    limit: int = typer.Option(5, "--limit", help="Number of weak points to show."),
) -> None:
    """
    Rank micro-concepts by improvement potential.
    """
    concepts = flatten_concepts(valid_concepts_by_domain(load_concepts_by_domain(concepts_path)))
    ranked = top_weak_points(concepts, limit=limit)
    if not ranked:
        console.print("[yellow]No micro-concepts to rank.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Concept")
    table.add_column("Domain")
    table.add_column("Mastery")
    table.add_column("Errors")
    table.add_column("Potential")
    for wp in ranked:
        table.add_row(wp.name, wp.domain_id or "-", f"{wp.mastery:.2f}", str(wp.error_count), f"{wp.improvement_potential:.2f}")
    console.print(table)


@app.command()
def export(
    overview_path: Path = typer.Option(..., "--overview", exists=True, dir_okay=False, help="Overview payload JSON."),
    concepts_path: Optional[Path] = typer.Option(None, "--concepts", exists=True, dir_okay=False, help="Domain id -> micro-concepts JSON."),
    output: Path = typer.Option(..., "--output", help="Where to write the report JSON."),
    expand: List[str] = typer.Option([], "--expand", help="Domain id to expand; repeatable."),
    window_days: int = typer.Option(7, "--window-days", help="Trend window in points (7 or 30)."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Dashboard config YAML."),
) -> None:
    """
    Write the dashboard report bundle to JSON.
    """
    _check_period(window_days)
    config = load_dashboard_config(config_path)
    overview = load_overview(overview_path)
    concepts = load_concepts_by_domain(concepts_path)
    try:
        report = build_dashboard_report(overview, concepts, config=config, expand=expand, window_days=window_days)
    except UnknownDomainError as exc:
        console.print(f"[red]Unknown domain id: {exc.args[0]}[/red]")
        raise typer.Exit(code=1)

    path = write_dashboard_report(report, output)
    typer.echo(f"[dashboard] Wrote report to {path}")


if __name__ == "__main__":
    app()
