"""Command line interface for FlowCompare."""

import json
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Tuple

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from flowcompare.comparison import (
    DiffStatus,
    LineChangeKind,
    WorkflowDefinition,
    build_split_view,
    build_unified_view,
    compute_workflow_diff,
    describe_summary,
    diff_definitions,
    diff_stats,
    filter_diffs,
    generate_patch,
    patch_filename,
)
from flowcompare.config import settings
from flowcompare.history.exceptions import DefinitionLoadError

app = typer.Typer(
    name="flowcompare",
    help="FlowCompare - workflow version diff and patch export",
    add_completion=False,
)

console = Console()

STATUS_STYLES = {
    DiffStatus.ADDED: "green",
    DiffStatus.REMOVED: "red",
    DiffStatus.MODIFIED: "yellow",
    DiffStatus.UNCHANGED: "dim",
}

LINE_STYLES = {
    LineChangeKind.ADDED: "green",
    LineChangeKind.REMOVED: "red",
    LineChangeKind.UNCHANGED: "",
}


class ViewMode(str, Enum):
    unified = "unified"
    split = "split"


def load_definition(path: Path) -> Tuple[WorkflowDefinition, Any]:
    """Load a definition file and derive its version label.

    The file holds either a bare definition or a version record with a
    ``definition`` key; a record's ``version`` becomes the label, otherwise
    the file name does.
    """
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise DefinitionLoadError(f"File not found: {path}")
    except json.JSONDecodeError as e:
        raise DefinitionLoadError(f"Invalid JSON in {path}: {e}")

    if not isinstance(payload, dict):
        raise DefinitionLoadError(f"{path} does not contain a workflow definition")

    label: Any = path.stem
    if isinstance(payload.get("definition"), dict):
        label = payload.get("version", label)
        payload = payload["definition"]

    try:
        return WorkflowDefinition.model_validate(payload), label
    except PydanticValidationError as e:
        raise DefinitionLoadError(f"Invalid workflow definition in {path}: {e}")


def _load_pair(
    base: Path,
    compare: Path,
    base_label: Optional[str],
    compare_label: Optional[str],
):
    try:
        base_definition, default_base = load_definition(base)
        compare_definition, default_compare = load_definition(compare)
    except DefinitionLoadError as e:
        console.print(Text(f"Error: {e}", style="red"))
        sys.exit(1)

    return (
        base_definition,
        compare_definition,
        base_label or default_base,
        compare_label or default_compare,
    )


@app.command("version")
def version():
    """Show version information."""
    version_info = f"""
FlowCompare v{settings.app_version}
Workflow version diff and patch export

Environment: {settings.environment}
Python: {sys.version}
"""
    console.print(
        Panel(
            version_info.strip(),
            title="Version Information",
            border_style="green",
        )
    )


@app.command("diff")
def diff(
    base: Path = typer.Argument(..., help="Base definition file"),
    compare: Path = typer.Argument(..., help="Compare definition file"),
    base_label: Optional[str] = typer.Option(None, "--base-label", help="Base version label"),
    compare_label: Optional[str] = typer.Option(None, "--compare-label", help="Compare version label"),
    show_unchanged: bool = typer.Option(False, "--show-unchanged", "-u", help="List unchanged nodes and edges"),
    as_json: bool = typer.Option(False, "--json", help="Print the diff as JSON"),
):
    """Show the structural diff of two workflow versions."""
    base_definition, compare_definition, base_label, compare_label = _load_pair(
        base, compare, base_label, compare_label
    )
    result = compute_workflow_diff(base_definition, compare_definition, base_label, compare_label)

    if as_json:
        console.print_json(result.model_dump_json(by_alias=True))
        return

    console.print(Text(f"Comparing v{base_label} → v{compare_label}", style="bold"))
    for line in describe_summary(result.summary):
        console.print(Text(f"  {line}"))

    node_diffs, edge_diffs = filter_diffs(result, show_unchanged=show_unchanged)

    if node_diffs:
        node_table = Table(title="Nodes")
        node_table.add_column("Node", style="cyan")
        node_table.add_column("Status")
        node_table.add_column("Changes")
        for node_diff in node_diffs:
            changes = "\n".join(c.describe() for c in node_diff.property_changes or [])
            node_table.add_row(
                Text(str(node_diff.node_id)),
                Text(node_diff.status.value, style=STATUS_STYLES[node_diff.status]),
                Text(changes),
            )
        console.print(node_table)

    if edge_diffs:
        edge_table = Table(title="Connections")
        edge_table.add_column("Edge", style="cyan")
        edge_table.add_column("Status")
        edge_table.add_column("Endpoints", style="dim")
        for edge_diff in edge_diffs:
            edge = edge_diff.compare_edge or edge_diff.base_edge
            edge_table.add_row(
                Text(str(edge_diff.edge_id)),
                Text(edge_diff.status.value, style=STATUS_STYLES[edge_diff.status]),
                Text(f"{edge.source} → {edge.target}"),
            )
        console.print(edge_table)

    if result.settings_changed:
        console.print(Text("Workflow settings changed", style="yellow"))
    if result.variables_changed:
        console.print(Text("Workflow variables changed", style="yellow"))


@app.command("lines")
def lines(
    base: Path = typer.Argument(..., help="Base definition file"),
    compare: Path = typer.Argument(..., help="Compare definition file"),
    view: ViewMode = typer.Option(ViewMode.unified, "--view", help="Unified or split view"),
    line_numbers: bool = typer.Option(True, "--line-numbers/--no-line-numbers", help="Show line numbers"),
):
    """Show the line diff of the serialized definitions."""
    base_definition, compare_definition, _, _ = _load_pair(base, compare, None, None)
    segments = diff_definitions(base_definition, compare_definition)
    stats = diff_stats(segments)

    console.print(Text.assemble(
        (f"+{stats.additions}", "green"),
        " ",
        (f"-{stats.deletions}", "red"),
    ))

    if view == ViewMode.split:
        table = Table(show_header=True, box=None, pad_edge=False)
        if line_numbers:
            table.add_column("", style="dim", justify="right")
        table.add_column("Base")
        if line_numbers:
            table.add_column("", style="dim", justify="right")
        table.add_column("Compare")

        for row in build_split_view(segments):
            left = row.left
            right = row.right
            cells = []
            if line_numbers:
                cells.append(Text(str(left.number) if left else ""))
            cells.append(Text(left.text, style=LINE_STYLES[left.kind]) if left else Text("-", style="dim"))
            if line_numbers:
                cells.append(Text(str(right.number) if right else ""))
            cells.append(Text(right.text, style=LINE_STYLES[right.kind]) if right else Text("-", style="dim"))
            table.add_row(*cells)
        console.print(table)
        return

    for line in build_unified_view(segments):
        row = Text()
        if line_numbers:
            old = str(line.old_number) if line.old_number is not None else ""
            new = str(line.new_number) if line.new_number is not None else ""
            row.append(f"{old:>5} {new:>5} ", style="dim")
        row.append(f"{line.marker} {line.text}", style=LINE_STYLES[line.kind])
        console.print(row)


@app.command("patch")
def patch(
    base: Path = typer.Argument(..., help="Base definition file"),
    compare: Path = typer.Argument(..., help="Compare definition file"),
    base_label: Optional[str] = typer.Option(None, "--base-label", help="Base version label"),
    compare_label: Optional[str] = typer.Option(None, "--compare-label", help="Compare version label"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Patch file path"),
    stdout: bool = typer.Option(False, "--stdout", help="Print the patch instead of writing a file"),
):
    """Export the line diff as a patch document."""
    base_definition, compare_definition, base_label, compare_label = _load_pair(
        base, compare, base_label, compare_label
    )
    segments = diff_definitions(base_definition, compare_definition)
    content = generate_patch(segments, base_label, compare_label)

    if stdout:
        typer.echo(content)
        return

    target = output or Path(patch_filename(base_label, compare_label))
    target.write_text(content, encoding="utf-8")
    console.print(Text(f"Patch written to {target}", style="green"))


@app.command("server")
def start_server(
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Server host"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Server port"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug mode"),
):
    """Start the FlowCompare server."""
    from flowcompare.server import main as server_main

    if host:
        settings.host = host
    if port:
        settings.port = port
    if reload:
        settings.reload = reload
    if debug:
        settings.debug = debug

    server_main()


@app.command("config")
def show_config():
    """Show current configuration."""
    config_table = Table(title="FlowCompare Configuration")

    config_table.add_column("Setting", style="cyan")
    config_table.add_column("Value", style="green")

    config_items = [
        ("App Name", settings.app_name),
        ("Version", settings.app_version),
        ("Environment", settings.environment),
        ("Debug", str(settings.debug)),
        ("Host", settings.host),
        ("Port", str(settings.port)),
        ("Serialization Indent", str(settings.serialization_indent)),
        ("Sort Keys", str(settings.serialization_sort_keys)),
        ("Comparison Cache Size", str(settings.comparison_cache_size)),
        ("Patch File Template", settings.patch_filename_template),
        ("Metrics Enabled", str(settings.metrics_enabled)),
    ]

    for setting, value in config_items:
        config_table.add_row(setting, Text(value))

    console.print(config_table)


def main():
    """Main CLI entry point."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(0)
    except Exception as e:
        console.print(Text(f"Error: {e}", style="red"))
        sys.exit(1)


if __name__ == "__main__":
    main()
