"""Build, status and clean command implementations."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..config import GroupConfig, Manifest, load_manifest
from ..errors import AssetError
from ..models import GroupStatus
from ..tools import Toolchain


def _label(group: GroupConfig) -> str:
    return group.name or "(unnamed)"


def _load(manifest_path: Path, groups: tuple[str, ...], console: Console) -> tuple[Manifest, list[GroupConfig]] | None:
    try:
        manifest = load_manifest(manifest_path)
        selected = manifest.select(groups)
    except AssetError as exc:
        console.print(f"Error: {exc}", style="bold red")
        return None
    if not selected:
        console.print(f"No groups defined in {manifest_path}", style="yellow")
    return manifest, selected


def run_build(
    manifest_path: Path,
    groups: tuple[str, ...] = (),
    *,
    output_json: bool = False,
    toolchain: Toolchain | None = None,
) -> int:
    """Build groups from a manifest.

    Args:
        manifest_path: Path to assets.toml
        groups: Names of groups to build (all when empty)
        output_json: Print results as JSON instead of a table
        toolchain: Override the manifest's tools

    Returns:
        Exit code (0 = every group built, 1 = at least one failed)
    """
    console = Console()
    err_console = Console(stderr=True)

    loaded = _load(manifest_path, groups, err_console)
    if loaded is None:
        return 1
    manifest, selected = loaded
    chain = toolchain if toolchain is not None else manifest.toolchain()

    rows: list[dict] = []
    failed = 0
    for group in selected:
        try:
            result = manifest.make_group(group, chain).run(group.output_dir, group.name)
        except AssetError as exc:
            failed += 1
            err_console.print(f"Error in group {_label(group)}: {exc}", style="bold red")
            rows.append({"group": group.name, "status": "error", "error": str(exc)})
            continue
        rows.append(
            {
                "group": group.name,
                "status": result.status,
                "file": result.filename,
                "directory": str(group.output_dir),
                "removed": result.removed,
            }
        )

    if output_json:
        print(json.dumps(rows, indent=2))
    elif rows:
        table = Table(title="Assets")
        table.add_column("group", style="cyan", no_wrap=True)
        table.add_column("status")
        table.add_column("file", style="green")
        table.add_column("removed", style="dim")
        for row in rows:
            status = row["status"]
            style = {"written": "bold green", "error": "bold red"}.get(status, "")
            table.add_row(
                row["group"] or "(unnamed)",
                f"[{style}]{status}[/{style}]" if style else status,
                row.get("file") or "",
                row.get("removed") or "",
            )
        console.print(table)

    return 1 if failed else 0


def run_status(
    manifest_path: Path,
    groups: tuple[str, ...] = (),
    *,
    output_json: bool = False,
) -> int:
    """Report whether each group's artifact matches its sources. Never writes.

    Returns:
        Exit code (0 = all up to date, 1 = something needs a build or failed)
    """
    console = Console()
    err_console = Console(stderr=True)

    loaded = _load(manifest_path, groups, err_console)
    if loaded is None:
        return 1
    manifest, selected = loaded

    rows: list[dict] = []
    all_ok = True
    for group in selected:
        try:
            check = manifest.make_group(group).check(group.output_dir, group.name)
        except AssetError as exc:
            all_ok = False
            err_console.print(f"Error in group {_label(group)}: {exc}", style="bold red")
            rows.append({"group": group.name, "status": "error", "error": str(exc)})
            continue
        all_ok = all_ok and check.ok
        rows.append(
            {
                "group": group.name,
                "status": check.status.value,
                "kind": check.output_kind.value,
                "fragments": check.fragment_count,
                "file": check.filename,
            }
        )

    if output_json:
        print(json.dumps(rows, indent=2))
    elif rows:
        table = Table(title="Asset status")
        table.add_column("group", style="cyan", no_wrap=True)
        table.add_column("kind", style="magenta")
        table.add_column("status")
        table.add_column("file", style="dim")
        for row in rows:
            ok = row["status"] == GroupStatus.UP_TO_DATE.value
            table.add_row(
                row["group"] or "(unnamed)",
                row.get("kind", ""),
                row["status"] if ok else f"[yellow]{row['status']}[/yellow]",
                row.get("file") or "",
            )
        console.print(table)

    return 0 if all_ok else 1


def run_clean(manifest_path: Path, groups: tuple[str, ...] = ()) -> int:
    """Remove the artifacts and asset-info files of groups."""
    console = Console()
    err_console = Console(stderr=True)

    loaded = _load(manifest_path, groups, err_console)
    if loaded is None:
        return 1
    manifest, selected = loaded

    failed = 0
    for group in selected:
        try:
            removed = manifest.make_group(group).clean(group.output_dir, group.name)
        except AssetError as exc:
            failed += 1
            err_console.print(f"Error in group {_label(group)}: {exc}", style="bold red")
            continue
        for filename in removed:
            console.print(f"removed {group.output_dir / filename}")
    return 1 if failed else 0
