"""
Asset manifest (assets.toml).

    output_dir = "static"
    timeout = 60

    [tools]
    less = ["lessc", "-"]

    [[group]]
    name = "app"
    sources = ["style/*.css", "style/*.less"]
    compress = true
    join = true

Relative paths resolve against the manifest's directory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .builder import AssetGroup, create_group
from .errors import ConfigError
from .models import FragmentKind
from .tools import DEFAULT_TIMEOUT, Toolchain

DEFAULT_MANIFEST = "assets.toml"
DEFAULT_OUTPUT_DIR = "static"


@dataclass
class GroupConfig:
    name: str
    sources: list[str]
    output_dir: Path
    compress: bool = True
    join: bool = True


@dataclass
class Manifest:
    path: Path
    groups: list[GroupConfig] = field(default_factory=list)
    tools: dict[FragmentKind, list[str]] = field(default_factory=dict)
    timeout: float = DEFAULT_TIMEOUT

    @property
    def root(self) -> Path:
        return self.path.parent

    def toolchain(self) -> Toolchain:
        return Toolchain.from_commands(self.tools, timeout=self.timeout)

    def select(self, names: list[str] | tuple[str, ...]) -> list[GroupConfig]:
        """Groups with the given names (all groups when names is empty)."""
        if not names:
            return list(self.groups)
        by_name = {g.name: g for g in self.groups}
        unknown = [n for n in names if n not in by_name]
        if unknown:
            raise ConfigError(f"unknown group(s): {', '.join(unknown)}")
        return [by_name[n] for n in names]

    def make_group(self, group: GroupConfig, toolchain: Toolchain | None = None) -> AssetGroup:
        asset = create_group(
            *group.sources,
            toolchain=toolchain if toolchain is not None else self.toolchain(),
            root=self.root,
        )
        asset.set_compress(group.compress)
        asset.set_join(group.join)
        return asset


def _bool(value: Any, where: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{where} must be true or false")
    return value


def _command(value: Any, where: str) -> list[str]:
    if isinstance(value, str):
        value = value.split()
    if not isinstance(value, list) or not value or not all(isinstance(v, str) and v for v in value):
        raise ConfigError(f"{where} must be a non-empty list of strings")
    return list(value)


def parse_manifest(data: dict[str, Any], path: Path) -> Manifest:
    """Validate raw TOML data into a Manifest."""
    root = path.parent

    default_out = data.get("output_dir", DEFAULT_OUTPUT_DIR)
    if not isinstance(default_out, str) or not default_out.strip():
        raise ConfigError("output_dir must be a non-empty string")

    timeout = data.get("timeout", DEFAULT_TIMEOUT)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError("timeout must be a positive number of seconds")

    tools: dict[FragmentKind, list[str]] = {}
    raw_tools = data.get("tools", {})
    if not isinstance(raw_tools, dict):
        raise ConfigError("[tools] must be a table")
    for key, value in raw_tools.items():
        kind = FragmentKind.from_extension(str(key))
        if kind is None:
            raise ConfigError(f"[tools] unknown kind {key!r} (expected less, coffee, css or js)")
        tools[kind] = _command(value, f"tools.{key}")

    groups: list[GroupConfig] = []
    seen: set[str] = set()
    identities: set[tuple[Path, str]] = set()
    raw_groups = data.get("group", [])
    if not isinstance(raw_groups, list):
        raise ConfigError("group must be an array of tables ([[group]])")
    for idx, raw in enumerate(raw_groups):
        if not isinstance(raw, dict):
            raise ConfigError(f"group #{idx + 1} must be a table")

        name = raw.get("name", "")
        if not isinstance(name, str):
            raise ConfigError(f"group #{idx + 1}: name must be a string")
        name = name.strip()
        where = f"group {name!r}" if name else f"group #{idx + 1}"
        if "/" in name or "\\" in name:
            raise ConfigError(f"{where}: name can't contain path separators")

        sources = raw.get("sources", [])
        if isinstance(sources, str):
            sources = [sources]
        if not isinstance(sources, list) or not all(isinstance(s, str) for s in sources):
            raise ConfigError(f"{where}: sources must be a list of strings")

        out = raw.get("output_dir", default_out)
        if not isinstance(out, str) or not out.strip():
            raise ConfigError(f"{where}: output_dir must be a non-empty string")

        if name:
            if name in seen:
                raise ConfigError(f"{where}: duplicate group name")
            seen.add(name)

        # Same directory and name means same asset-info file and artifact prefix.
        identity = ((root / out).resolve(), name)
        if identity in identities:
            raise ConfigError(f"{where}: another group already builds into {out!r} under the same name")
        identities.add(identity)

        groups.append(
            GroupConfig(
                name=name,
                sources=list(sources),
                output_dir=root / out,
                compress=_bool(raw.get("compress", True), f"{where}: compress"),
                join=_bool(raw.get("join", True), f"{where}: join"),
            )
        )

    return Manifest(path=path, groups=groups, tools=tools, timeout=float(timeout))


def load_manifest(path: Path) -> Manifest:
    """Load and validate a manifest from TOML."""
    import tomllib

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"can't read manifest {path}: {exc.strerror or exc}") from exc
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML in {path}: {exc}") from exc
    return parse_manifest(data, path)
