"""
assetpipe - deterministic, content-addressed CSS and JS assets.

Sources are read, adjacent LESS/CoffeeScript files joined, compiled,
concatenated and compressed into one file per group, named by the MD5 of
its content:

    name = create_group("assets/libraries/*.js", "assets/scripts/app.coffee").build("static", "app")

Each group keeps an asset-info file next to its output, so repeated builds
with unchanged sources return the same name without touching the disk.
"""

__version__ = "0.1.0"

from .builder import AssetGroup, create_group
from .errors import (
    AssetError,
    CompressError,
    ConfigError,
    LedgerError,
    MixedKindError,
    NoInputError,
    PatternError,
    ReadError,
    ToolError,
    TransformError,
    UnsupportedKindError,
    WriteError,
)
from .fingerprint import fingerprint
from .ledger import GenerationLedger
from .models import BuildResult, CheckResult, Fragment, FragmentKind, GroupIdentity, GroupStatus, LedgerRecord
from .tools import ExternalTool, Toolchain

__all__ = [
    "__version__",
    # Building
    "AssetGroup",
    "create_group",
    "BuildResult",
    "CheckResult",
    "GroupStatus",
    # Model
    "Fragment",
    "FragmentKind",
    "GroupIdentity",
    "LedgerRecord",
    "GenerationLedger",
    "fingerprint",
    # Tools
    "ExternalTool",
    "Toolchain",
    # Errors
    "AssetError",
    "CompressError",
    "ConfigError",
    "LedgerError",
    "MixedKindError",
    "NoInputError",
    "PatternError",
    "ReadError",
    "ToolError",
    "TransformError",
    "UnsupportedKindError",
    "WriteError",
]
