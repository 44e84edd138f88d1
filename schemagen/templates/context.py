"""
Run configuration context for template processing.

Threads the run options (target name, output directory, override template
tree, ...) plus any target-declared extra options through the registry,
function builder, renderer and output pipeline.
"""

import dataclasses
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from ..logging_config import get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for run configuration errors."""

    pass


# Context keys, usable with RunContext.value()
SYMBOLS_KEY = "symbols"
GEN_TYPE_KEY = "gen-type"
TEMPLATE_TYPE_KEY = "template-type"
SUFFIX_KEY = "suffix"
SRC_KEY = "src"
OUT_KEY = "out"

_FIELD_KEYS = {
    SYMBOLS_KEY: "symbols",
    GEN_TYPE_KEY: "gen_type",
    TEMPLATE_TYPE_KEY: "template_type",
    SUFFIX_KEY: "suffix",
    SRC_KEY: "src",
    OUT_KEY: "out",
}


# Fields that only make sense as Python objects; never read from config data
_RUNTIME_FIELDS = frozenset({"symbols", "cancel", "values"})

@dataclass(frozen=True)
class Flag:
    """An extra option declared by a template set."""

    context_key: str
    type: str = "string"  # string, bool, int, []string
    desc: str = ""
    default: Any = None
    short: str = ""
    enums: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class RunContext:
    """Immutable keyed-value carrier for one generation run.

    Known options are plain fields; options declared by template sets
    through :class:`Flag` live in ``values``. Enrichment hooks return a new
    context built with :meth:`with_values` or :meth:`replace`.
    """

    template_type: str = ""
    gen_type: str = ""
    suffix: str = ""
    src: Optional[Path] = None
    out: Path = Path(".")
    symbols: Dict[str, Any] = field(default_factory=dict)
    cancel: Any = None
    values: Dict[str, Any] = field(default_factory=dict)

    def value(self, key: str, default: Any = None) -> Any:
        """Look up an option by context key."""
        if key in _FIELD_KEYS:
            v = getattr(self, _FIELD_KEYS[key])
            return default if v in (None, "") else v
        return self.values.get(key, default)

    def with_values(self, **values: Any) -> "RunContext":
        """Return a copy with additional extra values."""
        merged = dict(self.values)
        merged.update(values)
        return dataclasses.replace(self, values=merged)

    def replace(self, **changes: Any) -> "RunContext":
        """Return a copy with changed fields."""
        return dataclasses.replace(self, **changes)

    @property
    def cancelled(self) -> bool:
        """True when the run's cancel event has been set."""
        return self.cancel is not None and self.cancel.is_set()


def apply_flag_defaults(ctx: RunContext, flags: List[Flag]) -> RunContext:
    """Fill unset extra values with the flags' defaults."""
    missing = {
        flag.context_key: flag.default
        for flag in flags
        if flag.context_key not in ctx.values and flag.default is not None
    }
    if not missing:
        return ctx
    return ctx.with_values(**missing)


def _load_config_file(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load configuration from JSON file."""
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    if not path.suffix.lower() == ".json":
        raise ConfigError(f"Configuration file must be JSON: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"Configuration file must contain a JSON object: {path}")

    return config


def _dict_to_context(config_dict: Mapping[str, Any]) -> RunContext:
    """Convert dictionary to RunContext, moving unknown keys into values."""
    known_fields = {f.name for f in dataclasses.fields(RunContext)} - _RUNTIME_FIELDS

    args: Dict[str, Any] = {}
    extra: Dict[str, Any] = {}

    for key, value in config_dict.items():
        if key == "values":
            continue
        name = _FIELD_KEYS.get(key, key).replace("-", "_")
        if name in known_fields:
            args[name] = value
        else:
            extra[key] = value

    if args.get("src") is not None:
        args["src"] = Path(args["src"])
    if args.get("out") is not None:
        args["out"] = Path(args["out"])

    values = dict(config_dict.get("values") or {})
    values.update(extra)
    args["values"] = values

    return RunContext(**args)


def load_context(
    config_file: Optional[Union[str, Path]] = None, **overrides: Any
) -> RunContext:
    """
    Build a run context from an optional JSON file and keyword overrides.

    Args:
        config_file: Path to JSON configuration file
        **overrides: Values taking precedence over the file

    Returns:
        Run context
    """
    # cancel and symbols are only accepted as keyword overrides
    runtime = {
        k: overrides.pop(k)
        for k in ("symbols", "cancel")
        if overrides.get(k) is not None
    }
    config: Dict[str, Any] = {}

    if config_file:
        config.update(_load_config_file(config_file))
        logger.debug("Loaded run configuration from %s", config_file)

    config.update({k: v for k, v in overrides.items() if v is not None})

    ctx = _dict_to_context(config)
    return ctx.replace(**runtime) if runtime else ctx
