"""Parsing module for maze configuration files.

A config file holds one KEY=VALUE pair per line. Blank lines and `#`
comments are ignored and keys are case-insensitive. Every key is optional:

    COLUMNS=30
    ROWS=20
    PATH_COMPRESSION=True
    SHOW_PROGRESS=False
    PROGRESS_EVERY=1000
    SEED=42
    ALGORITHM=sample
"""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from mazegen import ALGORITHMS


DEFAULT_PROGRESS_EVERY = 1000


@dataclass(frozen=True)
class Config:
    """Parsed configuration for maze generation."""

    columns: int = 10
    rows: int = 10
    path_compression: bool = False
    show_progress: bool = False
    progress_every: int = DEFAULT_PROGRESS_EVERY
    seed: Optional[int] = None
    algorithm: str = "sample"

    def merged(self, **overrides: Any) -> "Config":
        """Return a copy with every non-None override applied."""

        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigError(f"Unknown config field(s): {', '.join(unknown)}")
        return replace(
            self, **{k: v for k, v in overrides.items() if v is not None}
        )


class ConfigError(ValueError):
    """Configuration and validation error."""

    pass


def parse_bool(value: str) -> bool:
    """Parse a boolean from a config value."""

    v = value.strip().lower()
    if v in {"true", "1", "yes", "y", "on"}:
        return True
    if v in {"false", "0", "no", "n", "off"}:
        return False
    raise ConfigError(f"Invalid boolean: {value!r}")


def parse_int(value: str, *, key: str) -> int:
    """Parse an integer from a config value."""

    try:
        return int(value.strip())
    except ValueError as exc:
        msg = f"Invalid integer for {key}: {value!r}"
        raise ConfigError(msg) from exc


def parse_positive(value: str, *, key: str) -> int:
    n = parse_int(value, key=key)
    if n <= 0:
        raise ConfigError(f"{key} must be greater than 0")
    return n


def parse_algorithm(value: str) -> str:
    v = value.strip().lower()
    if v not in ALGORITHMS:
        raise ConfigError(
            f"Invalid ALGORITHM: {value!r} "
            f"(expected one of: {', '.join(ALGORITHMS)})"
        )
    return v


# config key -> (Config field, value parser)
KEYS: Dict[str, Tuple[str, Callable[[str], Any]]] = {
    "COLUMNS": ("columns", lambda v: parse_int(v, key="COLUMNS")),
    "ROWS": ("rows", lambda v: parse_int(v, key="ROWS")),
    "PATH_COMPRESSION": ("path_compression", parse_bool),
    "SHOW_PROGRESS": ("show_progress", parse_bool),
    "PROGRESS_EVERY": (
        "progress_every",
        lambda v: parse_positive(v, key="PROGRESS_EVERY"),
    ),
    "SEED": ("seed", lambda v: parse_int(v, key="SEED")),
    "ALGORITHM": ("algorithm", parse_algorithm),
}


def read_config(path: Path) -> Config:
    """Read and validate a configuration file.

    Raises ConfigError with the offending line number on bad syntax,
    unknown keys or invalid values.
    """

    values: Dict[str, Any] = {}
    try:
        with path.open("r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                stripped = line.split("#", 1)[0].strip()
                if not stripped:
                    continue
                if "=" not in stripped:
                    raise ConfigError(
                        f"Line {line_no}: Invalid syntax"
                        f" (expected KEY=VALUE)\n→ {line.rstrip()}"
                    )
                k, v = stripped.split("=", 1)
                key = k.strip().upper()
                if key not in KEYS:
                    raise ConfigError(
                        f"Line {line_no}: Unknown configuration "
                        f"key '{key}'\n→ {line.rstrip()}"
                    )
                name, convert = KEYS[key]
                try:
                    values[name] = convert(v)
                except ConfigError as exc:
                    raise ConfigError(f"Line {line_no}: {exc}") from exc
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except OSError as exc:
        raise ConfigError(f"Could not read"
                          f" config file: {path}: {exc}") from exc

    return Config(**values)
