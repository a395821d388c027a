"""Engine configuration: environment defaults and scoped overrides."""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Iterator, Mapping
import os

MAX_NESTING_DEPTH_ENV = "PFMT_MAX_NESTING_DEPTH"
MAX_WIDTH_ENV = "PFMT_MAX_WIDTH"
MAX_PRECISION_ENV = "PFMT_MAX_PRECISION"
STRICT_LEAVES_ENV = "PFMT_STRICT_LEAVES"

DEFAULT_MAX_NESTING_DEPTH = 32
# each nesting level costs a handful of frames in the parser and the engine
MAX_NESTING_DEPTH_LIMIT = 100
DEFAULT_MAX_WIDTH = 65536
DEFAULT_MAX_PRECISION = 1024
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"", "0", "false", "no", "off"}


@dataclass(frozen=True)
class EngineConfig:
    """Knobs shared by the parser, the engine and the tables built by the CLI/API.

    ``max_width`` bounds the ``width`` option and ``max_precision`` bounds the
    magnitude of ``prec``; larger values are reported as invalid option values.
    """

    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH
    strict_leaves: bool = False
    max_width: int = DEFAULT_MAX_WIDTH
    max_precision: int = DEFAULT_MAX_PRECISION

    def __post_init__(self) -> None:
        if not 1 <= self.max_nesting_depth <= MAX_NESTING_DEPTH_LIMIT:
            raise ValueError(
                f"max_nesting_depth must be between 1 and {MAX_NESTING_DEPTH_LIMIT}, "
                f"got {self.max_nesting_depth}"
            )
        if self.max_width < 0:
            raise ValueError(f"max_width must not be negative, got {self.max_width}")
        if self.max_precision < 0:
            raise ValueError(f"max_precision must not be negative, got {self.max_precision}")


_CONFIG_OVERRIDE: ContextVar[EngineConfig | None] = ContextVar(
    "pfmt_config_override",
    default=None,
)


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


def _parse_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def load_config(environ: Mapping[str, str] | None = None) -> EngineConfig:
    """Build an EngineConfig from environment variables."""
    env = os.environ if environ is None else environ

    return EngineConfig(
        max_nesting_depth=_parse_int(env, MAX_NESTING_DEPTH_ENV, DEFAULT_MAX_NESTING_DEPTH),
        strict_leaves=_parse_bool(STRICT_LEAVES_ENV, env.get(STRICT_LEAVES_ENV, "")),
        max_width=_parse_int(env, MAX_WIDTH_ENV, DEFAULT_MAX_WIDTH),
        max_precision=_parse_int(env, MAX_PRECISION_ENV, DEFAULT_MAX_PRECISION),
    )


def current_config() -> EngineConfig:
    """Return the scoped override, or the configuration from the environment."""
    override = _CONFIG_OVERRIDE.get()
    if override is not None:
        return override
    return load_config()


@contextmanager
def config_scope(config: EngineConfig) -> Iterator[EngineConfig]:
    """Install ``config`` for the current context."""
    token = _CONFIG_OVERRIDE.set(config)
    try:
        yield config
    finally:
        _CONFIG_OVERRIDE.reset(token)
