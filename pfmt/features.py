"""
This module defines all pfmt features using a unified registry system.
The CLI and the HTTP API are both thin layers over these handlers.
"""

from typing import (
    Dict,
    Any,
    Callable,
    List,
    Optional,
    TypeVar,
    Generic,
)
from dataclasses import dataclass
import logging

from pfmt.config import EngineConfig, current_config
from pfmt.converters import pieces_to_json
from pfmt.engine import format_string
from pfmt.errors import FormattingError, NotFormattableError, ParseError
from pfmt.parser import parse
from pfmt.tables import DictTable

logger = logging.getLogger("pfmt.features")

T = TypeVar("T")


class OperationResult(Generic[T]):
    """Wrapper for operation results with success/error handling"""

    def __init__(
        self,
        success: bool,
        data: Optional[T] = None,
        error: Optional[str] = None,
        diagnostics: Optional[List[Dict[str, Any]]] = None,
    ):
        self.success = success
        self.data = data
        self.error = error
        self.diagnostics = diagnostics or []

    @classmethod
    def ok(cls, data: T) -> "OperationResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(
        cls, error: str, diagnostics: Optional[List[Dict[str, Any]]] = None
    ) -> "OperationResult[T]":
        return cls(success=False, error=error, diagnostics=diagnostics)

    def __repr__(self) -> str:
        if self.success:
            return f"OperationResult(ok, {self.data!r})"
        return f"OperationResult(fail, {self.error!r})"


@dataclass
class Feature:
    """Base class for all pfmt features"""

    name: str
    description: str
    handler: Callable
    cli_options: Optional[Dict[str, Any]] = None
    api_endpoint: Optional[Dict[str, Any]] = None


class FeatureRegistry:
    """Registry for all pfmt features"""

    _features: Dict[str, Feature] = {}

    @classmethod
    def register(cls, feature: Feature) -> Feature:
        """Register a new feature"""
        cls._features[feature.name] = feature
        return feature

    @classmethod
    def get_feature(cls, name: str) -> Optional[Feature]:
        """Get a feature by name"""
        return cls._features.get(name)

    @classmethod
    def get_all_features(cls) -> Dict[str, Feature]:
        """Get all registered features"""
        return cls._features.copy()


# ----------------- Feature Handlers -----------------


def handle_version(**kwargs) -> OperationResult[Dict[str, str]]:
    """Handle version request"""
    from pfmt.version import get_version

    return OperationResult.ok({"version": get_version()})


def handle_parse(template: str, **kwargs) -> OperationResult[Dict[str, Any]]:
    """Parse a template and return its piece view"""
    try:
        pieces = parse(template)
    except ValueError as err:
        return OperationResult.fail(f"Invalid configuration: {err}")
    except ParseError as err:
        logger.debug("Parse failed: %r", err)
        return OperationResult.fail(
            err.format_message(), diagnostics=[err.diagnostic()]
        )
    return OperationResult.ok({"pieces": pieces_to_json(pieces)})


def handle_format(
    template: str,
    values: Optional[Dict[str, Any]] = None,
    strict: Optional[bool] = None,
    config: Optional[EngineConfig] = None,
    **kwargs,
) -> OperationResult[Dict[str, Any]]:
    """Render a template against a dictionary of values"""
    try:
        config = config or current_config()
    except ValueError as err:
        return OperationResult.fail(f"Invalid configuration: {err}")
    if strict is None:
        strict = config.strict_leaves
    table = DictTable(values or {}, strict=strict)
    try:
        output = format_string(table, template, config)
    except FormattingError as err:
        logger.debug("Format failed: %r", err)
        return OperationResult.fail(
            err.format_message(), diagnostics=[err.diagnostic()]
        )
    except NotFormattableError as err:
        return OperationResult.fail(str(err))
    return OperationResult.ok({"output": output})


# Register all features
version_feature = FeatureRegistry.register(
    Feature(
        name="version",
        description="Get the pfmt version",
        handler=handle_version,
        api_endpoint={
            "path": "/version",
            "methods": ["GET"],
            "response_model": Dict[str, str],
        },
    )
)

parse_feature = FeatureRegistry.register(
    Feature(
        name="parse",
        description="Parse a format string into pieces",
        handler=handle_parse,
        cli_options={
            "template": {
                "type": str,
                "required": True,
                "help": "Format string to parse",
            },
        },
        api_endpoint={
            "path": "/parse",
            "methods": ["POST"],
            "request_model": {
                "template": (str, "The format string"),
            },
            "response_model": Dict[str, Any],
        },
    )
)

format_feature = FeatureRegistry.register(
    Feature(
        name="format",
        description="Render a format string against named values",
        handler=handle_format,
        cli_options={
            "template": {
                "type": str,
                "required": True,
                "help": "Format string to render",
            },
            "values": {
                "type": str,
                "required": False,
                "help": "JSON file with the values",
            },
            "strict": {
                "type": bool,
                "required": False,
                "default": False,
                "help": "Reject flags and options the values do not know",
            },
        },
        api_endpoint={
            "path": "/format",
            "methods": ["POST"],
            "request_model": {
                "template": (str, "The format string"),
                "values": (Optional[Dict[str, Any]], "Values by name"),
                "strict": (Optional[bool], "Reject unknown flags and options"),
            },
            "response_model": Dict[str, Any],
        },
    )
)
