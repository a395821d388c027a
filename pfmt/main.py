"""
pfmt Main module - command line and HTTP entry points
"""

import contextlib
import json
import logging
from typing import Any, Dict, List, Optional
import time

import typer
import uvicorn
from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRouter
from pydantic import BaseModel

from pfmt.features import Feature, FeatureRegistry, OperationResult
from pfmt.version import get_version

# Module-level logger
logger = logging.getLogger("pfmt.main")


class ErrorResponse(BaseModel):
    """Standard error response model"""

    error: str
    diagnostics: List[Dict[str, Any]] = []


# Create CLI app with Typer
app = typer.Typer(
    name="pfmt",
    help="pfmt - runtime format strings with placeholders, flags and options",
    add_completion=False,
)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage the application lifespan"""
    logger.info("pfmt API %s ready", get_version())
    yield
    logger.info("pfmt API shutting down")


# Create FastAPI app for API server
api_app = FastAPI(
    title="pfmt API",
    description="API for parsing and rendering pfmt format strings",
    version=get_version(),
    lifespan=lifespan,
)

# Add CORS middleware
api_app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API router for versioned endpoints
api_router = APIRouter(prefix="/api/v1")


# Request models
class ParseRequest(BaseModel):
    template: str


class FormatRequest(BaseModel):
    template: str
    values: Optional[Dict[str, Any]] = None
    strict: Optional[bool] = None


# ----------------- Helper Functions -----------------


class ElapsedMsFormatter(logging.Formatter):
    """Formatter that shows milliseconds since program start, right-aligned for up to 9999 seconds."""
    def __init__(self, fmt=None, datefmt=None, *args, **kwargs):
        super().__init__(fmt, datefmt, *args, **kwargs)
        self.start_time = time.monotonic()
        self.width = 8  # Enough for '9999000ms'

    def format(self, record):
        elapsed_ms = int((time.monotonic() - self.start_time) * 1000)
        if elapsed_ms < 10**7:  # up to 9999.999s
            elapsed = f"[{elapsed_ms:>{self.width}}ms]"
        else:
            elapsed = f"[{elapsed_ms}ms]"
        record.elapsed = elapsed
        return super().format(record)


VERBOSE_LEVEL = 15  # Between INFO (20) and DEBUG (10)
logging.addLevelName(VERBOSE_LEVEL, "VERBOSE")

def verbose(self, message, *args, **kwargs):
    if self.isEnabledFor(VERBOSE_LEVEL):
        self._log(VERBOSE_LEVEL, message, args, **kwargs)
logging.Logger.verbose = verbose  # type: ignore[attr-defined]


def setup_logging(debug: bool = False, verbose: bool = False) -> None:
    """Set up logging configuration"""
    if debug:
        log_level = logging.DEBUG
    elif verbose:
        log_level = VERBOSE_LEVEL
    else:
        log_level = logging.INFO

    formatter = ElapsedMsFormatter('%(elapsed)s %(message)s')
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root = logging.getLogger()
    root.handlers = []  # Remove any existing handlers
    root.addHandler(handler)
    root.setLevel(log_level)

    # uvicorn installs its own handlers; keep its chatter out of debug runs
    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(logger_name).setLevel(logging.INFO if debug else logging.WARNING)


def _feature_or_exit(feature_name: str) -> Feature:
    feature = FeatureRegistry.get_feature(feature_name)
    if not feature:
        logger.error("Unknown feature: %s", feature_name)
        raise typer.Exit(code=1)
    return feature


def _handle_cli_result(feature_name: str, result: OperationResult) -> Any:
    """Log a failed result and exit, or return the data of a successful one"""
    if not result.success:
        logger.error("%s failed: %s", feature_name, result.error or "Unknown error")
        for diagnostic in result.diagnostics:
            logger.verbose("  [%s] %s", diagnostic["code"], diagnostic["message"])  # type: ignore[attr-defined]
        raise typer.Exit(code=1)
    return result.data


def _decode_assignment(assignment: str) -> tuple:
    """Split ``key=value``; the value is JSON when it parses as JSON"""
    key, sep, raw = assignment.partition("=")
    if not sep or not key:
        logger.error("Invalid --set value %r, expected key=value", assignment)
        raise typer.Exit(code=1)
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        value = raw
    return key, value


def _load_values(values_file: Optional[str], assignments: List[str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    if values_file:
        try:
            with open(values_file, "r") as f:
                loaded = json.load(f)
        except FileNotFoundError:
            logger.error("File not found: %s", values_file)
            raise typer.Exit(code=1)
        except json.JSONDecodeError as e:
            logger.error("Invalid JSON in %s: %s", values_file, str(e))
            raise typer.Exit(code=1)
        if not isinstance(loaded, dict):
            logger.error("%s must contain a JSON object", values_file)
            raise typer.Exit(code=1)
        values.update(loaded)
    for assignment in assignments:
        key, value = _decode_assignment(assignment)
        values[key] = value
    return values


def _api_result(result: OperationResult) -> Any:
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ErrorResponse(
                error=result.error or "An error occurred",
                diagnostics=result.diagnostics,
            ).model_dump(),
        )
    return result.data


def _api_feature(feature_name: str) -> Feature:
    feature = FeatureRegistry.get_feature(feature_name)
    if not feature:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{feature_name.capitalize()} feature not found",
        )
    return feature


# ----------------- CLI Commands -----------------


@app.command()
def version() -> None:
    """Show the pfmt version"""
    setup_logging(False)
    data = _handle_cli_result("version", _feature_or_exit("version").handler())
    logger.info("pfmt version: %s", data.get("version", "unknown"))


@app.command()
def parse(
    template: str = typer.Argument(..., help="Format string to parse"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug mode"),
) -> None:
    """Print the pieces of a format string as JSON"""
    setup_logging(debug)
    data = _handle_cli_result("parse", _feature_or_exit("parse").handler(template=template))
    print(json.dumps(data["pieces"], indent=2))


@app.command()
def render(
    template: str = typer.Argument(..., help="Format string to render"),
    values: Optional[str] = typer.Option(None, "--values", help="JSON file with the values"),
    set_: Optional[List[str]] = typer.Option(
        None, "--set", help="Set a value as key=value (repeatable, JSON values are decoded)"
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Reject flags and options the values do not know"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug mode"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging (between info and debug)"),
) -> None:
    """Render a format string against named values"""
    setup_logging(debug, verbose)
    table_values = _load_values(values, set_ or [])
    logger.verbose("Rendering with %d values", len(table_values))  # type: ignore[attr-defined]

    result = _feature_or_exit("format").handler(
        template=template,
        values=table_values,
        # without --strict the configured default applies
        strict=True if strict else None,
    )
    data = _handle_cli_result("render", result)
    print(data["output"])


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Host to bind the API server"),
    port: int = typer.Option(8000, help="Port to bind the API server"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug mode"),
):
    """Start the pfmt API server"""
    setup_logging(debug)

    logger.info(f"Starting pfmt API server version {get_version()} on {host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")

    uvicorn.run(api_app, host=host, port=port)


# ----------------- API Endpoints -----------------


@api_router.get("/version")
async def get_version_endpoint():
    """Get pfmt version"""
    try:
        return _api_result(_api_feature("version").handler())
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Error in version endpoint: %s", str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from e


@api_router.post("/parse")
async def parse_endpoint(request: ParseRequest):
    """Parse a format string into pieces"""
    try:
        return _api_result(_api_feature("parse").handler(**request.model_dump()))
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Error in parse endpoint: %s", str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from e


@api_router.post("/format")
async def format_endpoint(request: FormatRequest):
    """Render a format string against named values"""
    try:
        return _api_result(_api_feature("format").handler(**request.model_dump()))
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Error in format endpoint: %s", str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from e


# Include the router in the FastAPI app
api_app.include_router(api_router)


if __name__ == "__main__":
    app()
