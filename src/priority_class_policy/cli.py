"""
CLI entry point for the priority class policy.

This module provides the Typer-based command-line interface. It exposes the
same functions the policy host calls, so a policy can be exercised against
request and settings files.

Commands:
    validate            Evaluate an admission request
    validate-settings   Check a settings file
    protocol-version    Print the host protocol version

Architecture Note:
    The CLI is intentionally thin - it reads files, builds the logger and
    delegates to PolicyHost. The logger built here is the only one the
    policy uses for the lifetime of the command.
"""

import json
import sys
import traceback
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.markup import escape

from priority_class_policy import __version__
from priority_class_policy.errors import PolicyError
from priority_class_policy.host import PROTOCOL_VERSION, PolicyHost
from priority_class_policy.logs import build_logger
from priority_class_policy.policy import ensure_valid_settings
from priority_class_policy.schema import ValidationResponse, load_settings, parse_settings

# Initialize Typer app with metadata
app = typer.Typer(
    name="priority-class-policy",
    help="Admission policy restricting workload priority classes.",
    add_completion=False,
    no_args_is_help=True,
)

# Rich console for formatted output
console = Console()

EXIT_ACCEPTED = 0
EXIT_REJECTED = 1
EXIT_BAD_INPUT = 2


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]priority-class-policy[/bold] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    priority-class-policy - Restrict the priority classes workloads may use.

    Configure either an allow list or a deny list of priority class names.
    Workloads without a priority class are always admitted.
    """
    pass


def _read_document(path: str) -> Any:
    """Read a JSON document from a file, or from stdin when path is '-'."""
    if path == "-":
        return json.loads(sys.stdin.read())
    return json.loads(Path(path).read_text())


def _build_payload(document: Any, settings_path: Path | None) -> str:
    """
    Turn a request file into a validate payload.

    Accepts either a full validate payload ({"request": ..., "settings": ...})
    or an AdmissionReview. Settings from --settings replace any in the file.
    Either way the settings must pass validation before the request is run.
    """
    if not isinstance(document, dict) or "request" not in document:
        raise ValueError("request file must contain a 'request' object")

    if settings_path is not None:
        loaded = ensure_valid_settings(load_settings(settings_path), source=str(settings_path))
    else:
        loaded = ensure_valid_settings(
            parse_settings(document.get("settings"), source="request file"),
            source="request file",
        )
    settings = loaded.model_dump(mode="json", exclude_none=True)

    return json.dumps({"request": document["request"], "settings": settings})


def _output_json_error(error_type: str, message: str, include_traceback: bool = False) -> None:
    """Output an error in JSON format."""
    output = {
        "error": True,
        "error_type": error_type,
        "message": message,
    }
    if include_traceback:
        output["traceback"] = traceback.format_exc()
    print(json.dumps(output, indent=2))


def _display_response(response: ValidationResponse) -> None:
    """Display a validation response in a formatted way."""
    if response.accepted:
        console.print("[green]✓[/green] Request [green]accepted[/green]")
    else:
        console.print("[red]✗[/red] Request [red]rejected[/red]")
        console.print(f"  [dim]Reason:[/dim] {escape(response.message or '')}")


@app.command()
def validate(
    request_path: Annotated[
        str,
        typer.Argument(
            help="Path to the request JSON file, or '-' to read stdin.",
        ),
    ],
    settings_path: Annotated[
        Optional[Path],
        typer.Option(
            "--settings",
            "-s",
            help="Settings YAML/JSON file. Overrides settings in the request.",
            exists=True,
            readable=True,
            resolve_path=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            help="Enable debug logging.",
        ),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            help="Enable debug mode with full error tracebacks.",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output the host response as JSON.",
        ),
    ] = False,
) -> None:
    """
    Evaluate an admission request against the policy.

    Exits 0 when the request is accepted, 1 when it is rejected, and 2 when
    the request or settings cannot be read or the settings are invalid.
    Settings embedded in the request are checked the same way as --settings.

    Example:
        $ priority-class-policy validate pod.json --settings settings.yaml
    """
    host = PolicyHost(build_logger(verbose))

    try:
        payload = _build_payload(_read_document(request_path), settings_path)
        response = host.evaluate(payload)
    except (OSError, ValueError, PolicyError) as e:
        if json_output:
            _output_json_error("request_error", str(e), debug)
        else:
            console.print(f"[red]Error reading request: {escape(str(e))}[/red]")
            if debug:
                console.print(f"[dim]{escape(traceback.format_exc())}[/dim]")
        raise typer.Exit(code=EXIT_BAD_INPUT)

    if json_output:
        print(response.model_dump_json(exclude_none=True))
    else:
        _display_response(response)

    raise typer.Exit(code=EXIT_ACCEPTED if response.accepted else EXIT_REJECTED)


@app.command("validate-settings")
def validate_settings(
    settings_path: Annotated[
        Path,
        typer.Argument(
            help="Path to the settings YAML/JSON file.",
            exists=True,
            readable=True,
            resolve_path=True,
        ),
    ],
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            help="Enable debug logging.",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output the host response as JSON.",
        ),
    ] = False,
) -> None:
    """
    Check that a settings file is usable.

    Example:
        $ priority-class-policy validate-settings settings.yaml
    """
    host = PolicyHost(build_logger(verbose))

    try:
        settings = load_settings(settings_path)
    except (OSError, PolicyError) as e:
        if json_output:
            print(json.dumps({"valid": False, "message": str(e)}))
        else:
            console.print(f"[red]✗[/red] Settings [red]invalid[/red]: {escape(str(e))}")
        raise typer.Exit(code=1)

    response = host.check_settings(settings.model_dump_json(exclude_none=True))

    if json_output:
        print(response.model_dump_json(exclude_none=True))
    elif response.valid:
        console.print(f"[green]✓[/green] Settings [cyan]{settings_path.name}[/cyan] are valid")
    else:
        console.print(f"[red]✗[/red] Settings [red]invalid[/red]: {escape(response.message or '')}")

    raise typer.Exit(code=0 if response.valid else 1)


@app.command("protocol-version")
def protocol_version() -> None:
    """Print the protocol version spoken with the policy host."""
    console.print(PROTOCOL_VERSION)


if __name__ == "__main__":
    app()
