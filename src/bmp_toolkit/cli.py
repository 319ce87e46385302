"""
BMP Toolkit CLI

Command-line interface for comparing, negating and inspecting BMP files.
"""

import sys
import logging
import json
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.logging import RichHandler

from bmp_toolkit.core.results import OperationResult
from bmp_toolkit.core.actions import (
    compare_files,
    negate_file,
    inspect_file,
)

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    handlers=[RichHandler(rich_tracebacks=True)],
)
logger = logging.getLogger("bmp_toolkit")

# Setup Rich consoles; diagnostics go to stderr
console = Console()
err_console = Console(stderr=True)

app = typer.Typer(help="BMP Toolkit - compare and negate 8/24-bit BMP images")

EXIT_COMPARE_USAGE = -2
EXIT_NEGATE_USAGE = -1

# Exit status typer/click use for bad arguments
USAGE_ERROR_STATUS = 2


def print_header(text: str) -> None:
    """Print fancy header."""
    console.print(Panel(text, expand=False, style="bold blue"))


def print_success(text: str) -> None:
    """Print success message."""
    console.print(f"✓ {text}", style="green", markup=False)


def print_warning(text: str) -> None:
    """Print warning message."""
    err_console.print(f"⚠️  {text}", style="yellow", markup=False, soft_wrap=True)


def print_error(text: str) -> None:
    """Print error message."""
    err_console.print(f"❌ {text}", style="red", markup=False, soft_wrap=True)


def print_difference(x: int, y: int) -> None:
    """Print one differing pixel coordinate as soon as it is found."""
    err_console.print(f"({x} , {y})", highlight=False, markup=False, soft_wrap=True)


def finish(result: OperationResult, output_json: bool = False) -> None:
    """Report errors/warnings of a result and exit with its exit code."""
    if output_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    elif not result.ok:
        print_error(result.to_summary())
    else:
        for warning in result.warnings:
            print_warning(warning)
    raise typer.Exit(code=result.exit_code)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Validate, compare and negate uncompressed BMP files."""
    if verbose:
        logger.setLevel(logging.DEBUG)


@app.command()
def compare(
    first: str = typer.Argument(..., help="First BMP file"),
    second: str = typer.Argument(..., help="Second BMP file"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON for scripting"),
) -> None:
    """
    Compare two BMP files pixel by pixel.

    Differing coordinates are printed to stderr as they are found.
    Exit code 0 means equal, 1 means the images differ.
    """
    result = compare_files(
        first,
        second,
        on_difference=None if output_json else print_difference,
    )

    if not output_json and result.ok:
        verdict = result.metadata.get("verdict")
        if verdict == "equal":
            print_success("Images are equal")
        elif verdict == "unequal":
            console.print(
                f"Images differ: {result.metadata['differences']} pixels",
                style="yellow",
                markup=False,
            )

    finish(result, output_json)


@app.command()
def negate(
    mine: bool = typer.Option(
        ...,
        "--mine/--theirs",
        help="Use the built-in codec (--mine) or Pillow (--theirs)",
    ),
    input_path: str = typer.Argument(..., help="Source BMP file"),
    output_path: str = typer.Argument(..., help="Destination BMP file"),
) -> None:
    """Write the color negative of a BMP file."""
    mode = "mine" if mine else "theirs"
    result = negate_file(input_path, output_path, mode=mode)

    if result.ok:
        print_success(f"Wrote {result.bytes_len:,} bytes to {output_path}")

    finish(result)


@app.command()
def info(
    image_path: str = typer.Argument(..., help="BMP file to inspect"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON for scripting"),
) -> None:
    """Validate a BMP file and show its header fields."""
    result = inspect_file(image_path)

    if result.ok and not output_json:
        print_header(f"BMP Header: {image_path}")

        table = Table(title="Header Fields")
        table.add_column("Field", style="cyan")
        table.add_column("Value", style="green")

        for name, value in result.metadata["header"].items():
            table.add_row(name, str(value))

        table.add_row("row order", "top-down" if result.metadata["top_down"] else "bottom-up")
        table.add_row("row stride", f"{result.metadata['row_stride']} bytes")
        table.add_row("row padding", f"{result.metadata['row_padding']} bytes")
        table.add_row("palette size", f"{result.metadata['palette_size']} bytes")
        table.add_row("pixel array size", f"{result.metadata['pixel_array_size']:,} bytes")

        console.print(table)
        print_success("Header is valid")

    finish(result, output_json)


def _run_standalone(command: str, argv: Optional[List[str]], usage_exit_code: int) -> None:
    """Run one command as its own program, mapping usage errors to ``usage_exit_code``."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        app(args=[command, *args], prog_name=f"bmp-{command}")
    except SystemExit as e:
        if e.code == USAGE_ERROR_STATUS:
            sys.exit(usage_exit_code)
        raise
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(0)


def compare_main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``bmp-compare FIRST SECOND``."""
    _run_standalone("compare", argv, EXIT_COMPARE_USAGE)


def negate_main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``bmp-negate --mine|--theirs INPUT OUTPUT``."""
    _run_standalone("negate", argv, EXIT_NEGATE_USAGE)


def main() -> None:
    """Main entry point."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(0)


if __name__ == "__main__":
    main()
