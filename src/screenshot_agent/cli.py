"""CLI entry point using Typer."""

import asyncio
import os
import sys

import typer
from loguru import logger
from rich.console import Console

from screenshot_agent.errors import NotFoundError, ScreenshotAgentError

EXIT_NOT_FOUND = 1
EXIT_FAILURE = 2

app = typer.Typer(
    name="screenshot-agent",
    help=(
        "Print two lines: source (clipboard or original file path) and the "
        "temp path of a PNG/JPG/JPEG image from the clipboard, Desktop or "
        "Downloads. Desktop files are copied to temp and trashed; Downloads "
        "are moved. Exits 1 if nothing is found."
    ),
    add_completion=False,
    context_settings={"help_option_names": ["-h", "-help", "--help"]},
)

err_console = Console(stderr=True, highlight=False, soft_wrap=True)


def configure_logging(verbose: bool, level: str = "DEBUG") -> None:
    """Diagnostics go to stderr with --verbose, nowhere otherwise."""
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level=level, format="{message}")
        logger.enable("screenshot_agent")
    else:
        logger.disable("screenshot_agent")


def build_agent():
    """Pipeline wired for this machine."""
    from screenshot_agent.config import settings
    from screenshot_agent.pipeline import ScreenshotAgent

    return ScreenshotAgent.from_settings(settings)


@app.command()
def capture(
    clipboard_only: bool = typer.Option(
        False, "--clipboard-only", help="Use clipboard only (no file fallback)"
    ),
    downloads: bool = typer.Option(
        False, "--downloads", help="Search Downloads instead of Desktop"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Verbose logging to stderr"
    ),
):
    """Find the most recent screenshot and hand it over via a temp file."""
    from screenshot_agent.config import settings
    from screenshot_agent.pipeline import Options

    configure_logging(verbose, settings.log_level)
    options = Options(clipboard_only=clipboard_only, use_downloads=downloads)

    try:
        result = asyncio.run(build_agent().run(options))
    except NotFoundError:
        raise typer.Exit(EXIT_NOT_FOUND)
    except (ScreenshotAgentError, OSError) as e:
        err_console.print(str(e), markup=False)
        raise typer.Exit(EXIT_FAILURE)
    except Exception as e:
        err_console.print(f"{type(e).__name__}: {e}", markup=False)
        raise typer.Exit(EXIT_FAILURE)

    if result is None:
        raise typer.Exit(EXIT_NOT_FOUND)

    # Paths may carry undecodable bytes; write them back out unchanged
    typer.echo(os.fsencode(result.lines()), nl=False)


def main():
    app()


if __name__ == "__main__":
    main()
