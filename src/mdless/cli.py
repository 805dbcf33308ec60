"""CLI entry point for mdless. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import sys

import click

from mdless import __version__
from mdless.app import MIN_WIDTH, App, print_document
from mdless.keybindings import PagerKeybindingsManager
from mdless.parser import parse
from mdless.settings import load_settings
from mdless.terminal import ProcessTerminal, terminal_size
from mdless.theme import NO_COLOR, THEME_NAMES, theme_by_name

logger = logging.getLogger(__name__)

LOG_LEVELS = ["debug", "info", "warning", "error"]
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _configure_logging(level: str, log_file: str | None) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        filename=log_file,
    )


def _read_source(file: str | None) -> str:
    if file is None or file == "-":
        return click.get_binary_stream("stdin").read().decode("utf-8", errors="replace")
    try:
        with open(file, encoding="utf-8", errors="replace") as f:
            return f.read()
    except OSError as e:
        raise click.FileError(file, hint=e.strerror or str(e)) from e


def _stream_fds() -> list[int]:
    fds: list[int] = []
    for stream in (sys.stdout, sys.stdin):
        try:
            fds.append(stream.fileno())
        except (AttributeError, ValueError, OSError):
            continue
    return fds


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("file", required=False, type=click.Path(dir_okay=False, allow_dash=True))
@click.option(
    "--theme",
    type=click.Choice(list(THEME_NAMES), case_sensitive=False),
    default=None,
    help="Colour theme (default: dark)",
)
@click.option("--width", type=click.IntRange(min=1), default=None, help="Fixed layout width in columns")
@click.option("--tab-width", type=click.IntRange(min=1), default=None, help="Tab stop width (default: 4)")
@click.option("--no-pager", is_flag=True, help="Print the whole document and exit")
@click.option("--color/--no-color", default=None, help="Enable or disable colours")
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Settings file (default: ~/.mdless/settings.json)",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="warning",
    show_default=True,
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    envvar="MDLESS_LOG_FILE",
    help="Write log messages to this file instead of stderr",
)
@click.version_option(__version__, prog_name="mdless")
@click.pass_context
def main(ctx, file, theme, width, tab_width, no_pager, color, settings_path, log_level, log_file):
    """View a Markdown FILE in the terminal (reads stdin when FILE is omitted or -)."""
    _configure_logging(log_level, log_file)

    if file is None and sys.stdin.isatty():
        click.echo(ctx.get_help())
        return

    settings = load_settings(
        {"theme": theme, "tabWidth": tab_width, "width": width, "color": color},
        settings_path=settings_path,
    )
    blocks = parse(_read_source(file))
    logger.debug("Parsed %d blocks", len(blocks))

    theme_obj = theme_by_name(settings.theme)
    interactive = not no_pager and sys.stdout.isatty()

    if interactive:
        app = App(
            ProcessTerminal(),
            blocks,
            theme=theme_obj if settings.color else NO_COLOR,
            tab_width=settings.tab_width,
            width=settings.width,
            keybindings=PagerKeybindingsManager(settings.keybindings),
        )
        try:
            app.run()
            return
        except OSError as e:
            logger.warning("Cannot open the terminal for input (%s); printing instead", e)

    columns, _ = terminal_size(*_stream_fds())
    print_document(
        blocks,
        sys.stdout,
        width=settings.width or max(columns, MIN_WIDTH),
        tab_width=settings.tab_width,
        theme=theme_obj,
        # Piped output stays plain unless colour was asked for explicitly.
        color=bool(color),
    )


if __name__ == "__main__":
    main()
