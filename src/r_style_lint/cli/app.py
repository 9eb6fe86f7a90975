import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from r_style_lint.cli.check import check
from r_style_lint.cli.rules import list_rules

app = typer.Typer(
    name="r-style-lint",
    help="r-style-lint: check R analysis scripts against the style guide.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("check")(check)
app.command("rules")(list_rules)


@app.callback()
def configure_logging(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def main() -> None:
    app()
