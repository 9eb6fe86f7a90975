from collections.abc import Sequence
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from r_style_lint.config import resolve_config
from r_style_lint.core.engine import DEFAULT_JOBS, RuleEngine, run_check
from r_style_lint.core.report import Report
from r_style_lint.errors import ConfigError
from r_style_lint.models import Severity
from r_style_lint.rules import build_rules, select_rules

console = Console()
err_console = Console(stderr=True)

CONFIG_ERROR_EXIT_CODE = 2
OUTPUT_ERROR_EXIT_CODE = 3

_SEVERITY_STYLES = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
}


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"


def _render_table(headers: Sequence[str], rows: Sequence[tuple[Any, ...]]) -> None:
    table = Table(show_lines=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*(str(v) for v in row))
    console.print(table)


def _line_span(start: int, end: int) -> str:
    return str(start) if start == end else f"{start}-{end}"


def _render_report(report: Report) -> None:
    rows = [
        (
            escape(finding.file),
            _line_span(finding.start_line, finding.end_line),
            f"[{_SEVERITY_STYLES[finding.severity]}]{finding.severity.value}[/]",
            finding.rule_id,
            escape(finding.message),
        )
        for finding in report.findings
    ]
    if rows:
        _render_table(["file", "line", "severity", "rule", "message"], rows)
    counts = report.counts()
    console.print(
        f"{report.files_checked} file(s) checked: "
        f"[red]{counts['error']} error(s)[/red], "
        f"[yellow]{counts['warning']} warning(s)[/yellow], "
        f"[cyan]{counts['info']} info[/cyan]"
    )


def build_engine(config_path: str | None, threshold: int | None = None) -> RuleEngine:
    config = resolve_config(config_path)
    if threshold is not None:
        if threshold < 1:
            raise ConfigError(f"pipe_complexity_threshold: expected an integer >= 1, received {threshold!r}")
        config = config.model_copy(update={"pipe_complexity_threshold": threshold})
    return RuleEngine(select_rules(build_rules(), config.disabled_rules), config)


def check(
    paths: Annotated[list[str], typer.Argument(help="R scripts or directories to check.")],
    config: Annotated[str | None, typer.Option("--config", "-c", help="TOML or JSON config file.")] = None,
    output_format: Annotated[OutputFormat, typer.Option("--format", "-f", help="Report format.")] = OutputFormat.TABLE,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Also write the JSON report here.")] = None,
    jobs: Annotated[int, typer.Option(help="Files checked concurrently.")] = DEFAULT_JOBS,
    threshold: Annotated[int | None, typer.Option(help="Override pipe_complexity_threshold.")] = None,
) -> None:
    """Check R scripts against the style guide."""
    try:
        engine = build_engine(config, threshold)
    except ConfigError as exc:
        err_console.print(f"[red]Configuration error:[/red] {exc}")
        raise typer.Exit(CONFIG_ERROR_EXIT_CODE) from None

    report = run_check(engine, paths, jobs)

    if output is not None:
        try:
            output.write_text(report.to_json() + "\n", encoding="utf-8")
        except OSError as exc:
            err_console.print(f"[red]Cannot write report:[/red] {escape(str(output))}: {exc.strerror or exc}")
            raise typer.Exit(OUTPUT_ERROR_EXIT_CODE) from None
    if output_format is OutputFormat.JSON:
        typer.echo(report.to_json())
    else:
        _render_report(report)

    raise typer.Exit(report.exit_code)
