from rich.console import Console
from rich.table import Table

from r_style_lint.rules import build_rules

console = Console()


def list_rules() -> None:
    """List every registered rule."""
    table = Table(show_lines=False)
    for h in ("rule", "severity", "description"):
        table.add_column(h)
    for rule in build_rules():
        table.add_row(rule.id, rule.default_severity.value, rule.description)
    console.print(table)
    console.print(f"({len(build_rules())} rules)")
