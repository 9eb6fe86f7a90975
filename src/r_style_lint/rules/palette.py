import re
from collections.abc import Sequence

from r_style_lint.config import LintConfig
from r_style_lint.core.syntax import (
    argument_value,
    call_name,
    calls,
    is_binary,
    is_string,
    unquote,
    walk_with_parents,
)
from r_style_lint.models import Finding, Severity, SourceFile, SyntaxNode
from r_style_lint.rules.base import node_finding

_SCALE_RE = re.compile(r"^scale_(colour|color|fill)_(?P<kind>[A-Za-z0-9_]+)$")
_BREWER_KINDS = frozenset({"brewer", "distiller", "fermenter"})
_PLOT_OPERATORS = frozenset({"+", "|>", "%>%"})


def is_scale_call(node: SyntaxNode) -> bool:
    name = call_name(node)
    return name is not None and _SCALE_RE.match(name) is not None


def _denied_pattern(node: SyntaxNode, patterns: frozenset[str]) -> str | None:
    for inner in calls(node):
        name = call_name(inner)
        if name is None or inner is node:
            continue
        for pattern in sorted(patterns):
            if pattern in name:
                return pattern
    for pattern in sorted(patterns):
        if f'"{pattern}"' in node.text or f"'{pattern}'" in node.text:
            return pattern
    return None


def classify_scale(node: SyntaxNode, config: LintConfig) -> str | None:
    """Return why a scale call is disallowed, or None when it is allowed."""
    name = call_name(node) or ""
    pattern = _denied_pattern(node, config.denied_palette_patterns)
    if pattern is not None:
        return f"{name}() uses the denied palette '{pattern}'"
    if name in config.allowed_palettes:
        return None
    match = _SCALE_RE.match(name)
    if match is not None and match.group("kind") in _BREWER_KINDS:
        palette = argument_value(node, "palette")
        if palette is None:
            return f"{name}() relies on the default brewer palette"
        if is_string(palette) and unquote(palette.text) in config.allowed_palettes:
            return None
        return f"{name}() uses the unapproved palette {palette.text}"
    return f"{name}() is not an approved colour scale"


def _plot_root(node: SyntaxNode, parents: dict[int, SyntaxNode | None]) -> SyntaxNode:
    current = node
    parent = parents.get(id(current))
    while parent is not None and (is_binary(parent, _PLOT_OPERATORS) or parent.type == "parenthesized_expression"):
        current = parent
        parent = parents.get(id(current))
    return current


class PaletteDisallowedRule:
    id = "palette-disallowed"
    description = "Colour and fill scales use an approved palette."
    default_severity = Severity.ERROR

    def check(self, source: SourceFile, config: LintConfig) -> Sequence[Finding]:
        findings: list[Finding] = []
        for node in calls(source.tree.root):
            if not is_scale_call(node):
                continue
            reason = classify_scale(node, config)
            if reason is None:
                continue
            findings.append(
                node_finding(self, source, node, reason, "Use a viridis scale or an approved brewer palette.")
            )
        return findings


class PaletteImplicitRule:
    id = "palette-implicit"
    description = "Plots set their colour scale explicitly instead of relying on defaults."
    default_severity = Severity.INFO

    def check(self, source: SourceFile, config: LintConfig) -> Sequence[Finding]:
        parents: dict[int, SyntaxNode | None] = {}
        plots: list[SyntaxNode] = []
        for node, parent in walk_with_parents(source.tree.root):
            parents[id(node)] = parent
            if call_name(node) == "ggplot":
                plots.append(node)

        findings: list[Finding] = []
        for plot in plots:
            root = _plot_root(plot, parents)
            if any(is_scale_call(node) for node in calls(root)):
                continue
            findings.append(
                node_finding(
                    self,
                    source,
                    plot,
                    "ggplot() has no explicit colour scale; ggplot2 defaults may apply silently",
                    "Add an approved scale such as scale_colour_viridis_d().",
                    single_line=True,
                )
            )
        return findings
