import re
from collections.abc import Iterator, Sequence

from r_style_lint.config import LintConfig
from r_style_lint.core.syntax import (
    assignment_parts,
    call_name,
    calls,
    child_by_field,
    is_assignment,
    is_binary,
    unquote,
    walk_with_parents,
)
from r_style_lint.models import Finding, Severity, SourceFile, SyntaxNode
from r_style_lint.rules.base import node_finding

_BOOLEAN_SPELLINGS = {"T": "TRUE", "F": "FALSE"}
_SIZE_FUNCTIONS = {
    "length": "seq_along({arg})",
    "nrow": "seq_len(nrow({arg}))",
    "ncol": "seq_len(ncol({arg}))",
    "NROW": "seq_len(NROW({arg}))",
    "NCOL": "seq_len(NCOL({arg}))",
}
_ONE_LITERALS = frozenset({"1", "1L", "1.0"})

_URL_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")
_ROOTED_PATH_RE = re.compile(r"^(~[/\\]|/[^/\s]|\.\.?[/\\]|[A-Za-z]:[/\\])")
_DATA_FILE_RE = re.compile(
    r"\.(csv|tsv|txt|rds|rda|rdata|xlsx|xls|dta|sav|sas7bdat|parquet|feather|json|qs|fst|r)$",
    re.IGNORECASE,
)


class AssignmentOperatorRule:
    id = "assignment-operator"
    description = "Assignments use the preferred operator."
    default_severity = Severity.ERROR

    def check(self, source: SourceFile, config: LintConfig) -> Sequence[Finding]:
        preferred = config.assignment_operator
        discouraged = "=" if preferred == "<-" else "<-"
        return [
            node_finding(
                self,
                source,
                node,
                f"Use '{preferred}' for assignment, not '{discouraged}'",
                f"Replace '{discouraged}' with '{preferred}'.",
            )
            for node, _ in walk_with_parents(source.tree.root)
            if is_binary(node, frozenset({discouraged}))
        ]


def _is_name_position(node: SyntaxNode, parent: SyntaxNode | None) -> bool:
    if parent is None:
        return False
    if parent.type in {"argument", "parameter"} and node.field == "name":
        return True
    if parent.type in {"extract_operator", "namespace_operator"}:
        return True
    if parent.type == "parameters":
        return True
    if is_assignment(parent):
        target, _ = assignment_parts(parent)
        return target is node
    return False


class BooleanLiteralRule:
    id = "boolean-literal"
    description = "Logical constants are spelled TRUE and FALSE."
    default_severity = Severity.ERROR

    def check(self, source: SourceFile, config: LintConfig) -> Sequence[Finding]:
        findings: list[Finding] = []
        for node, parent in walk_with_parents(source.tree.root):
            if node.type != "identifier" or node.text not in _BOOLEAN_SPELLINGS:
                continue
            if _is_name_position(node, parent):
                continue
            full = _BOOLEAN_SPELLINGS[node.text]
            findings.append(
                node_finding(
                    self,
                    source,
                    node,
                    f"Use {full} instead of {node.text}",
                    f"Replace {node.text} with {full}.",
                )
            )
        return findings


class SeqLengthRule:
    id = "seq-length"
    description = "Sequences over a vector use seq_along() or seq_len() rather than 1:length()."
    default_severity = Severity.WARNING

    def check(self, source: SourceFile, config: LintConfig) -> Sequence[Finding]:
        findings: list[Finding] = []
        for node, _ in walk_with_parents(source.tree.root):
            if not is_binary(node, frozenset({":"})):
                continue
            lhs = child_by_field(node, "lhs")
            rhs = child_by_field(node, "rhs")
            if lhs is None or rhs is None or lhs.text not in _ONE_LITERALS:
                continue
            size_function = call_name(rhs)
            if size_function not in _SIZE_FUNCTIONS:
                continue
            inner = rhs.text[rhs.text.find("(") + 1 : -1].strip()
            replacement = _SIZE_FUNCTIONS[size_function].format(arg=inner)
            findings.append(
                node_finding(
                    self,
                    source,
                    node,
                    f"'{node.text}' misbehaves when the input is empty",
                    f"Use {replacement} instead.",
                )
            )
        return findings


class DeniedFunctionRule:
    id = "denied-function"
    description = "Functions on the deny-list are not called."
    default_severity = Severity.WARNING

    def check(self, source: SourceFile, config: LintConfig) -> Sequence[Finding]:
        findings: list[Finding] = []
        for node in calls(source.tree.root):
            name = call_name(node)
            if name is None or name not in config.denied_functions:
                continue
            replacement = config.denied_functions[name]
            findings.append(
                node_finding(
                    self,
                    source,
                    node,
                    f"Avoid {name}(); use {replacement} instead",
                    f"Replace {name}() with {replacement}.",
                    single_line=True,
                )
            )
        return findings


class LineLengthRule:
    id = "line-length"
    description = "Lines stay within the configured length limit."
    default_severity = Severity.INFO

    def check(self, source: SourceFile, config: LintConfig) -> Sequence[Finding]:
        limit = config.line_length_limit
        return [
            Finding(
                rule_id=self.id,
                severity=self.default_severity,
                file=source.path,
                start_line=number,
                end_line=number,
                column=limit,
                message=f"Line is {len(line)} characters long (limit {limit})",
            )
            for number, line in enumerate(source.lines, start=1)
            if len(line) > limit
        ]


def looks_like_path(value: str) -> bool:
    if not value or "\n" in value or "*" in value or "?" in value or _URL_RE.match(value):
        return False
    if _ROOTED_PATH_RE.match(value):
        return True
    return " " not in value and _DATA_FILE_RE.search(value) is not None


def _strings_outside_builders(
    node: SyntaxNode, builders: frozenset[str], inside: bool = False
) -> Iterator[SyntaxNode]:
    if node.type == "call" and call_name(node) in builders:
        inside = True
    if node.type == "string":
        if not inside and node.field != "name":
            yield node
        return
    for child in node.children:
        yield from _strings_outside_builders(child, builders, inside)


class HardcodedPathRule:
    id = "hardcoded-path"
    description = "File paths are built with a path builder such as here::here()."
    default_severity = Severity.WARNING

    def check(self, source: SourceFile, config: LintConfig) -> Sequence[Finding]:
        findings: list[Finding] = []
        for node in _strings_outside_builders(source.tree.root, config.path_builders):
            if not looks_like_path(unquote(node.text)):
                continue
            findings.append(
                node_finding(
                    self,
                    source,
                    node,
                    f"Hard-coded file path {node.text}",
                    "Build the path with here::here() or file.path().",
                )
            )
        return findings

