"""Roxygen documentation checks for top-level function definitions."""

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from r_style_lint.config import LintConfig
from r_style_lint.core.parser import parse
from r_style_lint.core.syntax import assignment_parts, is_assignment, parameter_names, top_level_statements, unquote
from r_style_lint.errors import ParseError
from r_style_lint.models import Finding, Severity, SourceFile, SyntaxNode
from r_style_lint.rules.base import node_finding

_ROXYGEN_RE = re.compile(r"^\s*#'")
_TAG_RE = re.compile(r"^@(?P<tag>\w+)\s*(?P<rest>.*)$")
_RD_WRAPPER_RE = re.compile(r"\\(dontrun|donttest|dontshow|testonly)\s*\{")


@dataclass
class RoxygenBlock:
    title: str | None = None
    params: set[str] = field(default_factory=set)
    has_return: bool = False
    examples: list[str] | None = None


@dataclass(frozen=True)
class FunctionDefinition:
    name: str
    parameters: tuple[str, ...]
    node: SyntaxNode


def find_functions(root: SyntaxNode) -> list[FunctionDefinition]:
    """Functions bound by assignment at the top level of a script."""
    functions: list[FunctionDefinition] = []
    for statement in top_level_statements(root):
        if not is_assignment(statement):
            continue
        target, value = assignment_parts(statement)
        if target is None or value is None or value.type != "function_definition":
            continue
        if target.type not in {"identifier", "string"}:
            continue
        functions.append(
            FunctionDefinition(name=unquote(target.text), parameters=tuple(parameter_names(value)), node=statement)
        )
    return functions


def block_above(lines: Sequence[str], line: int) -> list[str] | None:
    """Roxygen lines directly above 1-based *line*, prefix stripped, or None."""
    collected: list[str] = []
    index = line - 2
    while index >= 0 and _ROXYGEN_RE.match(lines[index]):
        content = _ROXYGEN_RE.sub("", lines[index], count=1)
        collected.append(content[1:] if content.startswith(" ") else content)
        index -= 1
    if not collected:
        return None
    collected.reverse()
    return collected


def parse_block(lines: Sequence[str]) -> RoxygenBlock:
    block = RoxygenBlock()
    current: str | None = None
    for raw in lines:
        text = raw.strip()
        match = _TAG_RE.match(text)
        if match is not None:
            current = match.group("tag")
            rest = match.group("rest").strip()
            if current == "title":
                block.title = rest or block.title
            elif current == "param" and rest:
                block.params.update(name.strip() for name in rest.split()[0].split(","))
            elif current in {"return", "returns"}:
                block.has_return = True
            elif current in {"examples", "examplesIf"}:
                block.examples = [] if current == "examplesIf" or not rest else [rest]
            continue
        if current in {"examples", "examplesIf"} and block.examples is not None:
            block.examples.append(raw)
        elif current is None and text and block.title is None:
            block.title = text
    return block


def example_problem(examples: Sequence[str]) -> str | None:
    code = "\n".join(examples).strip()
    if not code:
        return "@examples block is empty"
    try:
        parse(_RD_WRAPPER_RE.sub("{", code))
    except ParseError as exc:
        return f"@examples block does not parse ({exc})"
    return None


def missing_documentation(function: FunctionDefinition, block: RoxygenBlock, required: frozenset[str]) -> list[str]:
    """Describe each required piece of documentation the block lacks."""
    missing: list[str] = []
    if "title" in required and not block.title:
        missing.append("a one-line summary")
    if "param" in required:
        missing.extend(f"@param {name}" for name in function.parameters if name not in block.params)
    if "return" in required and not block.has_return:
        missing.append("@return")
    if "examples" in required:
        if block.examples is None:
            missing.append("@examples")
        else:
            problem = example_problem(block.examples)
            if problem is not None:
                missing.append(problem)
    return missing


class RoxygenDocsRule:
    id = "roxygen-docs"
    description = "Top-level functions carry a roxygen block with summary, params, return value and examples."
    default_severity = Severity.ERROR

    def check(self, source: SourceFile, config: LintConfig) -> Sequence[Finding]:
        required = frozenset(config.doc_required_tags)
        if not required:
            return []
        lines = source.lines
        findings: list[Finding] = []
        for function in find_functions(source.tree.root):
            raw_block = block_above(lines, function.node.start.line)
            if raw_block is None:
                findings.append(
                    node_finding(
                        self,
                        source,
                        function.node,
                        f"{function.name}() has no roxygen documentation block",
                        "Add a #' block with a summary, @param, @return and @examples.",
                        single_line=True,
                    )
                )
                continue
            for item in missing_documentation(function, parse_block(raw_block), required):
                if item.startswith("@examples block"):
                    message = f"{function.name}(): {item}"
                else:
                    message = f"{function.name}() is missing {item}"
                findings.append(node_finding(self, source, function.node, message, single_line=True))
        return findings
