"""Read-only helpers over the normalised R syntax tree.

Every rule goes through these helpers instead of poking at node types
directly, so grammar quirks are handled in one place.
"""

from collections.abc import Iterator
from dataclasses import dataclass

from r_style_lint.models import SyntaxNode

PIPE_OPERATORS = frozenset({"|>", "%>%"})
ASSIGNMENT_OPERATORS = frozenset({"<-", "<<-", "=", "->", "->>"})
_RIGHT_ASSIGNMENTS = frozenset({"->", "->>"})


@dataclass(frozen=True)
class CallArgument:
    name: str | None
    value: SyntaxNode | None
    node: SyntaxNode


def walk(node: SyntaxNode) -> Iterator[SyntaxNode]:
    """Yield *node* and all of its descendants in pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def walk_with_parents(
    node: SyntaxNode, parent: SyntaxNode | None = None
) -> Iterator[tuple[SyntaxNode, SyntaxNode | None]]:
    stack: list[tuple[SyntaxNode, SyntaxNode | None]] = [(node, parent)]
    while stack:
        current, current_parent = stack.pop()
        yield current, current_parent
        stack.extend((child, current) for child in reversed(current.children))


def child_by_field(node: SyntaxNode, field: str) -> SyntaxNode | None:
    for child in node.children:
        if child.field == field:
            return child
    return None


def named_children(node: SyntaxNode) -> list[SyntaxNode]:
    """Children that are real expressions (no punctuation, no comments)."""
    return [child for child in node.children if _is_expression(child)]


def _is_expression(node: SyntaxNode) -> bool:
    # newer R grammars expose separators as named `comma` nodes
    return node.named and node.type not in {"comment", "comma"}


def is_binary(node: SyntaxNode, operators: frozenset[str]) -> bool:
    return node.type == "binary_operator" and node.operator in operators


def is_pipe(node: SyntaxNode) -> bool:
    return is_binary(node, PIPE_OPERATORS)


def is_assignment(node: SyntaxNode) -> bool:
    return is_binary(node, ASSIGNMENT_OPERATORS)


def assignment_parts(node: SyntaxNode) -> tuple[SyntaxNode | None, SyntaxNode | None]:
    """Return (target, value) of an assignment, honouring right assignment."""
    lhs = child_by_field(node, "lhs")
    rhs = child_by_field(node, "rhs")
    if node.operator in _RIGHT_ASSIGNMENTS:
        return rhs, lhs
    return lhs, rhs


def call_name(node: SyntaxNode) -> str | None:
    """Bare function name of a call, without any ``pkg::`` prefix."""
    if node.type != "call":
        return None
    function = child_by_field(node, "function")
    if function is None:
        return None
    if function.type == "namespace_operator":
        function = child_by_field(function, "rhs")
        if function is None:
            return None
    if function.type in {"identifier", "string"}:
        return unquote(function.text) if function.type == "string" else function.text
    return None


def call_arguments(node: SyntaxNode) -> list[CallArgument]:
    arguments = child_by_field(node, "arguments")
    if arguments is None:
        return []
    result: list[CallArgument] = []
    for child in named_children(arguments):
        if child.type == "argument":
            name_node = child_by_field(child, "name")
            value_node = child_by_field(child, "value")
            if name_node is None and value_node is None:
                inner = named_children(child)
                value_node = inner[-1] if inner else None
            name = None if name_node is None else unquote(name_node.text)
            result.append(CallArgument(name=name, value=value_node, node=child))
        else:
            result.append(CallArgument(name=None, value=child, node=child))
    return result


def argument_value(node: SyntaxNode, name: str) -> SyntaxNode | None:
    for argument in call_arguments(node):
        if argument.name == name:
            return argument.value
    return None


def calls(node: SyntaxNode) -> Iterator[SyntaxNode]:
    return (candidate for candidate in walk(node) if candidate.type == "call")


def is_string(node: SyntaxNode | None) -> bool:
    return node is not None and node.type == "string"


def unquote(text: str) -> str:
    """Strip matching quotes (including raw-string syntax) from a string literal."""
    if len(text) >= 2 and text[0] in "'\"`" and text[-1] == text[0]:
        return text[1:-1]
    if len(text) >= 3 and text[0] in "rR" and text[1] in "'\"":
        inner = text[2:-1]
        dashes = len(inner) - len(inner.lstrip("-"))
        return inner[dashes + 1 : len(inner) - dashes - 1]
    return text


def parameter_names(function: SyntaxNode) -> list[str]:
    parameters = child_by_field(function, "parameters")
    if parameters is None:
        return []
    names: list[str] = []
    for child in named_children(parameters):
        if child.type == "parameter":
            name_node = child_by_field(child, "name")
            if name_node is None:
                inner = named_children(child)
                name_node = inner[0] if inner else None
            if name_node is not None:
                names.append(name_node.text)
        elif child.type in {"identifier", "dots"}:
            names.append(child.text)
    return names


def top_level_statements(root: SyntaxNode) -> list[SyntaxNode]:
    return named_children(root)
