from pathlib import Path

from tree_sitter import Node
from tree_sitter_language_pack import get_parser

from r_style_lint.errors import ParseError, SourceReadError
from r_style_lint.models import Position, SourceFile, SyntaxNode, SyntaxTree, split_lines

_LANGUAGE = "r"

# Older tree-sitter-r releases use per-operator node types; map them onto the
# current grammar's vocabulary so rules only deal with one set of names.
_NODE_ALIASES = {
    "binary": "binary_operator",
    "left_assignment": "binary_operator",
    "equals_assignment": "binary_operator",
    "right_assignment": "binary_operator",
    "super_assignment": "binary_operator",
    "super_right_assignment": "binary_operator",
    "pipe": "binary_operator",
    "unary": "unary_operator",
    "default_argument": "argument",
    "formal_parameters": "parameters",
    "default_parameter": "parameter",
    "namespace_get": "namespace_operator",
    "namespace_get_internal": "namespace_operator",
    "dollar": "extract_operator",
    "slot": "extract_operator",
}


def _first_error(node: Node) -> Node | None:
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = _first_error(child)
        if found is not None:
            return found
    return node


def _operator_of(node: Node, source_bytes: bytes) -> str | None:
    operator = node.child_by_field_name("operator")
    if operator is None:
        for child in node.children:
            if not child.is_named or child.type == "special":
                operator = child
                break
    if operator is None:
        return None
    return source_bytes[operator.start_byte : operator.end_byte].decode("utf-8", errors="replace")


def _to_model(node: Node, source_bytes: bytes, field: str | None = None) -> SyntaxNode:
    node_type = _NODE_ALIASES.get(node.type, node.type)
    operator = _operator_of(node, source_bytes) if node_type == "binary_operator" else None

    children: list[SyntaxNode] = []
    named_positions = [i for i, child in enumerate(node.children) if child.is_named and child.type != "special"]
    for index, child in enumerate(node.children):
        child_field = node.field_name_for_child(index)
        if child_field is None and node_type == "binary_operator" and named_positions:
            if index == named_positions[0]:
                child_field = "lhs"
            elif index == named_positions[-1]:
                child_field = "rhs"
        children.append(_to_model(child, source_bytes, child_field))

    return SyntaxNode(
        type=node_type,
        text=source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="replace"),
        start=Position(line=node.start_point[0] + 1, column=node.start_point[1]),
        end=Position(line=node.end_point[0] + 1, column=node.end_point[1]),
        named=node.is_named,
        field=field,
        operator=operator,
        children=tuple(children),
    )


def parse(text: str) -> SyntaxTree:
    """Parse R source text into a syntax tree.

    Raises ParseError on the first syntax error; a tree is only returned for
    fully valid source.
    """
    source_bytes = text.encode("utf-8")
    parser = get_parser(_LANGUAGE)
    tree = parser.parse(source_bytes)

    root = tree.root_node
    error_node = _first_error(root)
    if error_node is not None:
        line, column = error_node.start_point[0] + 1, error_node.start_point[1]
        last_line = max(1, len(split_lines(text)))
        if line > last_line:
            line, column = last_line, 0
        raise ParseError(f"Syntax error at line {line}, column {column}", line=line, column=column)

    return SyntaxTree(root=_to_model(root, source_bytes), line_count=max(1, len(split_lines(text))))


def load_source(path: str | Path) -> SourceFile:
    """Read and parse one script from disk."""
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise SourceReadError(f"File not found: {file_path}", str(file_path)) from None
    except UnicodeDecodeError:
        raise SourceReadError(f"File is not valid UTF-8: {file_path}", str(file_path)) from None
    except OSError as exc:
        raise SourceReadError(f"Cannot read {file_path}: {exc.strerror or exc}", str(file_path)) from None

    return SourceFile(path=file_path.as_posix(), text=text, tree=parse(text))
