from collections.abc import Sequence

from r_style_lint.config import LintConfig
from r_style_lint.core.syntax import (
    call_arguments,
    call_name,
    child_by_field,
    is_assignment,
    is_pipe,
    named_children,
    walk_with_parents,
)
from r_style_lint.models import Finding, Pipeline, PipelineStep, Severity, SourceFile, SyntaxNode

CONDITIONAL_CALLS = frozenset({"ifelse", "if_else", "case_when", "fcase", "fifelse", "switch"})


def _is_chain_root(node: SyntaxNode, parent: SyntaxNode | None) -> bool:
    if not is_pipe(node):
        return False
    return parent is None or not is_pipe(parent) or child_by_field(parent, "lhs") is not node


def _unnamed_weight(node: SyntaxNode, call_depth: int) -> int:
    weight = 0
    depth = call_depth
    if node.type == "call":
        depth = call_depth + 1
        if call_name(node) in CONDITIONAL_CALLS or depth >= 2:
            weight += 1
    elif node.type == "if_statement" or is_assignment(node):
        weight += 1
    for child in node.children:
        weight += _unnamed_weight(child, depth)
    return weight


def _nested_calls(node: SyntaxNode, call_depth: int) -> int:
    count = 0
    depth = call_depth
    if node.type == "call":
        depth = call_depth + 1
        if depth >= 2:
            count += 1
    for child in node.children:
        count += _nested_calls(child, depth)
    return count


def count_operations(operand: SyntaxNode) -> int:
    """Number of distinct operations one pipeline step performs.

    Named arguments count once each however deep their value goes; unnamed
    arguments contribute their assignments, conditionals and calls nested two
    or more levels below the step call.
    """
    if operand.type == "braced_expression":
        return max(1, len(named_children(operand)))
    if operand.type != "call":
        return 1
    operations = 0
    for argument in call_arguments(operand):
        if argument.name is not None:
            operations += 1
        elif argument.value is not None:
            operations += _unnamed_weight(argument.value, 0)
    return max(1, operations)


def _operation_name(operand: SyntaxNode) -> str:
    if operand.type == "call":
        name = call_name(operand)
        if name is not None:
            return name
        function = child_by_field(operand, "function")
        return function.text if function is not None else operand.type
    if operand.type == "identifier":
        return operand.text
    return operand.type


def build_step(operand: SyntaxNode) -> PipelineStep:
    arguments: tuple[str, ...] = ()
    nested = 0
    if operand.type == "call":
        arguments = tuple(argument.node.text for argument in call_arguments(operand))
        nested = sum(_nested_calls(argument.node, 0) for argument in call_arguments(operand))
    return PipelineStep(
        operation=_operation_name(operand),
        arguments=arguments,
        nested_calls=nested,
        operations=count_operations(operand),
        start_line=operand.start.line,
        end_line=operand.end.line,
    )


def _flatten(root: SyntaxNode) -> Pipeline:
    operands: list[SyntaxNode] = []
    current = root
    while is_pipe(current):
        rhs = child_by_field(current, "rhs")
        if rhs is not None:
            operands.append(rhs)
        lhs = child_by_field(current, "lhs")
        if lhs is None:
            break
        current = lhs
    operands.reverse()
    return Pipeline(
        operator=root.operator or "",
        source=current.text if current is not root else "",
        steps=tuple(build_step(operand) for operand in operands),
    )


def extract_pipelines(root: SyntaxNode) -> list[Pipeline]:
    """All maximal pipe chains in source order, nested chains included."""
    return [_flatten(node) for node, parent in walk_with_parents(root) if _is_chain_root(node, parent)]


class PipeComplexityRule:
    id = "pipe-complexity"
    description = "Each pipeline step performs a bounded number of operations."
    default_severity = Severity.WARNING

    def check(self, source: SourceFile, config: LintConfig) -> Sequence[Finding]:
        threshold = config.pipe_complexity_threshold
        findings: list[Finding] = []
        for pipeline in extract_pipelines(source.tree.root):
            for step in pipeline.steps:
                if step.operations <= threshold:
                    continue
                findings.append(
                    Finding(
                        rule_id=self.id,
                        severity=self.default_severity,
                        file=source.path,
                        start_line=step.start_line,
                        end_line=step.end_line,
                        message=(
                            f"{step.operation}() step performs {step.operations} operations (limit {threshold})"
                        ),
                        suggestion="Split the step into several simpler pipeline steps.",
                    )
                )
        return findings
