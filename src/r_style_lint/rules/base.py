from r_style_lint.core.ports.rule import Rule
from r_style_lint.models import Finding, SourceFile, SyntaxNode


def node_finding(
    rule: Rule,
    source: SourceFile,
    node: SyntaxNode,
    message: str,
    suggestion: str | None = None,
    single_line: bool = False,
) -> Finding:
    """Build a finding spanning *node* with the rule's default severity."""
    return Finding(
        rule_id=rule.id,
        severity=rule.default_severity,
        file=source.path,
        start_line=node.start.line,
        end_line=node.start.line if single_line else node.end.line,
        column=node.start.column,
        message=message,
        suggestion=suggestion,
    )
