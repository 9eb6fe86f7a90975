from collections.abc import Iterable

from r_style_lint.core.ports.rule import Rule
from r_style_lint.errors import ConfigError
from r_style_lint.rules.conventions import (
    AssignmentOperatorRule,
    BooleanLiteralRule,
    DeniedFunctionRule,
    HardcodedPathRule,
    LineLengthRule,
    SeqLengthRule,
)
from r_style_lint.rules.documentation import RoxygenDocsRule
from r_style_lint.rules.palette import PaletteDisallowedRule, PaletteImplicitRule
from r_style_lint.rules.pipes import PipeComplexityRule


def build_rules() -> tuple[Rule, ...]:
    """The complete, ordered rule registry."""
    return (
        PipeComplexityRule(),
        PaletteDisallowedRule(),
        PaletteImplicitRule(),
        AssignmentOperatorRule(),
        BooleanLiteralRule(),
        SeqLengthRule(),
        DeniedFunctionRule(),
        LineLengthRule(),
        HardcodedPathRule(),
        RoxygenDocsRule(),
    )


def select_rules(rules: Iterable[Rule], disabled: Iterable[str]) -> tuple[Rule, ...]:
    available = tuple(rules)
    known = {rule.id for rule in available}
    unknown = sorted(set(disabled) - known)
    if unknown:
        raise ConfigError(f"disabled_rules: expected rule ids from {sorted(known)}, received {unknown}")
    skipped = set(disabled)
    return tuple(rule for rule in available if rule.id not in skipped)


__all__ = [
    "AssignmentOperatorRule",
    "BooleanLiteralRule",
    "DeniedFunctionRule",
    "HardcodedPathRule",
    "LineLengthRule",
    "PaletteDisallowedRule",
    "PaletteImplicitRule",
    "PipeComplexityRule",
    "RoxygenDocsRule",
    "SeqLengthRule",
    "build_rules",
    "select_rules",
]
