from collections.abc import Sequence
from typing import Protocol

from r_style_lint.config import LintConfig
from r_style_lint.models import Finding, Severity, SourceFile


class Rule(Protocol):
    """A stateless check over one parsed source file.

    Rules must not keep state between calls and must not mutate the source
    file; the engine may run them in any order and on any thread.
    """

    id: str
    description: str
    default_severity: Severity

    def check(self, source: SourceFile, config: LintConfig) -> Sequence[Finding]: ...
