import json
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from r_style_lint.models import Finding, Severity

PROCESSING_RULE_PREFIX = "processing-"
PARSE_ERROR_RULE = f"{PROCESSING_RULE_PREFIX}parse-error"
IO_ERROR_RULE = f"{PROCESSING_RULE_PREFIX}io-error"


class Report(BaseModel):
    model_config = ConfigDict(frozen=True)

    files_checked: int = 0
    findings: tuple[Finding, ...] = ()

    def by_severity(self, severity: Severity) -> list[Finding]:
        return [finding for finding in self.findings if finding.severity == severity]

    @property
    def errors(self) -> list[Finding]:
        return self.by_severity(Severity.ERROR)

    @property
    def warnings(self) -> list[Finding]:
        return self.by_severity(Severity.WARNING)

    @property
    def infos(self) -> list[Finding]:
        return self.by_severity(Severity.INFO)

    @property
    def processing_errors(self) -> list[Finding]:
        return [finding for finding in self.findings if finding.rule_id.startswith(PROCESSING_RULE_PREFIX)]

    @property
    def has_errors(self) -> bool:
        return any(finding.severity == Severity.ERROR for finding in self.findings)

    @property
    def exit_code(self) -> int:
        return 1 if self.has_errors else 0

    def counts(self) -> dict[str, int]:
        return {severity.value: len(self.by_severity(severity)) for severity in Severity}

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.model_dump(mode="json"), indent=indent, sort_keys=True)

    @classmethod
    def from_json(cls, payload: str) -> "Report":
        return cls.model_validate_json(payload)


def build_report(findings: Iterable[Finding], files_checked: int) -> Report:
    """Order findings by file, line and severity so output never depends on arrival order."""
    return Report(files_checked=files_checked, findings=tuple(sorted(findings, key=Finding.sort_key)))
