"""Unit tests for the rule engine and its concurrent driver."""

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest
from pydantic import ValidationError

from r_style_lint.config import LintConfig
from r_style_lint.core.engine import RuleEngine, run_check
from r_style_lint.core.report import IO_ERROR_RULE, PARSE_ERROR_RULE
from r_style_lint.models import Finding, Severity, SourceFile

CLEAN = "x <- 1\ny <- x + 1\n"

MESSY = """\
setwd("~/analysis")
total = sum(values, na.rm = T)
for (i in 1:length(values)) print(i)
"""


class CountingRule:
    """Synthetic rule that reports every top-level statement."""

    id = "count-statements"
    description = "Reports each statement."
    default_severity = Severity.INFO

    def check(self, source: SourceFile, config: LintConfig) -> Sequence[Finding]:
        return [
            Finding(
                rule_id=self.id,
                severity=self.default_severity,
                file=source.path,
                start_line=child.start.line,
                end_line=child.end.line,
                message=f"statement {child.text}",
            )
            for child in source.tree.root.children
            if child.named and child.type != "comment"
        ]


class TestRuleEngine:
    def test_injected_rule_is_the_only_rule(self, make_source: Callable[..., SourceFile]) -> None:
        engine = RuleEngine([CountingRule()])

        findings = engine.check_source(make_source(CLEAN))

        assert [finding.rule_id for finding in findings] == ["count-statements", "count-statements"]
        assert [finding.start_line for finding in findings] == [1, 2]

    def test_no_rules_no_findings(self, make_source: Callable[..., SourceFile]) -> None:
        assert RuleEngine([]).check_source(make_source(MESSY)) == []

    def test_default_config_when_none_given(self) -> None:
        assert RuleEngine([]).config == LintConfig()

    def test_check_path_reports_parse_error(self, engine: RuleEngine, write_script: Callable[[str, str], Path]) -> None:
        path = write_script("broken.R", "x <- 1\ny <- (2 +\n")

        findings = engine.check_path(path)

        assert len(findings) == 1
        assert findings[0].rule_id == PARSE_ERROR_RULE
        assert findings[0].severity == Severity.ERROR
        assert findings[0].file == path.as_posix()

    def test_check_path_reports_missing_file(self, engine: RuleEngine, tmp_path: Path) -> None:
        findings = engine.check_path(tmp_path / "missing.R")

        assert len(findings) == 1
        assert findings[0].rule_id == IO_ERROR_RULE
        assert findings[0].start_line == 1

    def test_source_file_is_immutable(self, make_source: Callable[..., SourceFile]) -> None:
        source = make_source(CLEAN)
        with pytest.raises(ValidationError):
            source.text = "changed"  # type: ignore[misc]


class TestRunCheck:
    def test_run_is_idempotent(self, engine: RuleEngine, write_script: Callable[[str, str], Path]) -> None:
        paths = [write_script(f"script_{i}.R", MESSY) for i in range(5)]

        first = run_check(engine, paths, jobs=3)
        second = run_check(engine, paths, jobs=1)

        assert first.to_json() == second.to_json()

    def test_input_order_does_not_change_report(
        self, engine: RuleEngine, write_script: Callable[[str, str], Path]
    ) -> None:
        paths = [write_script("a.R", MESSY), write_script("b.R", CLEAN), write_script("c.R", MESSY)]

        forward = run_check(engine, paths)
        backward = run_check(engine, list(reversed(paths)))

        assert forward == backward

    def test_bad_file_does_not_stop_the_run(
        self, engine: RuleEngine, write_script: Callable[[str, str], Path], tmp_path: Path
    ) -> None:
        good = write_script("good.R", MESSY)
        broken = write_script("broken.R", "f <- function( {\n")
        missing = tmp_path / "gone.R"

        report = run_check(engine, [good, broken, missing])

        assert report.files_checked == 3
        assert {finding.rule_id for finding in report.processing_errors} == {PARSE_ERROR_RULE, IO_ERROR_RULE}
        assert any(finding.file == good.as_posix() for finding in report.findings if finding.rule_id == "seq-length")

    def test_directory_is_expanded(self, engine: RuleEngine, write_script: Callable[[str, str], Path]) -> None:
        write_script("R/one.R", CLEAN)
        write_script("R/two.r", CLEAN)
        write_script("R/notes.txt", "not R")

        report = run_check(engine, [write_script("R/three.R", CLEAN).parent])

        assert report.files_checked == 3
        assert report.findings == ()

    def test_findings_are_sorted(self, engine: RuleEngine, write_script: Callable[[str, str], Path]) -> None:
        report = run_check(engine, [write_script("z.R", MESSY), write_script("a.R", MESSY)])

        keys = [finding.sort_key() for finding in report.findings]
        assert keys == sorted(keys)
        assert report.findings[0].file.endswith("a.R")
