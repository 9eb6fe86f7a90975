import asyncio
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from r_style_lint.config import LintConfig
from r_style_lint.core.languages import discover_scripts
from r_style_lint.core.parser import load_source
from r_style_lint.core.ports.rule import Rule
from r_style_lint.core.report import IO_ERROR_RULE, PARSE_ERROR_RULE, Report, build_report
from r_style_lint.errors import ParseError, SourceReadError
from r_style_lint.models import Finding, Severity, SourceFile

logger = logging.getLogger(__name__)

DEFAULT_JOBS = 4


class RuleEngine:
    """Run an injected, fixed set of rules over R scripts."""

    def __init__(self, rules: Iterable[Rule], config: LintConfig | None = None) -> None:
        self._rules: tuple[Rule, ...] = tuple(rules)
        self._config = config or LintConfig()

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    @property
    def config(self) -> LintConfig:
        return self._config

    def check_source(self, source: SourceFile) -> list[Finding]:
        findings: list[Finding] = []
        for rule in self._rules:
            findings.extend(rule.check(source, self._config))
        return findings

    def check_path(self, path: str | Path) -> list[Finding]:
        """Check one file, turning read and parse failures into findings."""
        file_name = Path(path).as_posix()
        try:
            source = load_source(path)
        except SourceReadError as exc:
            logger.warning("Skipping %s: %s", file_name, exc)
            return [
                Finding(
                    rule_id=IO_ERROR_RULE,
                    severity=Severity.ERROR,
                    file=file_name,
                    start_line=1,
                    end_line=1,
                    message=str(exc),
                )
            ]
        except ParseError as exc:
            logger.warning("Skipping %s: %s", file_name, exc)
            return [
                Finding(
                    rule_id=PARSE_ERROR_RULE,
                    severity=Severity.ERROR,
                    file=file_name,
                    start_line=exc.line,
                    end_line=exc.line,
                    column=exc.column,
                    message=str(exc),
                )
            ]
        logger.debug("Checking %s (%d lines)", file_name, source.line_count)
        return self.check_source(source)

    async def run(self, paths: Sequence[str | Path], jobs: int = DEFAULT_JOBS) -> Report:
        files = discover_scripts(paths)
        logger.info("Checking %d file(s) with %d rule(s)", len(files), len(self._rules))
        semaphore = asyncio.Semaphore(max(1, jobs))

        async def _check(path: Path) -> list[Finding]:
            async with semaphore:
                return await asyncio.to_thread(self.check_path, path)

        results = await asyncio.gather(*(_check(path) for path in files))
        report = build_report((finding for findings in results for finding in findings), len(files))
        logger.info("Found %s", ", ".join(f"{count} {name}" for name, count in report.counts().items()))
        return report


def run_check(engine: RuleEngine, paths: Sequence[str | Path], jobs: int = DEFAULT_JOBS) -> Report:
    return asyncio.run(engine.run(paths, jobs))
