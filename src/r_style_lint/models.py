from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Sort rank, most severe first."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.ERROR: 0, Severity.WARNING: 1, Severity.INFO: 2}


def split_lines(text: str) -> list[str]:
    """Split on newlines only, as R and tree-sitter do; a trailing CR is dropped."""
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    line: int
    column: int


class SyntaxNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    text: str
    start: Position
    end: Position
    named: bool = True
    field: str | None = None
    operator: str | None = None
    children: tuple["SyntaxNode", ...] = ()


SyntaxNode.model_rebuild()  # necessary for recursive types


class SyntaxTree(BaseModel):
    model_config = ConfigDict(frozen=True)

    root: SyntaxNode
    line_count: int


class SourceFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    text: str
    tree: SyntaxTree

    @property
    def lines(self) -> list[str]:
        return split_lines(self.text)

    @property
    def line_count(self) -> int:
        return max(1, len(self.lines))


class PipelineStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    operation: str
    arguments: tuple[str, ...] = ()
    nested_calls: int = 0
    operations: int = 1
    start_line: int
    end_line: int


class Pipeline(BaseModel):
    model_config = ConfigDict(frozen=True)

    operator: str
    source: str
    steps: tuple[PipelineStep, ...]


class Finding(BaseModel):
    model_config = ConfigDict(frozen=True)

    rule_id: str
    severity: Severity
    file: str
    start_line: int = Field(ge=1)
    end_line: int = Field(ge=1)
    column: int = Field(default=0, ge=0)
    message: str
    suggestion: str | None = None

    @model_validator(mode="after")
    def _check_line_range(self) -> "Finding":
        if self.end_line < self.start_line:
            raise ValueError(f"end_line {self.end_line} precedes start_line {self.start_line}")
        return self

    def sort_key(self) -> tuple[str, int, int, int, str, str]:
        return (self.file, self.start_line, self.severity.rank, self.column, self.rule_id, self.message)
