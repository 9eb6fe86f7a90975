from collections.abc import Iterable
from pathlib import Path

_EXTENSION_LANGUAGE_MAP = {
    ".r": "r",
}

_SKIPPED_DIRECTORIES = frozenset({"renv", "packrat", "node_modules", "__pycache__"})


def is_r_script(file_path: Path) -> bool:
    return file_path.suffix.lower() in _EXTENSION_LANGUAGE_MAP


def _is_skipped_dir(directory: Path, root: Path) -> bool:
    for part in directory.relative_to(root).parts:
        if part.startswith(".") or part in _SKIPPED_DIRECTORIES:
            return True
    return False


def discover_scripts(paths: Iterable[str | Path]) -> list[Path]:
    """Expand files and directories into a sorted, de-duplicated list of R scripts.

    Explicit file paths are kept even when their extension is not recognised,
    and missing paths are kept too so the caller can report them. Directories
    are walked recursively, skipping hidden folders and package libraries.
    """
    found: set[Path] = set()
    for raw in paths:
        path = Path(raw)
        if not path.is_dir():
            found.add(path)
            continue
        for candidate in path.rglob("*"):
            if candidate.is_file() and is_r_script(candidate) and not _is_skipped_dir(candidate.parent, path):
                found.add(candidate)
    return sorted(found, key=lambda p: p.as_posix())
