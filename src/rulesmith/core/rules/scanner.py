"""
Filesystem discovery for rule and policy files.

Walks registry roots recursively and yields the files that look like rule
documents: the right extension, not a test fixture, not hidden.
"""

import os
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from .exceptions import NotADirectoryPathError, PathNotFoundError

# Rule file extensions.
RULE_EXTENSIONS = ("yml", "yaml")

# Rule test targets and fixtures live next to the rules but are not rules.
TEST_SUFFIXES = (".test.yml", ".test.yaml", ".test.fixed.yaml")

PathLike = Union[str, Path]


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


def _matches(
    path: Path,
    include: Sequence[str],
    exclude: Sequence[str],
) -> bool:
    extension = path.suffix[1:]
    if not extension or extension not in include:
        return False
    path_string = str(path)
    return not any(path_string.endswith(suffix) for suffix in exclude)


def find_files(
    root: PathLike,
    include: Optional[Iterable[str]] = None,
    exclude: Optional[Iterable[str]] = None,
) -> List[Path]:
    """
    Find candidate files under ``root``.

    Args:
        root: Directory to walk, or a single file to consider
        include: Extensions to accept, defaults to RULE_EXTENSIONS
        exclude: Path suffixes to reject, defaults to TEST_SUFFIXES

    Returns:
        Matching paths. Order follows the walk and is not guaranteed.
    """
    include_extensions = tuple(
        ext.lstrip(".") for ext in (RULE_EXTENSIONS if include is None else include)
    )
    exclude_suffixes = tuple(TEST_SUFFIXES if exclude is None else exclude)

    root_path = Path(root)

    if root_path.is_file():
        if _matches(root_path, include_extensions, exclude_suffixes):
            return [root_path]
        return []

    results: List[Path] = []

    # Unreadable subdirectories are skipped.
    for dirpath, dirnames, filenames in os.walk(root_path, onerror=lambda e: None):
        dirnames[:] = sorted(d for d in dirnames if not _is_hidden(d))

        for filename in sorted(filenames):
            if _is_hidden(filename):
                continue
            file_path = Path(dirpath) / filename
            if _matches(file_path, include_extensions, exclude_suffixes):
                results.append(file_path)

    return results


def find_files_in(
    roots: Iterable[PathLike],
    include: Optional[Iterable[str]] = None,
    exclude: Optional[Iterable[str]] = None,
) -> List[Path]:
    """Concatenate ``find_files`` over several roots. Overlapping roots yield duplicates."""
    include = None if include is None else list(include)
    exclude = None if exclude is None else list(exclude)

    files: List[Path] = []
    for root in roots:
        files.extend(find_files(root, include, exclude))
    return files


def check_path(path: PathLike) -> Path:
    """
    Make sure ``path`` is an existing directory.

    Raises:
        PathNotFoundError: If the path does not exist
        NotADirectoryPathError: If the path is not a directory
    """
    path = Path(path)
    if not path.exists():
        raise PathNotFoundError(f"Path doesn't exist: {path}")
    if not path.is_dir():
        raise NotADirectoryPathError(f"Path is not a directory: {path}")
    return path
