"""
Source Discovery

Finds symbolic-expression source files on disk and loads them as
(document_id, source_text) pairs for the search orchestrator.
"""

from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from loguru import logger


DEFAULT_EXTENSIONS = [".el", ".lisp", ".lsp", ".cl", ".scm", ".ss", ".rkt", ".clj"]

# Default directories to exclude (VCS metadata, package caches, build output)
DEFAULT_EXCLUDE_DIRS = {
    ".git",
    ".hg",
    ".svn",
    "__pycache__",
    "node_modules",
    "compiled",
    ".cask",
    "elpa",
    "eln-cache",
    "build",
    "out",
}

# Compiled artifact suffix -> candidate source suffixes
ARTIFACT_SOURCES = {
    ".elc": [".el"],
    ".eln": [".el"],
    ".fasl": [".lisp", ".lsp", ".cl"],
    ".zo": [".rkt", ".scm", ".ss"],
}


def _should_exclude(file_path: Path, exclude_dirs: set) -> bool:
    """Check if any path component is an excluded directory"""
    return any(part in exclude_dirs for part in file_path.parts[:-1])


def iter_source_files(
    root: Union[str, Path],
    extensions: Optional[Sequence[str]] = None,
    exclude_dirs: Optional[set] = None,
) -> Iterator[Path]:
    """
    Walk root for source files.

    A root that is itself a file is yielded as-is when its extension
    matches (or maps back to a source via source_for_artifact).

    Args:
        root: Directory or file
        extensions: File extensions to include (default: DEFAULT_EXTENSIONS)
        exclude_dirs: Directory names to skip (default: DEFAULT_EXCLUDE_DIRS)

    Yields:
        Source file paths, sorted within a directory walk
    """
    if extensions is None:
        extensions = DEFAULT_EXTENSIONS
    if exclude_dirs is None:
        exclude_dirs = DEFAULT_EXCLUDE_DIRS

    root = Path(root)
    if root.is_file():
        if root.suffix in extensions:
            yield root
        else:
            source = source_for_artifact(root)
            if source is not None:
                yield source
        return

    if not root.is_dir():
        logger.warning(f"Path not found: {root}")
        return

    for file_path in sorted(root.rglob("*")):
        if not file_path.is_file() or file_path.suffix not in extensions:
            continue
        if _should_exclude(file_path.relative_to(root), exclude_dirs):
            continue
        yield file_path


def source_for_artifact(artifact: Union[str, Path]) -> Optional[Path]:
    """
    Map a compiled artifact back to the source file it was built from.

    Looks for a sibling with the same stem and a source suffix, e.g.
    foo.elc -> foo.el, foo.fasl -> foo.lisp.

    Returns:
        Path of the existing source file, or None
    """
    artifact = Path(artifact)
    for suffix in ARTIFACT_SOURCES.get(artifact.suffix, []):
        candidate = artifact.with_suffix(suffix)
        if candidate.is_file():
            return candidate
    return None


def load_documents(paths: Iterable[Union[str, Path]]) -> Iterator[Tuple[str, str]]:
    """
    Read files as (document_id, text) pairs.

    Files are decoded as UTF-8 with replacement. Unreadable files are
    logged and skipped.
    """
    for path in paths:
        path = Path(path)
        try:
            with open(path, "rb") as f:
                source = f.read()
        except OSError as e:
            logger.warning(f"Failed to read {path}: {e}")
            continue
        yield str(path), source.decode("utf-8", errors="replace")


def discover_documents(
    roots: Iterable[Union[str, Path]],
    extensions: Optional[Sequence[str]] = None,
    exclude_dirs: Optional[set] = None,
) -> List[Tuple[str, str]]:
    """
    Find and load every source document under the given roots.

    A file reachable from more than one root is loaded once.
    """
    seen = set()
    paths: List[Path] = []
    for root in roots:
        for path in iter_source_files(root, extensions, exclude_dirs):
            key = path.resolve()
            if key in seen:
                continue
            seen.add(key)
            paths.append(path)

    logger.debug(f"Discovered {len(paths)} source file(s)")
    return list(load_documents(paths))
