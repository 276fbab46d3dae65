"""Bounded directory traversal used for repository discovery."""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

import pathspec

logger = logging.getLogger(__name__)

IGNORE_FILES = (".gitignore", ".ignore")


class EntryKind(str, Enum):
    """Kind of filesystem entry produced by the walker."""

    DIR = "dir"
    FILE = "file"
    SYMLINK = "symlink"


@dataclass
class Entry:
    """A single filesystem entry found during a walk."""

    path: Path
    kind: EntryKind
    depth: int


@dataclass
class _IgnoreRules:
    """Compiled ignore patterns and the directory they are relative to."""

    base: Path
    spec: pathspec.PathSpec

    def matches(self, path: Path, is_dir: bool) -> bool:
        try:
            rel = path.relative_to(self.base).as_posix()
        except ValueError:
            return False
        if is_dir:
            rel += "/"
        return self.spec.match_file(rel)


def _load_ignore_rules(directory: Path) -> Optional[_IgnoreRules]:
    """Compile ignore files declared in a directory, if any."""
    patterns: List[str] = []
    candidates = [directory / name for name in IGNORE_FILES]
    candidates.append(directory / ".git" / "info" / "exclude")

    for candidate in candidates:
        if not candidate.is_file():
            continue
        try:
            patterns.extend(candidate.read_text(encoding="utf-8").splitlines())
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Skipping unreadable ignore file {candidate}: {e}")

    if not patterns:
        return None
    return _IgnoreRules(directory, pathspec.GitIgnoreSpec.from_lines(patterns))


def _is_ignored(path: Path, is_dir: bool, rules: Tuple[_IgnoreRules, ...]) -> bool:
    return any(rule.matches(path, is_dir) for rule in rules)


def walk(
    root: Path,
    max_depth: Optional[int] = None,
    follow_symlinks: bool = False,
    respect_ignore: bool = True,
    include_hidden: bool = False,
) -> Iterator[Entry]:
    """Walk a directory tree, yielding each directory's children before descending.

    The root itself is yielded at depth 0. Hidden entries are skipped unless
    include_hidden is set; with respect_ignore, .gitignore/.ignore files and
    .git/info/exclude apply to everything below the directory declaring them.

    Args:
        root: Directory to start from
        max_depth: Deepest level to yield (None for unbounded)
        follow_symlinks: Descend into symlinked directories
        respect_ignore: Honour ignore files
        include_hidden: Yield dot-entries

    Yields:
        Entry for every visited path
    """
    root = Path(root)
    yield Entry(root, EntryKind.DIR, 0)

    # (directory, depth, inherited ignore rules, real paths on the way down)
    stack = [(root, 0, (), frozenset())]

    while stack:
        directory, depth, rules, ancestors = stack.pop()
        if max_depth is not None and depth >= max_depth:
            continue

        if respect_ignore:
            local = _load_ignore_rules(directory)
            if local is not None:
                rules = rules + (local,)

        if follow_symlinks:
            ancestors = ancestors | {os.path.realpath(directory)}

        try:
            with os.scandir(directory) as it:
                children = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.debug(f"Cannot read directory {directory}: {e}")
            continue

        subdirs = []
        for child in children:
            if not include_hidden and child.name.startswith("."):
                continue

            path = Path(child.path)
            try:
                is_link = child.is_symlink()
                is_dir = child.is_dir(follow_symlinks=follow_symlinks)
            except OSError as e:
                logger.debug(f"Cannot stat {path}: {e}")
                continue

            if respect_ignore and _is_ignored(path, is_dir, rules):
                continue

            if is_link and not follow_symlinks:
                yield Entry(path, EntryKind.SYMLINK, depth + 1)
                continue

            if is_dir:
                # Guard against symlink loops
                if follow_symlinks and os.path.realpath(path) in ancestors:
                    continue
                yield Entry(path, EntryKind.DIR, depth + 1)
                subdirs.append(path)
            else:
                yield Entry(path, EntryKind.FILE, depth + 1)

        for subdir in reversed(subdirs):
            stack.append((subdir, depth + 1, rules, ancestors))


def is_repository_root(path: Path) -> bool:
    """Cheap check for a .git directory or gitfile directly inside path."""
    return (Path(path) / ".git").exists()
