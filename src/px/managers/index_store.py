"""Persistent project index: load, save, resync and access tracking."""

import logging
import os
import tempfile
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from px.core.frecency import sort_by_frecency
from px.core.git import GitStatusProvider
from px.core.paths import get_cache_path
from px.core.probe import probe_repository
from px.core.walker import EntryKind, is_repository_root, walk
from px.errors import IndexIOError
from px.models import Project, ProjectIndex, utc_now

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 3
DEFAULT_THREADS = 4


class IndexStore:
    """Owns the project index and its JSON cache file.

    Every mutation is written through to disk immediately. There is no
    cross-process lock: two concurrent px processes race on the cache file
    and the last writer wins.
    """

    def __init__(
        self,
        cache_path: Optional[Path] = None,
        provider: Optional[GitStatusProvider] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        threads: int = DEFAULT_THREADS,
    ):
        """Initialize the store with an empty in-memory index.

        Args:
            cache_path: Index file location (default: <cache dir>/px/projects.json)
            provider: Git status provider used when probing repositories
            max_depth: How deep below each scan root to look for repositories
            threads: Worker threads used to probe repositories during sync
        """
        self.cache_path = Path(cache_path) if cache_path else get_cache_path()
        self.provider = provider or GitStatusProvider()
        self.max_depth = max_depth
        self.threads = max(1, threads)
        self.index = ProjectIndex()

    @classmethod
    def open(cls, cache_path: Optional[Path] = None, **kwargs) -> "IndexStore":
        """Create a store and load the persisted index."""
        store = cls(cache_path, **kwargs)
        store.load()
        return store

    @property
    def projects(self) -> Dict[str, Project]:
        return self.index.projects

    def __len__(self) -> int:
        return len(self.index.projects)

    def get(self, path) -> Optional[Project]:
        """Look up a project by its absolute path."""
        return self.index.projects.get(str(path))

    def load(self) -> ProjectIndex:
        """Load the index from the cache file.

        A missing cache file yields a fresh empty index.

        Raises:
            IndexIOError: If the file exists but cannot be read
            IndexFormatError: If the file is not a valid index
        """
        if not self.cache_path.exists():
            logger.debug(f"No index at {self.cache_path}, starting empty")
            self.index = ProjectIndex()
            return self.index

        try:
            data = self.cache_path.read_text(encoding="utf-8")
        except OSError as e:
            raise IndexIOError(
                f"Failed to read cache file: {self.cache_path}: {e}"
            ) from e

        self.index = ProjectIndex.from_json(data)
        return self.index

    def save(self) -> None:
        """Persist the index, creating the cache directory if needed.

        The file is replaced atomically so readers never see a partial write.

        Raises:
            IndexIOError: If the directory or file cannot be written
        """
        parent = self.cache_path.parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IndexIOError(f"Failed to create cache directory: {parent}: {e}") from e

        payload = self.index.to_json()
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=parent,
                prefix=f".{self.cache_path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_path = tmp.name
                tmp.write(payload)
            os.replace(tmp_path, self.cache_path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise IndexIOError(
                f"Failed to write cache file: {self.cache_path}: {e}"
            ) from e

    def discover(self, scan_dirs: Iterable[Path]) -> List[Path]:
        """Find repository roots below the scan directories.

        Missing scan directories are skipped with a warning.
        """
        candidates: List[Path] = []
        for scan_dir in scan_dirs:
            root = Path(os.path.abspath(Path(scan_dir).expanduser()))
            if not root.exists():
                logger.warning(f"Scan directory does not exist: {root}")
                continue

            for entry in walk(
                root,
                max_depth=self.max_depth,
                follow_symlinks=False,
                respect_ignore=True,
            ):
                if entry.kind == EntryKind.DIR and is_repository_root(entry.path):
                    candidates.append(entry.path)

        # Overlapping scan roots reach the same repository more than once
        return list(dict.fromkeys(candidates))

    def _probe(self, path: Path) -> Optional[Project]:
        try:
            return probe_repository(path, self.provider)
        except Exception as e:
            # One bad repository must not abort the whole sync
            logger.warning(f"Failed to index {path}: {e}")
            return None

    def sync(self, scan_dirs: Iterable[Path]) -> int:
        """Rebuild the index from the scan directories.

        Freshly probed projects replace the old map wholesale. Access history
        (access_count, last_accessed, frecency_score) is carried over for
        paths that were already indexed; paths no longer found are dropped.

        Returns:
            Number of projects in the new index

        Raises:
            IndexIOError: If the new index cannot be saved
        """
        candidates = self.discover(scan_dirs)
        logger.info(f"Probing {len(candidates)} repositories...")

        with ThreadPoolExecutor(max_workers=self.threads) as executor:
            probed = list(executor.map(self._probe, candidates))

        previous = self.index.projects
        new_projects: Dict[str, Project] = {}
        for project in probed:
            if project is None:
                continue
            existing = previous.get(project.key)
            if existing is not None:
                project.carry_forward(existing)
            new_projects[project.key] = project

        self.index.projects = new_projects
        self.index.last_sync = utc_now()
        self.save()

        return len(new_projects)

    def record_access(self, path) -> None:
        """Record that a project was opened and persist immediately.

        Unknown paths are ignored; they may have been dropped by a resync.

        Raises:
            IndexIOError: If the index cannot be saved
        """
        project = self.index.projects.get(str(path))
        if project is None:
            logger.debug(f"Ignoring access to unindexed path {path}")
            return

        now = utc_now()
        project.access_count += 1
        project.last_accessed = now
        project.refresh_frecency(now=now)

        self.save()

    def sorted_projects(self) -> List[Project]:
        """All projects ordered by frecency, highest first."""
        return sort_by_frecency(self.index.projects.values())
