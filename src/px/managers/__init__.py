"""px managers."""

from px.managers.index_store import IndexStore, DEFAULT_MAX_DEPTH
from px.managers.search import ProjectSearcher

__all__ = ["IndexStore", "ProjectSearcher", "DEFAULT_MAX_DEPTH"]
