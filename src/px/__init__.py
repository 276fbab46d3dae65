"""px - Fast project switcher with fuzzy search and frecency ranking."""

from px.managers.index_store import IndexStore
from px.managers.search import ProjectSearcher
from px.models import Project, ProjectIndex

try:
    from importlib.metadata import version, PackageNotFoundError

    __version__ = version("px-switcher")
except PackageNotFoundError:
    # Running from a source checkout without installed metadata
    __version__ = "0.1.0"

__all__ = ["IndexStore", "ProjectSearcher", "Project", "ProjectIndex"]
