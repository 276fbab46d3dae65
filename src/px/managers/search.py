"""Ranked project search combining fuzzy matching with frecency."""

from typing import List, Optional, Protocol, Sequence, Tuple

from px.core.frecency import sort_by_frecency
from px.core.fuzzy import FuzzyMatcher
from px.errors import ProjectNotFoundError
from px.models import Project

FUZZY_WEIGHT = 0.7
FRECENCY_WEIGHT = 0.3


class Matcher(Protocol):
    def fuzzy_match(self, choice: str, pattern: str) -> Optional[int]: ...


class ProjectSearcher:
    """Searches projects by name and path.

    Ranking formula for non-empty queries:
        combined = fuzzy_score * 0.7 + frecency_score * 0.3

    Good textual matches win, but frequently opened projects still take close
    fuzzy ties.
    """

    def __init__(self, matcher: Optional[Matcher] = None):
        self.matcher = matcher or FuzzyMatcher()

    def fuzzy_score(self, project: Project, query: str) -> Optional[int]:
        """Best fuzzy score over the project's name and full path."""
        scores = [
            self.matcher.fuzzy_match(project.name, query),
            self.matcher.fuzzy_match(str(project.path), query),
        ]
        best = max((s for s in scores if s is not None), default=None)
        if best is None or best <= 0:
            return None
        return best

    def search(self, projects: Sequence[Project], query: str) -> List[Project]:
        """Projects matching query, best first.

        An empty or blank query returns every project ordered by frecency.
        Projects that match neither name nor path are left out entirely.
        """
        if not query.strip():
            return sort_by_frecency(projects)

        matches: List[Tuple[int, Project]] = []
        for project in projects:
            fuzzy = self.fuzzy_score(project, query)
            if fuzzy is None:
                continue
            combined = int(fuzzy * FUZZY_WEIGHT + project.frecency_score * FRECENCY_WEIGHT)
            matches.append((combined, project))

        matches.sort(key=lambda m: m[0], reverse=True)
        return [project for _, project in matches]

    def best_match(
        self, projects: Sequence[Project], query: str, strict: bool = False
    ) -> Optional[Project]:
        """Top search result, or None when nothing matches.

        Raises:
            ProjectNotFoundError: If strict and no project matches query
        """
        results = self.search(projects, query)
        if results:
            return results[0]
        if strict:
            raise ProjectNotFoundError(f"No projects found matching '{query}'")
        return None

    def exact_search(self, projects: Sequence[Project], query: str) -> List[Project]:
        """Case-insensitive substring search on name or path, ordered by frecency."""
        needle = query.lower()
        matches = [
            p
            for p in projects
            if needle in p.name.lower() or needle in str(p.path).lower()
        ]
        return sort_by_frecency(matches)
