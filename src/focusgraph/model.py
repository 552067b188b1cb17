# model.py
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple


DEFAULT_HOPS = 1


class PersistenceError(Exception):
    """Raised when the focus config or the IDE descriptor cannot be written."""
    pass


def numbered_projects(prefix: str = "project", count: int = 100, width: int = 3) -> List[str]:
    """Return `project-001`, `project-002`, ... in registry order."""
    return [f"{prefix}-{i:0{width}d}" for i in range(1, count + 1)]


@dataclass(frozen=True)
class ProjectRegistry:
    """
    The fixed, ordered project universe.

    `normalize` maps an identifier as written in a manifest onto its
    canonical registry form. For numbered registries `project-7` becomes
    `project-007`; anything else passes through unchanged.
    """
    projects: Tuple[str, ...]
    prefix: Optional[str] = None
    width: int = 3
    _members: frozenset = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_members", frozenset(self.projects))

    @classmethod
    def numbered(cls, prefix: str = "project", count: int = 100, width: int = 3) -> "ProjectRegistry":
        return cls(tuple(numbered_projects(prefix, count, width)), prefix=prefix, width=width)

    @classmethod
    def from_ids(cls, ids: Iterable[str]) -> "ProjectRegistry":
        seen: Dict[str, None] = {}
        for pid in ids:
            pid = pid.strip()
            if pid:
                seen.setdefault(pid, None)
        return cls(tuple(seen))

    def normalize(self, project_id: str) -> str:
        if self.prefix is None:
            return project_id
        m = re.fullmatch(rf"{re.escape(self.prefix)}-(\d+)", project_id)
        if not m:
            return project_id
        return f"{self.prefix}-{int(m.group(1)):0{self.width}d}"

    def __contains__(self, project_id: object) -> bool:
        return project_id in self._members

    def __iter__(self):
        return iter(self.projects)

    def __len__(self) -> int:
        return len(self.projects)


@dataclass(frozen=True)
class DependencyGraph:
    """
    Projects plus forward (project -> dependencies) and reverse
    (project -> dependents) adjacency.

    Every project has a key in both maps. Lists keep discovery order and
    may contain duplicates.
    """
    projects: Tuple[str, ...]
    forward: Dict[str, List[str]]
    reverse: Dict[str, List[str]]

    def edges(self) -> List[Tuple[str, str]]:
        return [(src, dst) for src in self.projects for dst in self.forward.get(src, [])]

    def dependents(self, project_id: str) -> List[str]:
        return self.reverse.get(project_id, [])

    def dependencies(self, project_id: str) -> List[str]:
        return self.forward.get(project_id, [])

    def to_payload(self) -> dict:
        """Shape served by `GET /api/graph` (label equals id)."""
        return {
            "nodes": [{"id": p, "label": p} for p in self.projects],
            "edges": [{"from": src, "to": dst} for src, dst in self.edges()],
        }


@dataclass(frozen=True)
class FocusConfig:
    """
    Focused project ids plus the downstream hop bound.

    Duplicate ids collapse; the first occurrence keeps its position so
    the caller's order survives serialization.
    """
    focused_projects: Tuple[str, ...] = ()
    downstream_hops: int = DEFAULT_HOPS

    def __post_init__(self) -> None:
        deduped = tuple(dict.fromkeys(self.focused_projects))
        object.__setattr__(self, "focused_projects", deduped)
        if self.downstream_hops < 0:
            raise ValueError(f"downstream_hops must be >= 0, got {self.downstream_hops}")

    @property
    def focused_set(self) -> frozenset:
        return frozenset(self.focused_projects)

    def to_payload(self) -> dict:
        return {
            "focusedProjects": list(self.focused_projects),
            "downstreamHops": self.downstream_hops,
        }


@dataclass(frozen=True)
class ChangeNotification:
    """Event pushed to subscribers when non-focused projects gain edits."""
    changed_projects: Tuple[str, ...]
    included: Tuple[str, ...]
    excluded: Tuple[str, ...]

    def to_payload(self) -> dict:
        return {
            "changedProjects": list(self.changed_projects),
            "included": list(self.included),
            "excluded": list(self.excluded),
        }


# (status-code, path) as reported by `git status --porcelain`
StatusEntry = Tuple[str, str]
StatusQuery = Callable[[], List[StatusEntry]]
