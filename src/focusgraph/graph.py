# graph.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List

from .manifest import manifest_path, read_manifest
from .model import DependencyGraph, ProjectRegistry

logger = logging.getLogger(__name__)


class GraphBuilder:
    """
    Build a DependencyGraph from per-project manifests.

    Requires:
      - registry: the ordered project universe
      - root: directory holding one subdirectory per project

    Each call to `build()` returns a fresh graph; nothing is cached between
    builds.
    """

    def __init__(self, root: Path | str, registry: ProjectRegistry):
        self.root = Path(root)
        self.registry = registry

    def build(self) -> DependencyGraph:
        projects = tuple(self.registry)
        forward: Dict[str, List[str]] = {p: [] for p in projects}
        reverse: Dict[str, List[str]] = {p: [] for p in projects}

        for proj in projects:
            deps = read_manifest(manifest_path(self.root, proj), self.registry.normalize)
            for dep in deps:
                if dep not in self.registry:
                    logger.debug("Ignoring dependency %s -> %s (not a known project)", proj, dep)
                    continue
                # Edge proj -> dep (proj depends on dep)
                forward[proj].append(dep)
                reverse[dep].append(proj)
            if forward[proj]:
                logger.debug("Deps for %s: %s", proj, forward[proj])

        graph = DependencyGraph(projects=projects, forward=forward, reverse=reverse)
        logger.info("Built graph: %d nodes, %d edges", len(projects), len(graph.edges()))
        return graph
