"""Console output formatting utilities for focusgraph."""

from __future__ import annotations

import sys
from typing import Optional

from focusgraph.model import ChangeNotification, DependencyGraph, FocusConfig


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False):
        """
        Initialize console formatter.

        Args:
            debug: If True, show detailed output including stack traces
        """
        self.debug = debug

    def print_header(self, title: str) -> None:
        """Print a section header."""
        print(f"\n{title}")
        print("-" * len(title))

    def print_graph_summary(self, graph: DependencyGraph) -> None:
        """Print node/edge counts and every project with dependencies."""
        edges = graph.edges()
        self.print_header("DEPENDENCY GRAPH")
        print(f"Projects: {len(graph.projects)}")
        print(f"Edges: {len(edges)}")
        for proj in graph.projects:
            deps = graph.dependencies(proj)
            if deps:
                print(f"  {proj} -> {', '.join(deps)}")

    def print_config(self, config: FocusConfig) -> None:
        """Print the current focus selection."""
        self.print_header("FOCUS")
        focused = ", ".join(config.focused_projects) if config.focused_projects else "(none: everything included)"
        print(f"Focused: {focused}")
        print(f"Downstream hops: {config.downstream_hops}")

    def print_split(self, included: list[str], excluded: list[str], verbose: bool = False) -> None:
        """Print included/excluded counts, and the lists when verbose."""
        print(f"Included: {len(included)}")
        if verbose:
            for p in included:
                print(f"  + {p}")
        print(f"Excluded: {len(excluded)}")
        if verbose:
            for p in excluded:
                print(f"  - {p}")

    def print_change(self, notification: ChangeNotification) -> None:
        """Print a change notification from the watcher."""
        print("\nFILES CHANGED IN NON-FOCUSED PROJECTS")
        for p in notification.changed_projects:
            print(f"  {p}")
        print(f"Included: {len(notification.included)}  Excluded: {len(notification.excluded)}")

    def print_success(self, message: str) -> None:
        """Print success message."""
        print(f"STATUS: success ({message})")

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if details:
            for detail in details:
                print(f"  {detail}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)

    def print_exception(self, exc: Exception) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            traceback.print_exc()
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_watch_started(self, root: str, interval: float, projects: int) -> None:
        """Print watcher start information."""
        print("\nWATCH STARTED")
        print(f"Root: {root}")
        print(f"Projects: {projects}")
        print(f"Polling every: {interval}s")
        print()

    def print_info(self, message: str) -> None:
        """Print informational message."""
        print(message)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console
