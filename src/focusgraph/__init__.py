from .config import ConfigStore
from .graph import GraphBuilder
from .manifest import parse_dependencies
from .model import ChangeNotification, DependencyGraph, FocusConfig, PersistenceError, ProjectRegistry
from .reach import compute_excluded, compute_included

__all__ = [
    "ConfigStore",
    "GraphBuilder",
    "parse_dependencies",
    "ChangeNotification",
    "DependencyGraph",
    "FocusConfig",
    "PersistenceError",
    "ProjectRegistry",
    "compute_excluded",
    "compute_included",
]
