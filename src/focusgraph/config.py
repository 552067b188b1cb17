# config.py
# Persisted focus selection, stored as two Gradle `ext` statements so the
# build itself can read the same file:
#
#   ext.focusedProjects = ['project-001', 'project-002']
#   ext.downstreamHops = 1
#
# Reading never fails: a missing file or unparseable literal falls back to
# the defaults. Writing replaces the whole file.

from __future__ import annotations

import logging
import re
import threading
from pathlib import Path
from typing import List

from .model import DEFAULT_HOPS, FocusConfig, PersistenceError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "focus-config.gradle"

FOCUSED_RE = re.compile(r"ext\.focusedProjects\s*=\s*\[([^\]]*)\]")
HOPS_RE = re.compile(r"ext\.downstreamHops\s*=\s*(\d+)")


def _parse_focused(content: str) -> List[str]:
    m = FOCUSED_RE.search(content)
    if not m:
        return []
    out: List[str] = []
    for item in m.group(1).split(","):
        item = item.strip()
        if item[:1] in ("'", '"'):
            item = item[1:]
        if item[-1:] in ("'", '"'):
            item = item[:-1]
        item = item.strip()
        if item:
            out.append(item)
    return out


def _parse_hops(content: str) -> int:
    m = HOPS_RE.search(content)
    if not m:
        return DEFAULT_HOPS
    return int(m.group(1))


def parse_config(content: str) -> FocusConfig:
    return FocusConfig(tuple(_parse_focused(content)), _parse_hops(content))


def render_config(config: FocusConfig) -> str:
    focused = ", ".join(f"'{p}'" for p in config.focused_projects)
    return f"ext.focusedProjects = [{focused}]\next.downstreamHops = {config.downstream_hops}"


class ConfigStore:
    """
    Load/save the focus config file.

    Access from this process is serialized by a lock. Other processes
    writing the same file are not coordinated with (last write wins).
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._lock = threading.Lock()

    def load(self) -> FocusConfig:
        with self._lock:
            if not self.path.is_file():
                return FocusConfig()
            try:
                content = self.path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Could not read %s, using defaults: %s", self.path, e)
                return FocusConfig()
        return parse_config(content)

    def save(self, config: FocusConfig) -> None:
        text = render_config(config)
        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.write_text(text, encoding="utf-8")
            except OSError as e:
                raise PersistenceError(f"Could not write {self.path}: {e}") from e
        logger.info("Saved focus config: %s", config.to_payload())
