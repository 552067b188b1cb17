from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

from focusgraph.config import DEFAULT_CONFIG_FILE
from focusgraph.idea import DEFAULT_IDEA_FILE
from focusgraph.model import ProjectRegistry
from focusgraph.watcher import DEFAULT_POLL_INTERVAL


def _flag(value: str) -> bool:
    return value.strip().lower() not in ("0", "false", "no", "off", "")


@dataclass(frozen=True)
class Settings:
    root: Path
    project_prefix: str = "project"
    project_count: int = 100
    projects: Optional[tuple] = None  # explicit list overrides prefix/count
    poll_interval: float = DEFAULT_POLL_INTERVAL
    watch: bool = True
    config_file: str = DEFAULT_CONFIG_FILE
    idea_file: str = DEFAULT_IDEA_FILE

    @property
    def config_path(self) -> Path:
        return self.root / self.config_file

    @property
    def idea_path(self) -> Path:
        return self.root / self.idea_file

    def registry(self) -> ProjectRegistry:
        if self.projects:
            return ProjectRegistry.from_ids(self.projects)
        return ProjectRegistry.numbered(self.project_prefix, self.project_count)

    def with_overrides(self, **changes) -> "Settings":
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if env is None else env
    projects = env.get("FOCUS_PROJECTS")
    return Settings(
        root=Path(env.get("FOCUS_ROOT", ".")).resolve(),
        project_prefix=env.get("FOCUS_PROJECT_PREFIX", "project"),
        project_count=int(env.get("FOCUS_PROJECT_COUNT", "100")),
        projects=tuple(p.strip() for p in projects.split(",") if p.strip()) if projects else None,
        poll_interval=float(env.get("FOCUS_POLL_INTERVAL", str(DEFAULT_POLL_INTERVAL))),
        watch=_flag(env.get("FOCUS_WATCH", "1")),
        config_file=env.get("FOCUS_CONFIG_FILE", DEFAULT_CONFIG_FILE),
        idea_file=env.get("FOCUS_IDEA_FILE", DEFAULT_IDEA_FILE),
    )
