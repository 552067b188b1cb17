# manifest.py
# Text scan for dependency directives in a project's build.gradle.
# This is not a Gradle evaluator: everything except the directive is ignored.

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

MANIFEST_NAME = "build.gradle"

# focusedDep(':project-042') / focusedDep(":project-042", ...)
DIRECTIVE_RE = re.compile(r"""focusedDep\(\s*(['"]):([^'"]+)\1""")


def parse_dependencies(
    text: str,
    normalize: Optional[Callable[[str], str]] = None,
) -> List[str]:
    """
    Return dependency ids declared in manifest text, in textual order.

    Duplicates are kept. Text with no directive yields an empty list.
    """
    ids = [m.group(2).strip() for m in DIRECTIVE_RE.finditer(text)]
    if normalize is not None:
        ids = [normalize(i) for i in ids]
    return ids


def read_manifest(
    path: Path,
    normalize: Optional[Callable[[str], str]] = None,
) -> List[str]:
    """A missing or unreadable manifest is a leaf project, not an error."""
    if not path.is_file():
        return []
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning("Could not read %s, treating as no dependencies: %s", path, e)
        return []
    return parse_dependencies(text, normalize)


def manifest_path(root: Path, project_id: str) -> Path:
    return root / project_id / MANIFEST_NAME
