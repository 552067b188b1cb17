# idea.py
# Writes an IntelliJ module file that excludes every project outside the
# included set, so the IDE stops indexing them.

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List
from xml.sax.saxutils import quoteattr

from .config import ConfigStore
from .graph import GraphBuilder
from .model import PersistenceError
from .reach import split_projects

logger = logging.getLogger(__name__)

DEFAULT_IDEA_FILE = ".idea/modules/focus-mode.iml"

_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<module type="JAVA_MODULE" version="4">
  <component name="AdditionalModuleElements">
    <content url="file://$MODULE_DIR$/../.." dumb="true">
{excludes}
    </content>
  </component>
</module>"""


def render_descriptor(excluded: Iterable[str]) -> str:
    lines = [
        f"<excludeFolder url={quoteattr(f'file://$MODULE_DIR$/../../{p}')} />"
        for p in excluded
    ]
    return _TEMPLATE.format(excludes="\n".join(lines))


def write_descriptor(path: Path | str, excluded: Iterable[str]) -> None:
    path = Path(path)
    content = render_descriptor(excluded)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise PersistenceError(f"Could not write {path}: {e}") from e


def apply_idea(
    store: ConfigStore,
    builder: GraphBuilder,
    descriptor_path: Path | str,
) -> List[str]:
    """
    Load the focus config, compute the excluded projects and write the
    descriptor. Returns the excluded project ids.

    Raises:
        PersistenceError: the descriptor could not be written
    """
    config = store.load()
    graph = builder.build()
    included, excluded = split_projects(graph, config.focused_projects, config.downstream_hops)
    write_descriptor(descriptor_path, excluded)
    logger.info(
        "IDEA exclusions applied: %d included, %d excluded -> %s",
        len(included), len(excluded), descriptor_path,
    )
    return excluded
