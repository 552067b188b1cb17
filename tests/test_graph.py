"""Tests for focusgraph.graph (GraphBuilder)."""

from pathlib import Path

from focusgraph.graph import GraphBuilder
from focusgraph.model import ProjectRegistry

from conftest import dep, write_manifests


def test_forward_and_reverse_adjacency(abc_root: Path, abc_registry: ProjectRegistry) -> None:
    g = GraphBuilder(abc_root, abc_registry).build()
    assert g.projects == ("A", "B", "C")
    assert g.forward == {"A": ["B"], "B": ["C"], "C": []}
    assert g.reverse == {"A": [], "B": ["A"], "C": ["B"]}
    assert g.edges() == [("A", "B"), ("B", "C")]


def test_missing_manifests_are_leaves(tmp_path: Path) -> None:
    registry = ProjectRegistry.numbered(count=100)
    write_manifests(tmp_path, {"project-050": dep("project-1") + dep("project-002")})
    g = GraphBuilder(tmp_path, registry).build()
    assert len(g.projects) == 100
    assert g.forward["project-050"] == ["project-001", "project-002"]
    assert g.reverse["project-001"] == ["project-050"]
    assert sum(len(v) for v in g.forward.values()) == 2


def test_duplicate_edges_preserved(tmp_path: Path, abc_registry: ProjectRegistry) -> None:
    write_manifests(tmp_path, {"A": dep("B") + dep("B")})
    g = GraphBuilder(tmp_path, abc_registry).build()
    assert g.forward["A"] == ["B", "B"]
    assert g.reverse["B"] == ["A", "A"]


def test_unknown_targets_are_dropped(tmp_path: Path, abc_registry: ProjectRegistry) -> None:
    write_manifests(tmp_path, {"A": dep("Z") + dep("C")})
    g = GraphBuilder(tmp_path, abc_registry).build()
    assert g.forward["A"] == ["C"]
    assert "Z" not in g.reverse


def test_build_is_deterministic(abc_root: Path, abc_registry: ProjectRegistry) -> None:
    builder = GraphBuilder(abc_root, abc_registry)
    first, second = builder.build(), builder.build()
    assert first == second
    assert first is not second
    assert first.to_payload() == second.to_payload()


def test_payload_shape(abc_root: Path, abc_registry: ProjectRegistry) -> None:
    payload = GraphBuilder(abc_root, abc_registry).build().to_payload()
    assert payload["nodes"][0] == {"id": "A", "label": "A"}
    assert payload["edges"] == [{"from": "A", "to": "B"}, {"from": "B", "to": "C"}]
