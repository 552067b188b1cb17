"""Tests for focusgraph.config (persisted focus selection)."""

from pathlib import Path

import pytest

from focusgraph.config import ConfigStore, parse_config, render_config
from focusgraph.model import FocusConfig, PersistenceError


def test_save_writes_exact_format(tmp_path: Path) -> None:
    path = tmp_path / "focus-config.gradle"
    ConfigStore(path).save(FocusConfig(("A", "C"), 2))
    assert path.read_text(encoding="utf-8") == "ext.focusedProjects = ['A', 'C']\next.downstreamHops = 2"


def test_empty_selection_renders_empty_list() -> None:
    assert render_config(FocusConfig((), 0)) == "ext.focusedProjects = []\next.downstreamHops = 0"


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    config = ConfigStore(tmp_path / "absent.gradle").load()
    assert config.focused_projects == ()
    assert config.downstream_hops == 1


@pytest.mark.parametrize(
    "cfg",
    [
        FocusConfig((), 1),
        FocusConfig(("project-001",), 0),
        FocusConfig(("A", "C", "B"), 7),
    ],
)
def test_round_trip(tmp_path: Path, cfg: FocusConfig) -> None:
    store = ConfigStore(tmp_path / "focus-config.gradle")
    store.save(cfg)
    loaded = store.load()
    assert loaded.focused_set == cfg.focused_set
    assert loaded.downstream_hops == cfg.downstream_hops


def test_double_quotes_and_whitespace_accepted() -> None:
    config = parse_config('ext.focusedProjects = [ "A" ,\'B\',  "C"  ]\next.downstreamHops=3\n')
    assert config.focused_projects == ("A", "B", "C")
    assert config.downstream_hops == 3


def test_malformed_hops_defaults_to_one() -> None:
    config = parse_config("ext.focusedProjects = ['A']\next.downstreamHops = lots")
    assert config.focused_projects == ("A",)
    assert config.downstream_hops == 1


def test_malformed_list_defaults_to_empty() -> None:
    config = parse_config("ext.focusedProjects = 'A', 'B'\next.downstreamHops = 2")
    assert config.focused_projects == ()
    assert config.downstream_hops == 2


def test_garbage_file_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "focus-config.gradle"
    path.write_text("this is not gradle at all", encoding="utf-8")
    assert ConfigStore(path).load() == FocusConfig()


def test_duplicates_collapse_keeping_first_position() -> None:
    config = parse_config("ext.focusedProjects = ['B', 'A', 'B', '']")
    assert config.focused_projects == ("B", "A")


def test_save_failure_raises_persistence_error(tmp_path: Path) -> None:
    # a directory where the file should be makes the write fail
    path = tmp_path / "focus-config.gradle"
    path.mkdir()
    with pytest.raises(PersistenceError) as exc:
        ConfigStore(path).save(FocusConfig(("A",), 1))
    assert "focus-config.gradle" in str(exc.value)


def test_negative_hops_rejected() -> None:
    with pytest.raises(ValueError):
        FocusConfig(("A",), -1)


def test_undecodable_file_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "focus-config.gradle"
    path.write_bytes(b"ext.focusedProjects = ['A\xff']\next.downstreamHops = 2")
    assert ConfigStore(path).load() == FocusConfig()
