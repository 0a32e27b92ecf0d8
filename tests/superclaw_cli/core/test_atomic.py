from __future__ import annotations

import json
from pathlib import Path

import pytest

from superclaw_cli.core.atomic import atomic_write_json, atomic_write_text


def test_write_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "doc.md"
    atomic_write_text(target, "hello")
    assert target.read_text(encoding="utf-8") == "hello"


def test_write_replaces_whole_file(tmp_path: Path) -> None:
    target = tmp_path / "doc.md"
    target.write_text("a much longer original body", encoding="utf-8")
    atomic_write_text(target, "short")
    assert target.read_text(encoding="utf-8") == "short"


def test_no_temp_files_left_behind(tmp_path: Path) -> None:
    atomic_write_json(tmp_path / "config.json", {"a": 1})
    assert [p.name for p in tmp_path.iterdir()] == ["config.json"]
    assert json.loads((tmp_path / "config.json").read_text(encoding="utf-8")) == {"a": 1}


def test_failed_rename_cleans_up(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("superclaw_cli.core.atomic.os.replace", boom)
    with pytest.raises(OSError):
        atomic_write_text(tmp_path / "doc.md", "x")
    assert list(tmp_path.iterdir()) == []
