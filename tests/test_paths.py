import os
from pathlib import Path

from util.paths import PROJECT_ROOT_ENV, default_project_root, resolve_path


def test_absolute_path_is_kept(tmp_path):
    target = tmp_path / "main.go"
    assert resolve_path(str(target), "/elsewhere") == target


def test_relative_path_joins_project_root(tmp_path):
    assert resolve_path("pkg/main.go", tmp_path) == tmp_path / "pkg" / "main.go"


def test_relative_path_without_root_uses_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert resolve_path("a.txt") == Path(os.getcwd()) / "a.txt"


def test_home_is_expanded(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert resolve_path("~/notes.md") == tmp_path / "notes.md"


def test_default_project_root_from_env(monkeypatch):
    monkeypatch.delenv(PROJECT_ROOT_ENV, raising=False)
    assert default_project_root() is None
    monkeypatch.setenv(PROJECT_ROOT_ENV, "/srv/app")
    assert default_project_root() == Path("/srv/app")
