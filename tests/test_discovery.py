from pathlib import Path

from yq_provider.utils import discovery
from yq_provider.utils.discovery import iter_yaml_files


def test_iter_yaml_files_finds_both_extensions(tmp_path):
    (tmp_path / "a.yaml").write_text("a: 1", encoding="utf-8")
    nested = tmp_path / "nested"
    nested.mkdir()
    (nested / "b.yml").write_text("b: 2", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    names = sorted(path.name for path in iter_yaml_files(tmp_path))

    assert names == ["a.yaml", "b.yml"]


def test_iter_yaml_files_missing_root_is_empty(tmp_path, caplog):
    files = iter_yaml_files(tmp_path / "missing")

    assert files == []
    assert "not a directory" in caplog.text


def test_failing_extension_does_not_hide_others(tmp_path, monkeypatch, caplog):
    (tmp_path / "a.yaml").write_text("a: 1", encoding="utf-8")
    (tmp_path / "b.yml").write_text("b: 2", encoding="utf-8")
    original = discovery.find_files_matching

    def flaky(root: Path, extension: str):
        if extension == ".yaml":
            raise PermissionError("denied")
        return original(root, extension)

    monkeypatch.setattr(discovery, "find_files_matching", flaky)

    files = iter_yaml_files(tmp_path)

    assert [path.name for path in files] == ["b.yml"]
    assert "Unable to find .yaml files" in caplog.text
