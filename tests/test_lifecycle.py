"""Tests for the installation record and cleanup."""

import os
from unittest.mock import patch

import pytest

from lf_install.errors import CleanupError
from lf_install.releases.lifecycle import InstallationRecord, remove_path


class TestRemovePath:
    def test_file(self, tmp_path):
        f = tmp_path / "f"
        f.write_text("x")
        assert remove_path(str(f)) is True
        assert not f.exists()

    def test_tree(self, tmp_path):
        d = tmp_path / "d"
        (d / "nested").mkdir(parents=True)
        (d / "nested" / "f").write_text("x")
        assert remove_path(str(d)) is True
        assert not d.exists()

    def test_missing(self, tmp_path):
        assert remove_path(str(tmp_path / "gone")) is False


class TestInstallationRecord:
    def test_add_deduplicates(self):
        record = InstallationRecord()
        record.add("/a")
        record.add("/a")
        record.add("")
        record.add("/b")
        record.add("/a")
        assert record.paths == ["/a", "/b"]

    def test_discard(self):
        record = InstallationRecord()
        record.add("/a")
        record.add("/b")
        record.discard("/a")
        record.discard("/missing")
        assert record.paths == ["/b"]

    def test_remove_all_is_idempotent(self, tmp_path):
        install_dir = tmp_path / "tofu_123"
        install_dir.mkdir()
        exe = install_dir / "tofu"
        exe.write_text("bin")
        record = InstallationRecord()
        record.add(str(install_dir))
        record.add(str(exe))

        record.remove_all()
        assert not install_dir.exists()
        assert len(record) == 0

        record.remove_all()
        assert len(record) == 0

    def test_tolerates_already_removed_paths(self, tmp_path):
        f = tmp_path / "f"
        f.write_text("x")
        record = InstallationRecord()
        record.add(str(tmp_path / "never-created"))
        record.add(str(f))
        os.remove(f)
        record.remove_all()
        assert len(record) == 0

    def test_failures_are_aggregated(self, tmp_path):
        paths = []
        for name in ("a", "b", "c"):
            p = tmp_path / name
            p.write_text(name)
            paths.append(str(p))
        record = InstallationRecord()
        for p in paths:
            record.add(p)

        real_remove = os.remove

        def flaky_remove(path):
            if path.endswith("b"):
                raise PermissionError(13, "Permission denied", path)
            real_remove(path)

        with patch("lf_install.releases.lifecycle.os.remove", side_effect=flaky_remove):
            with pytest.raises(CleanupError) as exc_info:
                record.remove_all()

        assert [p for p, _ in exc_info.value.failures] == [paths[1]]
        assert not os.path.exists(paths[0])
        assert not os.path.exists(paths[2])
        assert record.paths == [paths[1]]

        record.remove_all()
        assert not os.path.exists(paths[1])
        assert len(record) == 0
