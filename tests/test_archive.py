"""Tests for safe ZIP extraction."""

import os
import zipfile

import pytest

from lf_install.errors import ExtractionError, FilesystemError
from lf_install.releases.archive import extract_zip, is_license_file, resolve_member_path
from lf_install.releases.lifecycle import InstallationRecord


def make_zip(path, members):
    with zipfile.ZipFile(path, "w") as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return str(path)


class TestResolveMemberPath:
    def test_plain(self, tmp_path):
        assert resolve_member_path("tofu", str(tmp_path)) == os.path.join(str(tmp_path), "tofu")

    @pytest.mark.parametrize("name", ["../evil.txt", "a/../../evil.txt", "/etc/passwd", "C:\\evil.txt", "..\\evil.txt", ""])
    def test_rejects_escapes(self, tmp_path, name):
        with pytest.raises(ExtractionError):
            resolve_member_path(name, str(tmp_path), "bad.zip")


class TestIsLicenseFile:
    @pytest.mark.parametrize("name", ["LICENSE.txt", "license.txt", "EULA.txt", "docs/TermsOfEvaluation.txt"])
    def test_license_names(self, name):
        assert is_license_file(name)

    def test_other_names(self):
        assert not is_license_file("tofu")
        assert not is_license_file("LICENSE")


class TestExtractZip:
    def test_extracts_and_records(self, tmp_path):
        archive = make_zip(tmp_path / "a.zip", {"tofu": b"#!/bin/sh\n", "sub/data.txt": b"x"})
        install_dir = tmp_path / "install"
        install_dir.mkdir()
        record = InstallationRecord()

        result = extract_zip(archive, str(install_dir), record)

        assert (install_dir / "tofu").read_bytes() == b"#!/bin/sh\n"
        assert (install_dir / "sub" / "data.txt").read_bytes() == b"x"
        assert str(install_dir / "tofu") in record
        assert str(install_dir / "sub") in record
        assert str(install_dir) not in record
        assert sorted(result.files) == sorted([str(install_dir / "tofu"), str(install_dir / "sub" / "data.txt")])

    def test_license_goes_to_license_dir(self, tmp_path):
        archive = make_zip(tmp_path / "a.zip", {"vault": b"bin", "EULA.txt": b"terms"})
        install_dir = tmp_path / "install"
        install_dir.mkdir()
        license_dir = tmp_path / "licenses" / "vault"
        record = InstallationRecord()

        result = extract_zip(archive, str(install_dir), record, license_dir=str(license_dir))

        assert (license_dir / "EULA.txt").read_bytes() == b"terms"
        assert not (install_dir / "EULA.txt").exists()
        assert result.license_files == [str(license_dir / "EULA.txt")]
        assert str(license_dir) in record
        assert str(tmp_path / "licenses") in record

    def test_license_stays_without_license_dir(self, tmp_path):
        archive = make_zip(tmp_path / "a.zip", {"tofu": b"bin", "LICENSE.txt": b"mpl"})
        install_dir = tmp_path / "install"
        install_dir.mkdir()
        result = extract_zip(archive, str(install_dir), InstallationRecord())
        assert (install_dir / "LICENSE.txt").exists()
        assert result.license_files == [str(install_dir / "LICENSE.txt")]

    def test_path_traversal_writes_nothing(self, tmp_path):
        archive = make_zip(tmp_path / "evil.zip", {"tofu": b"bin", "../evil.txt": b"pwned"})
        install_dir = tmp_path / "install"
        install_dir.mkdir()
        record = InstallationRecord()

        with pytest.raises(ExtractionError) as exc_info:
            extract_zip(archive, str(install_dir), record)

        assert exc_info.value.member == "../evil.txt"
        assert not (tmp_path / "evil.txt").exists()
        assert not (install_dir / "tofu").exists()
        assert len(record) == 0

    def test_corrupt_archive(self, tmp_path):
        archive = tmp_path / "broken.zip"
        archive.write_bytes(b"this is not a zip file")
        with pytest.raises(ExtractionError) as exc_info:
            extract_zip(str(archive), str(tmp_path), InstallationRecord())
        assert isinstance(exc_info.value, FilesystemError)
