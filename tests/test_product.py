"""Tests for product records and name validation."""

import subprocess
import sys
from unittest.mock import MagicMock, patch

import pytest

from lf_install.errors import MalformedVersionError
from lf_install.product import OPENBAO, OPENTOFU, PRODUCTS
from lf_install.validators import is_binary_name_valid, is_product_name_valid


class TestProducts:
    def test_names(self):
        assert OPENTOFU.name == "tofu"
        assert OPENBAO.name == "vault"
        assert set(PRODUCTS) == {"tofu", "vault"}

    def test_binary_name(self):
        expected = "tofu.exe" if sys.platform.startswith("win") else "tofu"
        assert OPENTOFU.binary_name() == expected

    @patch("lf_install.product.sys")
    def test_binary_name_on_windows(self, mock_sys):
        mock_sys.platform = "win32"
        assert OPENBAO.binary_name() == "vault.exe"

    @patch("lf_install.product.subprocess.run")
    def test_get_version(self, mock_run):
        mock_run.return_value = MagicMock(stdout="OpenTofu v1.6.2\non linux_amd64\n")
        assert str(OPENTOFU.get_version("/usr/bin/tofu")) == "1.6.2"
        assert mock_run.call_args[0][0] == ["/usr/bin/tofu", "version"]

    @patch("lf_install.product.subprocess.run")
    def test_get_version_prerelease(self, mock_run):
        mock_run.return_value = MagicMock(stdout="OpenBao v2.0.0-beta20240618\n")
        v = OPENBAO.get_version("/usr/bin/bao")
        assert v.is_prerelease()

    @patch("lf_install.product.subprocess.run")
    def test_get_version_unexpected_output(self, mock_run):
        mock_run.return_value = MagicMock(stdout="Terraform v1.5.7\n")
        with pytest.raises(MalformedVersionError):
            OPENTOFU.get_version("/usr/bin/tofu")

    @patch("lf_install.product.subprocess.run")
    def test_get_version_process_failure(self, mock_run):
        mock_run.side_effect = subprocess.CalledProcessError(1, ["tofu", "version"])
        with pytest.raises(subprocess.CalledProcessError):
            OPENTOFU.get_version("/usr/bin/tofu")


class TestValidators:
    @pytest.mark.parametrize("name", ["tofu", "vault", "consul-template"])
    def test_valid_product_names(self, name):
        assert is_product_name_valid(name)

    @pytest.mark.parametrize("name", ["", "Tofu", "tofu cli", "../tofu", None])
    def test_invalid_product_names(self, name):
        assert not is_product_name_valid(name)

    @pytest.mark.parametrize("name", ["tofu", "tofu.exe", "my_tool-2"])
    def test_valid_binary_names(self, name):
        assert is_binary_name_valid(name)

    @pytest.mark.parametrize("name", ["", ".", "..", "bin/tofu", "tofu exe"])
    def test_invalid_binary_names(self, name):
        assert not is_binary_name_valid(name)
