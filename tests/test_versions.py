"""Tests for listing installable versions."""

import os
from unittest.mock import patch

import pytest

from lf_install import EnterpriseOptions, ExactVersion, InstallationOptions, OPENBAO, OPENTOFU, Versions
from lf_install.config import Settings
from lf_install.errors import ProductNotFoundError, ValidationError
from lf_install.product import Product


def raw_versions(sources):
    return [str(src.version) for src in sources]


class TestVersionsList:
    def test_constraints(self, release_host, settings):
        sources = Versions(OPENTOFU, ">= 0.14.0, < 1.0.0", settings=settings).list()
        assert raw_versions(sources) == ["0.14.10", "0.14.11"]
        assert all(isinstance(src, ExactVersion) for src in sources)

    def test_no_constraints_excludes_prereleases(self, release_host, settings):
        assert raw_versions(Versions(OPENTOFU, settings=settings).list()) == ["0.14.10", "0.14.11"]

    def test_include_prereleases(self, release_host, settings):
        sources = Versions(OPENTOFU, include_prereleases=True, settings=settings).list()
        assert raw_versions(sources) == ["0.14.10", "0.14.11", "0.15.0-rc2"]

    def test_enterprise_options_copied(self, release_host, settings):
        enterprise = EnterpriseOptions(meta="hsm")
        versions = Versions(
            OPENBAO,
            ">= 1.9.0, < 1.9.9",
            enterprise=enterprise,
            install=InstallationOptions(license_dir="/some/path"),
            settings=settings,
        )
        sources = versions.list()

        assert raw_versions(sources) == ["1.9.8+ent.hsm"]
        for src in sources:
            assert src.enterprise == enterprise
            assert src.enterprise is not enterprise
            assert src.license_dir == "/some/path"

    def test_enterprise_requires_license_dir(self, settings):
        with pytest.raises(ValidationError):
            Versions(OPENBAO, enterprise=EnterpriseOptions(), settings=settings).list()

    @pytest.mark.parametrize(
        "product, field",
        [
            (Product(name="Bad/Name", binary_name=lambda: "tofu", get_version=OPENTOFU.get_version), "product.name"),
            (Product(name="tofu", binary_name=lambda: "..", get_version=OPENTOFU.get_version), "product.binary_name"),
        ],
    )
    def test_invalid_product_rejected_before_network(self, product, field):
        with patch("lf_install.common.http_client.requests.get") as mock_get:
            with pytest.raises(ValidationError) as exc_info:
                Versions(product, settings=Settings()).list()
        assert exc_info.value.field == field
        mock_get.assert_not_called()

    def test_unknown_product(self, release_host, settings):
        nomad = Product(name="nomad", binary_name=lambda: "nomad", get_version=OPENTOFU.get_version)
        with pytest.raises(ProductNotFoundError):
            Versions(nomad, settings=settings).list()

    def test_listed_source_installs(self, release_host, settings, tmp_path):
        versions = Versions(
            OPENTOFU,
            "= 0.14.10",
            install=InstallationOptions(install_dir=str(tmp_path), skip_checksum_verification=True),
            settings=settings,
        )
        (src,) = versions.list()
        src.os_name, src.arch = "linux", "amd64"
        path = src.install()
        assert os.path.isfile(path)
        src.remove()
        assert not os.path.exists(path)
