"""Tests for YAML and environment settings."""

import pytest

from lf_install.config import Settings, load_settings
from lf_install.constants import Constants
from lf_install.errors import ValidationError


def write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings(environ={})
        assert settings == Settings()
        assert settings.base_url == Constants.DEFAULT_BASE_URL
        assert settings.timeout == Constants.DEFAULT_INSTALL_TIMEOUT

    def test_yaml_section(self, tmp_path):
        key = write(tmp_path, "key.asc", "-----BEGIN PGP PUBLIC KEY BLOCK-----\n...")
        cfg = write(
            tmp_path,
            "lf.yml",
            "releases:\n"
            "  base_url: https://mirror.example.test/releases/\n"
            "  timeout: 45\n"
            f"  public_key_file: {key}\n"
            "  skip_checksum_verification: true\n",
        )
        settings = load_settings(cfg, environ={})
        assert settings.base_url == "https://mirror.example.test/releases"
        assert settings.timeout == 45
        assert settings.armored_public_key.startswith("-----BEGIN PGP")
        assert settings.skip_checksum_verification is True

    def test_config_path_from_environment(self, tmp_path):
        cfg = write(tmp_path, "lf.yml", "releases:\n  timeout: 12\n")
        assert load_settings(environ={Constants.ENV_CONFIG: cfg}).timeout == 12

    def test_environment_overrides_yaml(self, tmp_path):
        cfg = write(tmp_path, "lf.yml", "releases:\n  base_url: https://a.test\n  timeout: 45\n")
        env = {
            Constants.ENV_BASE_URL: "https://b.test/",
            Constants.ENV_TIMEOUT: "5",
            Constants.ENV_SKIP_CHECKSUM: "yes",
        }
        settings = load_settings(cfg, environ=env)
        assert settings.base_url == "https://b.test"
        assert settings.timeout == 5
        assert settings.skip_checksum_verification is True

    def test_missing_file_uses_defaults(self, tmp_path):
        assert load_settings(str(tmp_path / "absent.yml"), environ={}) == Settings()

    def test_empty_file(self, tmp_path):
        assert load_settings(write(tmp_path, "lf.yml", ""), environ={}) == Settings()

    @pytest.mark.parametrize(
        "text",
        ["releases: [1, 2]\n", "- a\n- b\n", "releases:\n  timeout: soon\n", "releases:\n  timeout: -1\n", "a: [\n"],
    )
    def test_invalid_yaml(self, tmp_path, text):
        with pytest.raises(ValidationError):
            load_settings(write(tmp_path, "lf.yml", text), environ={})

    def test_invalid_environment_values(self, tmp_path):
        with pytest.raises(ValidationError) as exc_info:
            load_settings(environ={Constants.ENV_SKIP_CHECKSUM: "maybe"})
        assert exc_info.value.field == Constants.ENV_SKIP_CHECKSUM
        with pytest.raises(ValidationError):
            load_settings(environ={Constants.ENV_PUBLIC_KEY_FILE: str(tmp_path / "none.asc")})
