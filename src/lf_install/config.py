"""Runtime settings loaded from an optional YAML file and the environment.

Precedence, highest first: explicit adapter fields, environment variables,
the ``releases:`` section of the YAML file, ``Constants`` defaults.

Example file::

    releases:
      base_url: https://mirror.example.internal/releases
      timeout: 60
      public_key_file: /etc/lf-install/release.asc
      skip_checksum_verification: false
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import yaml

from .constants import Constants
from .errors import ValidationError

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    """Defaults applied to source adapters whose fields are left unset."""
    base_url: str = Constants.DEFAULT_BASE_URL
    timeout: float = Constants.DEFAULT_INSTALL_TIMEOUT
    armored_public_key: str = ""
    skip_checksum_verification: bool = False


def _parse_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValidationError(f"{name}: expected a boolean, got {value!r}", field=name)


def _parse_timeout(value: Any, name: str) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{name}: expected a number of seconds, got {value!r}", field=name) from exc
    if timeout <= 0:
        raise ValidationError(f"{name}: timeout must be positive", field=name)
    return timeout


def _read_key_file(path: str, name: str) -> str:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return fh.read()
    except OSError as exc:
        raise ValidationError(f"{name}: cannot read public key file {path!r}: {exc}", field=name) from exc


def _load_yaml_section(path: str) -> Dict[str, Any]:
    if not os.path.isfile(path):
        logger.warning("Config file not found: %s", path)
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ValidationError(f"invalid YAML in {path}: {exc}", field="config") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(f"{path}: top level must be a mapping", field="config")
    section = data.get("releases", {})
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ValidationError(f"{path}: 'releases' must be a mapping", field="releases")
    return section


def load_settings(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from a YAML file and environment overrides.

    Args:
        path: YAML file; defaults to ``LF_INSTALL_CONFIG`` when unset.
        environ: Environment mapping (``os.environ`` when omitted).

    Returns:
        Settings: Merged settings.

    Raises:
        ValidationError: On unreadable YAML, a bad value or an unreadable key file.
    """
    env = os.environ if environ is None else environ
    config_path = path or env.get(Constants.ENV_CONFIG)
    section = _load_yaml_section(config_path) if config_path else {}

    values: Dict[str, Any] = {}
    if section.get("base_url"):
        values["base_url"] = str(section["base_url"]).rstrip("/")
    if section.get("timeout") is not None:
        values["timeout"] = _parse_timeout(section["timeout"], "releases.timeout")
    if section.get("public_key_file"):
        values["armored_public_key"] = _read_key_file(
            str(section["public_key_file"]), "releases.public_key_file"
        )
    if section.get("skip_checksum_verification") is not None:
        values["skip_checksum_verification"] = _parse_bool(
            section["skip_checksum_verification"], "releases.skip_checksum_verification"
        )

    if env.get(Constants.ENV_BASE_URL):
        values["base_url"] = env[Constants.ENV_BASE_URL].strip().rstrip("/")
    if env.get(Constants.ENV_TIMEOUT):
        values["timeout"] = _parse_timeout(env[Constants.ENV_TIMEOUT], Constants.ENV_TIMEOUT)
    if env.get(Constants.ENV_PUBLIC_KEY_FILE):
        values["armored_public_key"] = _read_key_file(
            env[Constants.ENV_PUBLIC_KEY_FILE], Constants.ENV_PUBLIC_KEY_FILE
        )
    if Constants.ENV_SKIP_CHECKSUM in env:
        values["skip_checksum_verification"] = _parse_bool(
            env[Constants.ENV_SKIP_CHECKSUM], Constants.ENV_SKIP_CHECKSUM
        )

    settings = Settings(**values)
    logger.debug(
        "Loaded settings base_url=%s timeout=%s skip_checksum=%s custom_key=%s",
        settings.base_url,
        settings.timeout,
        settings.skip_checksum_verification,
        bool(settings.armored_public_key),
    )
    return settings
