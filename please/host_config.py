"""Centralized host-side configuration for please."""

import logging
import os
from pathlib import Path
from typing import List, Optional, Tuple

import yaml
from pydantic import ValidationError

from please.models.host_config import HostConfigModel
from please.paths import HostPaths

logger = logging.getLogger(__name__)

INSTALLER_URL_ENV = "PLEASE_NIX_INSTALLER_URL"

# Walks the channel's attribute tree and replaces every derivation (or value
# that fails to evaluate) with `true`, leaving nested sets as JSON objects.
LIST_EXPRESSION_TEMPLATE = """\
with builtins;
let
  walk = set: mapAttrs (name: value:
    let r = tryEval value; in
    if r.success && isAttrs r.value && (r.value.type or "") != "derivation"
    then walk r.value
    else true) set;
in walk (import {channel} {{}})
"""

PRIME_EXPRESSION_TEMPLATE = "builtins.attrNames (import {channel} {{}})"


class HostConfig:
    """Manages host-side configuration from ~/.config/please/config.yml."""

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or HostPaths.config_file()
        self._model = self._load()

    def _load(self) -> HostConfigModel:
        """Load configuration from file."""
        if not self.config_path.exists():
            return HostConfigModel()

        try:
            with open(self.config_path) as f:
                raw_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config from {self.config_path}: {e}")
            return HostConfigModel()

        if not isinstance(raw_config, dict):
            logger.warning(f"Ignoring config {self.config_path}: top level must be a mapping")
            return HostConfigModel()

        try:
            return HostConfigModel.model_validate(raw_config)
        except ValidationError as e:
            logger.warning(f"Config validation errors: {e}")

        # Keep the sections that validate on their own, default the rest
        merged = {}
        for key, value in raw_config.items():
            try:
                HostConfigModel.model_validate({key: value})
            except ValidationError:
                continue
            merged[key] = value
        return HostConfigModel.model_validate(merged)

    @property
    def channel_name(self) -> str:
        return self._model.channel.name

    @property
    def channel_url(self) -> str:
        return self._model.channel.url

    @property
    def channel_path(self) -> str:
        """NIX_PATH lookup expression for the channel, e.g. ``<contrail>``."""
        return f"<{self._model.channel.name}>"

    @property
    def cache_url(self) -> str:
        return self._model.cache.url

    @property
    def cache_public_key(self) -> Optional[str]:
        return self._model.cache.public_key

    @property
    def installer_url(self) -> str:
        """Nix installer script URL.

        Priority:
        1. PLEASE_NIX_INSTALLER_URL environment variable
        2. installer_url from the config file
        """
        env_url = os.getenv(INSTALLER_URL_ENV)
        if env_url:
            return env_url
        return self._model.installer_url

    @property
    def tests_attribute(self) -> str:
        return self._model.tests_attribute

    @property
    def list_expression(self) -> str:
        if self._model.list_expression:
            return self._model.list_expression
        return LIST_EXPRESSION_TEMPLATE.format(channel=self.channel_path)

    @property
    def prime_expression(self) -> str:
        if self._model.prime_expression:
            return self._model.prime_expression
        return PRIME_EXPRESSION_TEMPLATE.format(channel=self.channel_path)

    @property
    def port_forwards(self) -> List[Tuple[int, int]]:
        return [(fwd.host, fwd.guest) for fwd in self._model.vm.port_forwards]

    @property
    def nix_profile_script(self) -> Path:
        configured = self._model.paths.nix_profile
        if configured:
            return Path(configured).expanduser()
        return HostPaths.nix_profile_script()

    @property
    def nix_conf(self) -> Path:
        configured = self._model.paths.nix_conf
        if configured:
            return Path(configured).expanduser()
        return HostPaths.nix_conf()

    @property
    def kvm_device(self) -> Path:
        return Path(self._model.paths.kvm_device)


# Singleton instance
_config: Optional[HostConfig] = None


def get_config() -> HostConfig:
    """Get the global host configuration."""
    global _config
    if _config is None:
        _config = HostConfig()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() reloads it."""
    global _config
    _config = None
