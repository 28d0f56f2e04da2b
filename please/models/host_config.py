# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""Pydantic models for host configuration (~/.config/please/config.yml)."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class ChannelConfig(BaseModel):
    """Nix channel that publishes the artifacts."""

    name: str = "contrail"
    url: str = "https://hydra.opencontrail.org/jobset/opencontrail/trunk/channel/latest"

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or any(ch.isspace() or ch in "<>" for ch in v):
            raise ValueError(f"Invalid channel name: {v!r}")
        return v


class CacheConfig(BaseModel):
    """Binary cache (substituter) consulted before building locally."""

    url: str = "https://cache.opencontrail.org"
    public_key: Optional[str] = None


class PortForward(BaseModel):
    """Host to guest TCP forward for interactive VMs."""

    host: int = Field(ge=1, le=65535)
    guest: int = Field(ge=1, le=65535)


def _default_port_forwards() -> List[PortForward]:
    return [
        PortForward(host=8080, guest=8080),
        PortForward(host=8143, guest=8143),
        PortForward(host=2222, guest=22),
    ]


class VMConfig(BaseModel):
    """Interactive VM settings."""

    port_forwards: List[PortForward] = Field(default_factory=_default_port_forwards)


class PathsConfig(BaseModel):
    """Path overrides. ``None`` means the HostPaths default."""

    nix_profile: Optional[str] = None
    nix_conf: Optional[str] = None
    kvm_device: str = "/dev/kvm"


class HostConfigModel(BaseModel):
    """Root model for ~/.config/please/config.yml."""

    version: str = "1.0"
    channel: ChannelConfig = Field(default_factory=ChannelConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    installer_url: str = "https://nixos.org/nix/install"
    tests_attribute: str = "tests"
    list_expression: Optional[str] = None
    prime_expression: Optional[str] = None
    vm: VMConfig = Field(default_factory=VMConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
