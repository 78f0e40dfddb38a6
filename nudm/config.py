"""UDM configuration file: structure, loading and version check."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import yaml

from nudm.logs import get_logger
from nudm.models import PlmnId

EXPECTED_CONFIG_VERSION = "1.0.0"
DEFAULT_IPV4 = "127.0.0.3"
DEFAULT_PORT = 8000

_log = get_logger("CFG")


def _section(data: Any, name: str) -> Mapping:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError(f"{name}: expected a mapping, got {type(data).__name__}")
    return data


def _text(data: Mapping, key: str, name: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{name}.{key}: expected a string, got {type(value).__name__}")
    return value


def _integer(data: Mapping, key: str, name: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name}.{key}: expected an integer, got {type(value).__name__}")
    return value


def _items(data: Mapping, key: str, name: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{name}.{key}: expected a list, got {type(value).__name__}")
    return value


@dataclass
class Info:
    version: str = ""
    description: str = ""

    @classmethod
    def _parse(cls, data: Any) -> Info:
        data = _section(data, "info")
        return cls(version=_text(data, "version", "info"), description=_text(data, "description", "info"))


@dataclass
class Tls:
    log: str = ""
    pem: str = ""
    key: str = ""

    @classmethod
    def _parse(cls, data: Any) -> Tls:
        data = _section(data, "tls")
        return cls(log=_text(data, "log", "tls"), pem=_text(data, "pem", "tls"), key=_text(data, "key", "tls"))


@dataclass
class Sbi:
    scheme: str = ""
    register_ipv4: str = ""
    binding_ipv4: str = ""
    port: int = 0
    tls: Tls | None = None

    @classmethod
    def _parse(cls, data: Any) -> Sbi:
        data = _section(data, "sbi")
        tls = data.get("tls")
        return cls(
            scheme=_text(data, "scheme", "sbi"),
            register_ipv4=_text(data, "registerIPv4", "sbi"),
            binding_ipv4=_text(data, "bindingIPv4", "sbi"),
            port=_integer(data, "port", "sbi"),
            tls=Tls._parse(tls) if tls is not None else None,
        )


def _key_field_names():
    """Yield (attribute name, YAML key) for each home-network profile key."""
    for profile in ("A", "B"):
        for kind in ("Private", "Public"):
            attribute = f"udm_profile_{profile.lower()}_hn_{kind.lower()}_key"
            yield attribute, f"udmProfile{profile}HN{kind}Key"


@dataclass
class Keys:
    udm_profile_a_hn_private_key: str = ""
    udm_profile_a_hn_public_key: str = ""
    udm_profile_b_hn_private_key: str = ""
    udm_profile_b_hn_public_key: str = ""

    @classmethod
    def _parse(cls, data: Any) -> Keys:
        data = _section(data, "keys")
        values = {attribute: _text(data, yaml_key, "keys") for attribute, yaml_key in _key_field_names()}
        return cls(**values)


@dataclass
class PlmnSupportItem:
    plmn_id: PlmnId = field(default_factory=PlmnId)

    @classmethod
    def _parse(cls, data: Any) -> PlmnSupportItem:
        data = _section(data, "plmnList")
        plmn = data.get("plmnId")
        return cls(plmn_id=PlmnId.from_dict(plmn) if plmn is not None else PlmnId())


@dataclass
class Configuration:
    udm_name: str = ""
    sbi: Sbi | None = None
    service_name_list: list[str] = field(default_factory=list)
    nrf_uri: str = ""
    keys: Keys | None = None
    plmn_support_list: list[PlmnId] = field(default_factory=list)
    plmn_list: list[PlmnSupportItem] = field(default_factory=list)

    @classmethod
    def _parse(cls, data: Any) -> Configuration:
        data = _section(data, "configuration")
        names = _items(data, "serviceNameList", "configuration")
        if not all(isinstance(name, str) for name in names):
            raise ValueError("configuration.serviceNameList: expected a list of strings")
        sbi = data.get("sbi")
        keys = data.get("keys")
        return cls(
            udm_name=_text(data, "udmName", "configuration"),
            sbi=Sbi._parse(sbi) if sbi is not None else None,
            service_name_list=list(names),
            nrf_uri=_text(data, "nrfUri", "configuration"),
            keys=Keys._parse(keys) if keys is not None else None,
            plmn_support_list=[
                PlmnId.from_dict(item) for item in _items(data, "plmnSupportList", "configuration")
            ],
            plmn_list=[PlmnSupportItem._parse(item) for item in _items(data, "plmnList", "configuration")],
        )


@dataclass
class Config:
    info: Info | None = None
    configuration: Configuration | None = None
    logger: dict[str, Any] | None = None

    def get_version(self) -> str:
        """Return the configured version, or '' when there is none."""
        if self.info is not None and self.info.version:
            return self.info.version
        return ""

    @classmethod
    def from_dict(cls, data: Any) -> Config:
        data = _section(data, "config")
        info = data.get("info")
        configuration = data.get("configuration")
        logger = data.get("logger")
        return cls(
            info=Info._parse(info) if info is not None else None,
            configuration=Configuration._parse(configuration) if configuration is not None else None,
            logger=dict(_section(logger, "logger")) if logger is not None else None,
        )


def load_config(path: str | os.PathLike) -> Config:
    """Read and parse a YAML configuration file."""
    with open(path, encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    return Config.from_dict(data)


def check_config_version(config: Config) -> str:
    """Return the config version, raising ValueError if it is not the expected one."""
    current = config.get_version()
    if current != EXPECTED_CONFIG_VERSION:
        raise ValueError(
            f"config version is [{current}], but expected is [{EXPECTED_CONFIG_VERSION}]."
        )
    _log.info("config version [%s]", current)
    return current