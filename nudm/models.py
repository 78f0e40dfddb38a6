"""Data models shared by the UDM services."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


def _require_mapping(data: Any, what: str) -> Mapping:
    if not isinstance(data, Mapping):
        raise ValueError(f"{what}: expected a mapping, got {type(data).__name__}")
    return data


def _require_text(data: Mapping, key: str, what: str) -> str:
    value = data.get(key, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{what}.{key}: expected a string, got {type(value).__name__}")
    return value


@dataclass
class InvalidParam:
    """One offending parameter reported in a problem."""

    param: str
    reason: str = ""


@dataclass
class ProblemDetails:
    """An RFC 7807 style problem description."""

    status: int = 0
    cause: str = ""
    title: str = ""
    detail: str = ""
    invalid_params: list[InvalidParam] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form, leaving out empty members."""
        out: dict[str, Any] = {}
        if self.title:
            out["title"] = self.title
        if self.status:
            out["status"] = self.status
        if self.detail:
            out["detail"] = self.detail
        if self.cause:
            out["cause"] = self.cause
        if self.invalid_params:
            params = []
            for item in self.invalid_params:
                entry = {"param": item.param}
                if item.reason:
                    entry["reason"] = item.reason
                params.append(entry)
            out["invalidParams"] = params
        return out


class ProblemError(Exception):
    """Raised when an operation ends with a problem description."""

    def __init__(self, problem: ProblemDetails) -> None:
        message = problem.detail or problem.cause or problem.title or f"status {problem.status}"
        super().__init__(message)
        self.problem = problem

    @property
    def status(self) -> int:
        return self.problem.status


@dataclass(frozen=True)
class PlmnId:
    """A PLMN identity: mobile country code and mobile network code."""

    mcc: str = ""
    mnc: str = ""

    @classmethod
    def from_dict(cls, data: Mapping) -> PlmnId:
        data = _require_mapping(data, "plmnId")
        return cls(
            mcc=_require_text(data, "mcc", "plmnId"),
            mnc=_require_text(data, "mnc", "plmnId"),
        )


@dataclass(frozen=True)
class Guami:
    """Globally unique AMF identifier."""

    plmn_id: PlmnId | None = None
    amf_id: str = ""

    @classmethod
    def from_dict(cls, data: Mapping) -> Guami:
        data = _require_mapping(data, "guami")
        plmn = data.get("plmnId")
        return cls(
            plmn_id=PlmnId.from_dict(plmn) if plmn is not None else None,
            amf_id=_require_text(data, "amfId", "guami"),
        )


@dataclass
class PatchItem:
    """One JSON Patch operation."""

    op: str
    path: str
    value: Any = None
    from_: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"op": self.op, "path": self.path}
        if self.from_:
            out["from"] = self.from_
        if self.value is not None:
            out["value"] = self.value
        return out


@dataclass
class HandlerResponse:
    """What a request handler returns: status, body and headers."""

    status: int
    body: Any = None
    headers: dict[str, str] = field(default_factory=dict)