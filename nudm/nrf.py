"""Client side of the NRF: NF registration, update, deregistration and discovery."""

from __future__ import annotations

import time
from collections.abc import Iterable, Mapping
from http import HTTPStatus
from typing import Any

import httpx

from nudm.context import UDMContext, udm_self
from nudm.logs import get_logger
from nudm.models import PatchItem, ProblemDetails

NFM_PATH = "/nnrf-nfm/v1"
DISCOVERY_PATH = "/nnrf-disc/v1"
DEFAULT_TIMEOUT = 10.0
DEFAULT_RETRY_INTERVAL = 2.0

_log = get_logger("Consumer")


class NrfError(Exception):
    """Raised when the NRF refuses a request or cannot be reached."""

    def __init__(self, message: str, problem: ProblemDetails | None = None) -> None:
        super().__init__(message)
        self.problem = problem

    @property
    def status(self) -> int | None:
        return self.problem.status if self.problem is not None else None


def _problem_from_response(response: httpx.Response) -> ProblemDetails:
    try:
        data = response.json()
    except ValueError:
        data = None
    if not isinstance(data, Mapping):
        return ProblemDetails(status=response.status_code, detail=response.reason_phrase)

    def text(key: str) -> str:
        value = data.get(key)
        return value if isinstance(value, str) else ""

    status = data.get("status")
    if isinstance(status, bool) or not isinstance(status, int):
        status = response.status_code
    return ProblemDetails(
        status=status, cause=text("cause"), title=text("title"), detail=text("detail")
    )


def _json_object(response: httpx.Response) -> dict[str, Any]:
    if not response.content:
        return {}
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _instance_url(nrf_uri: str, nf_instance_id: str) -> str:
    return f"{nrf_uri}{NFM_PATH}/nf-instances/{nf_instance_id}"


def build_nf_instance(context: UDMContext | None = None) -> dict[str, Any]:
    """Build the NF profile the UDM registers at the NRF."""
    context = context if context is not None else udm_self()
    profile: dict[str, Any] = {
        "nfInstanceId": context.nf_id,
        "nfType": "UDM",
        "nfStatus": "REGISTERED",
    }
    services = list(context.nf_service.values())
    if services:
        profile["nfServices"] = services
    plmns = [{"mcc": item.plmn_id.mcc, "mnc": item.plmn_id.mnc} for item in context.plmn_list]
    if plmns:
        profile["plmnList"] = plmns
    udm_info: dict[str, Any] = {}
    if context.group_id:
        udm_info["groupId"] = context.group_id
    profile["udmInfo"] = udm_info
    if not context.register_ipv4:
        raise NrfError("UDM Address is empty")
    profile["ipv4Addresses"] = [context.register_ipv4]
    return profile


def register_nf_instance(
    nrf_uri: str,
    nf_instance_id: str,
    profile: Mapping[str, Any],
    retry_interval: float = DEFAULT_RETRY_INTERVAL,
) -> tuple[dict[str, Any], str, str]:
    """Register at the NRF, retrying until it accepts.

    Returns the profile the NRF sent back, the NRF base URI taken from the
    Location header and the instance ID found there (both '' on an update).
    """
    url = _instance_url(nrf_uri, nf_instance_id)
    with httpx.Client(timeout=DEFAULT_TIMEOUT) as client:
        while True:
            try:
                response = client.put(url, json=dict(profile))
            except httpx.HTTPError as exc:
                _log.error("UDM register to NRF Error[%s]", exc)
                time.sleep(retry_interval)
                continue

            status = response.status_code
            if status == HTTPStatus.OK:
                return _json_object(response), "", ""
            if status == HTTPStatus.CREATED:
                location = response.headers.get("Location", "")
                marker = location.find("/nnrf-nfm/")
                if marker < 0:
                    raise NrfError(f"NRF returned an unusable Location header: {location!r}")
                resource_nrf_uri = location[:marker]
                retrieved_id = location[location.rfind("/") + 1:]
                return _json_object(response), resource_nrf_uri, retrieved_id

            _log.error("NRF return wrong status code %d", status)
            time.sleep(retry_interval)


def deregister_nf_instance(context: UDMContext | None = None) -> None:
    """Remove the UDM's registration from the NRF."""
    context = context if context is not None else udm_self()
    _log.info("Send Deregister NFInstance")
    try:
        with httpx.Client(timeout=DEFAULT_TIMEOUT) as client:
            response = client.delete(_instance_url(context.nrf_uri, context.nf_id))
    except httpx.HTTPError as exc:
        raise NrfError("server no response") from exc
    if response.status_code >= HTTPStatus.MULTIPLE_CHOICES:
        problem = _problem_from_response(response)
        raise NrfError(f"{response.status_code} {response.reason_phrase}", problem)


def update_nf_instance(
    patch_items: Iterable[PatchItem], context: UDMContext | None = None
) -> dict[str, Any]:
    """Patch the UDM's profile at the NRF and return the updated profile."""
    context = context if context is not None else udm_self()
    _log.debug("Send Update NFInstance")
    body = [item.to_dict() for item in patch_items]
    try:
        with httpx.Client(timeout=DEFAULT_TIMEOUT) as client:
            response = client.patch(
                _instance_url(context.nrf_uri, context.nf_id),
                json=body,
                headers={"Content-Type": "application/json-patch+json"},
            )
    except httpx.HTTPError as exc:
        raise NrfError("server no response") from exc
    if response.status_code >= HTTPStatus.MULTIPLE_CHOICES:
        _log.error("UpdateNFInstance received error response: %d", response.status_code)
        problem = _problem_from_response(response)
        raise NrfError(f"{response.status_code} {response.reason_phrase}", problem)
    return _json_object(response)


def search_nf_instances(
    nrf_uri: str, target_nf_type: str, requester_nf_type: str
) -> dict[str, Any]:
    """Ask the NRF for instances of a network function type."""
    params = {"target-nf-type": target_nf_type, "requester-nf-type": requester_nf_type}
    try:
        with httpx.Client(timeout=DEFAULT_TIMEOUT) as client:
            response = client.get(f"{nrf_uri}{DISCOVERY_PATH}/nf-instances", params=params)
    except httpx.HTTPError as exc:
        raise NrfError(f"NF discovery failed: {exc}") from exc
    if response.status_code == HTTPStatus.TEMPORARY_REDIRECT:
        raise NrfError("Temporary Redirect For Non NRF Consumer")
    if response.status_code >= HTTPStatus.MULTIPLE_CHOICES:
        problem = _problem_from_response(response)
        raise NrfError(f"{response.status_code} {response.reason_phrase}", problem)
    return _json_object(response)