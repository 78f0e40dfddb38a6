"""Notifications the UDM sends to other network functions."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from http import HTTPStatus
from typing import Any

import httpx

from nudm.context import UDMContext, udm_self
from nudm.logs import get_logger
from nudm.models import HandlerResponse, ProblemDetails, ProblemError

DEFAULT_TIMEOUT = 10.0
DEREGISTRATION_ERROR = "DEREGISTRATION_NOTIFICATION_ERROR"

_log = get_logger("HTTP")
_callback_log = get_logger("CB")


def send_deregistration_notification(
    ue_id: str, callback_uri: str, deregistration_data: Mapping[str, Any]
) -> None:
    """Tell an AMF that a UE's registration was withdrawn.

    Raises ProblemError when the callback cannot be reached or refuses.
    """
    try:
        with httpx.Client(timeout=DEFAULT_TIMEOUT) as client:
            response = client.post(callback_uri, json=dict(deregistration_data))
    except httpx.HTTPError as exc:
        _log.error("deregistration notification for %s failed: %s", ue_id, exc)
        raise ProblemError(
            ProblemDetails(
                status=HTTPStatus.INTERNAL_SERVER_ERROR, cause=DEREGISTRATION_ERROR, detail=str(exc)
            )
        ) from exc
    if response.status_code >= HTTPStatus.MULTIPLE_CHOICES:
        detail = f"{response.status_code} {response.reason_phrase}"
        _log.error("deregistration notification for %s failed: %s", ue_id, detail)
        raise ProblemError(
            ProblemDetails(status=response.status_code, cause=DEREGISTRATION_ERROR, detail=detail)
        )


def data_change_notification(
    notify_items: Iterable[Mapping[str, Any]], supi: str, context: UDMContext | None = None
) -> None:
    """Send the changed items to every subscriber registered for the UE.

    Every subscriber is tried; if any fails, a ProblemError describing the
    last failure is raised afterwards.
    """
    context = context if context is not None else udm_self()
    ue = context.find_ue_by_supi(supi)
    if ue is None:
        raise ProblemError(ProblemDetails(status=HTTPStatus.NOT_FOUND, cause="USER_NOT_FOUND"))

    body = {"notifyItems": [dict(item) for item in notify_items]}
    problem: ProblemDetails | None = None
    with httpx.Client(timeout=DEFAULT_TIMEOUT) as client:
        for subscription in list(ue.udm_subs_to_notify.values()):
            url = subscription.get("originalCallbackReference", "")
            try:
                response = client.post(url, json=body)
            except httpx.HTTPError as exc:
                _log.error("%s", exc)
                problem = ProblemDetails(status=HTTPStatus.FORBIDDEN, detail=str(exc))
                continue
            if response.status_code >= HTTPStatus.MULTIPLE_CHOICES:
                detail = f"{response.status_code} {response.reason_phrase}"
                _log.error("%s", detail)
                problem = ProblemDetails(status=response.status_code, detail=detail)
    if problem is not None:
        raise ProblemError(problem)


def handle_data_change_notification(
    supi: str, body: Mapping[str, Any], context: UDMContext | None = None
) -> HandlerResponse:
    """Run the data change notification and shape its outcome as a response."""
    _callback_log.info("Handle DataChangeNotificationToNF")
    notify_items = body.get("notifyItems") or []
    try:
        data_change_notification(notify_items, supi, context)
    except ProblemError as error:
        return HandlerResponse(status=int(error.status), body=error.problem.to_dict())
    return HandlerResponse(status=HTTPStatus.NO_CONTENT)