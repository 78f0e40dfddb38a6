"""HTTP routes of the Nudm_EE service."""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import Any

from flask import Blueprint, Flask, Response, request

from nudm.context import UDMContext, udm_self
from nudm.event_exposure import (
    handle_create_ee_subscription,
    handle_delete_ee_subscription,
    handle_update_ee_subscription,
)
from nudm.logs import get_logger
from nudm.models import HandlerResponse, PatchItem, ProblemDetails

URL_PREFIX = "/nudm-ee/v1"
JSON_TYPE = "application/json"

_log = get_logger("EE")


def _json(status: int, body: Any) -> Response:
    return Response(json.dumps(body), status=int(status), mimetype=JSON_TYPE)


def _malformed(error: Exception) -> Response:
    detail = f"[Request Body] {error}"
    _log.error(detail)
    problem = ProblemDetails(
        status=HTTPStatus.BAD_REQUEST, title="Malformed request syntax", detail=detail
    )
    return _json(HTTPStatus.BAD_REQUEST, problem.to_dict())


def _reply(result: HandlerResponse) -> Response:
    try:
        payload = json.dumps(result.body)
    except (TypeError, ValueError) as exc:
        _log.error("%s", exc)
        problem = ProblemDetails(
            status=HTTPStatus.INTERNAL_SERVER_ERROR, cause="SYSTEM_FAILURE", detail=str(exc)
        )
        return _json(HTTPStatus.INTERNAL_SERVER_ERROR, problem.to_dict())
    return Response(payload, status=int(result.status), mimetype=JSON_TYPE, headers=result.headers)


def _parse_subscription(raw: bytes) -> dict:
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")
    return data


def _parse_patch_list(raw: bytes) -> list[PatchItem]:
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("expected a JSON array")
    items = []
    for entry in data:
        if not isinstance(entry, dict):
            raise ValueError("expected patch items to be JSON objects")
        op, path, source = entry.get("op", ""), entry.get("path", ""), entry.get("from", "")
        if not all(isinstance(text, str) for text in (op, path, source)):
            raise ValueError("patch item op, path and from must be strings")
        items.append(PatchItem(op=op, path=path, value=entry.get("value"), from_=source))
    return items


def create_blueprint(context: UDMContext | None = None) -> Blueprint:
    """Build the EE blueprint; without a context the process-wide one is used."""
    blueprint = Blueprint("nudm_ee", __name__, url_prefix=URL_PREFIX)

    def current() -> UDMContext:
        return context if context is not None else udm_self()

    @blueprint.get("/")
    def index() -> Response:
        return Response("Hello World!", status=HTTPStatus.OK, mimetype="text/plain")

    @blueprint.post("/<ue_identity>/ee-subscriptions")
    def create_subscription(ue_identity: str) -> Response:
        try:
            subscription = _parse_subscription(request.get_data())
        except ValueError as exc:
            return _malformed(exc)
        return _reply(handle_create_ee_subscription(ue_identity, subscription, current()))

    @blueprint.delete("/<ue_identity>/ee-subscriptions/<subscription_id>")
    def delete_subscription(ue_identity: str, subscription_id: str) -> Response:
        result = handle_delete_ee_subscription(ue_identity, subscription_id, current())
        return Response(status=int(result.status))

    @blueprint.patch("/<ue_identity>/ee-subscriptions/<subscription_id>")
    def update_subscription(ue_identity: str, subscription_id: str) -> Response:
        try:
            patch_list = _parse_patch_list(request.get_data())
        except ValueError as exc:
            return _malformed(exc)
        result = handle_update_ee_subscription(ue_identity, subscription_id, patch_list, current())
        if result.status == HTTPStatus.NO_CONTENT:
            return Response(status=int(result.status))
        return _reply(result)

    return blueprint


def create_app(context: UDMContext | None = None) -> Flask:
    """Build a Flask application serving the EE routes."""
    app = Flask(__name__)
    app.register_blueprint(create_blueprint(context))
    return app