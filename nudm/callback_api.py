"""HTTP routes on which other network functions call the UDM back."""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import Any

from flask import Blueprint, Flask, Response, request

from nudm.context import UDMContext, udm_self
from nudm.logs import get_logger
from nudm.models import HandlerResponse, ProblemDetails
from nudm.notify import handle_data_change_notification

JSON_TYPE = "application/json"

_log = get_logger("CB")


def _json(status: int, body: Any) -> Response:
    return Response(json.dumps(body), status=int(status), mimetype=JSON_TYPE)


def _parse_data_change_notify(raw: bytes) -> dict[str, Any]:
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")
    items = data.get("notifyItems")
    if items is not None:
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            raise ValueError("notifyItems must be a list of JSON objects")
    return data


def _reply(result: HandlerResponse) -> Response:
    if result.body is None:
        return Response(status=int(result.status), headers=result.headers)
    try:
        payload = json.dumps(result.body)
    except (TypeError, ValueError) as exc:
        _log.error("%s", exc)
        problem = ProblemDetails(
            status=HTTPStatus.INTERNAL_SERVER_ERROR, cause="SYSTEM_FAILURE", detail=str(exc)
        )
        return _json(HTTPStatus.INTERNAL_SERVER_ERROR, problem.to_dict())
    return Response(payload, status=int(result.status), mimetype=JSON_TYPE, headers=result.headers)


def create_blueprint(context: UDMContext | None = None) -> Blueprint:
    """Build the callback blueprint; without a context the process-wide one is used."""
    blueprint = Blueprint("nudm_callback", __name__)

    def current() -> UDMContext:
        return context if context is not None else udm_self()

    @blueprint.get("/")
    def index() -> Response:
        return Response("Hello World!", status=HTTPStatus.OK, mimetype="text/plain")

    @blueprint.post("/sdm-subscriptions")
    def data_change_notification_to_nf() -> Response:
        try:
            body = _parse_data_change_notify(request.get_data())
        except ValueError as exc:
            detail = f"[Request Body] {exc}"
            _log.error(detail)
            problem = ProblemDetails(
                status=HTTPStatus.BAD_REQUEST, title="Malformed request syntax", detail=detail
            )
            return _json(HTTPStatus.BAD_REQUEST, problem.to_dict())
        supi = request.view_args.get("supi", "") if request.view_args else ""
        return _reply(handle_data_change_notification(supi, body, current()))

    return blueprint


def create_app(context: UDMContext | None = None) -> Flask:
    """Build a Flask application serving the callback routes."""
    app = Flask(__name__)
    app.register_blueprint(create_blueprint(context))
    return app