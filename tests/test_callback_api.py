import json
from http import HTTPStatus

import httpx
import respx

from nudm.callback_api import create_app
from nudm.context import UDMContext

NOTIFY_URL = "http://nf.example.com/notify"


def client_for(context):
    return create_app(context).test_client()


def test_index():
    response = client_for(UDMContext()).get("/")
    assert response.status_code == HTTPStatus.OK
    assert response.get_data(as_text=True) == "Hello World!"


def test_malformed_body():
    response = client_for(UDMContext()).post(
        "/sdm-subscriptions", data="not json", content_type="application/json"
    )
    assert response.status_code == HTTPStatus.BAD_REQUEST
    body = response.get_json()
    assert body["title"] == "Malformed request syntax"
    assert body["detail"].startswith("[Request Body]")


def test_notify_items_must_be_list():
    response = client_for(UDMContext()).post("/sdm-subscriptions", json={"notifyItems": "x"})
    assert response.status_code == HTTPStatus.BAD_REQUEST


def test_unknown_ue_is_not_found():
    response = client_for(UDMContext()).post("/sdm-subscriptions", json={"notifyItems": []})
    assert response.status_code == HTTPStatus.NOT_FOUND
    assert response.get_json()["cause"] == "USER_NOT_FOUND"


def test_notification_forwarded_to_subscriber():
    context = UDMContext()
    ue = context.new_ue("")
    ue.udm_subs_to_notify["sub"] = {"originalCallbackReference": NOTIFY_URL}
    items = [{"resourceId": "am-data"}]
    with respx.mock:
        route = respx.post(NOTIFY_URL).mock(return_value=httpx.Response(HTTPStatus.NO_CONTENT))
        response = client_for(context).post("/sdm-subscriptions", json={"notifyItems": items})
    assert response.status_code == HTTPStatus.NO_CONTENT
    assert json.loads(route.calls.last.request.content) == {"notifyItems": items}


def test_failed_subscriber_reported():
    context = UDMContext()
    ue = context.new_ue("")
    ue.udm_subs_to_notify["sub"] = {"originalCallbackReference": NOTIFY_URL}
    with respx.mock:
        respx.post(NOTIFY_URL).mock(side_effect=httpx.ConnectError("refused"))
        response = client_for(context).post("/sdm-subscriptions", json={"notifyItems": []})
    assert response.status_code == HTTPStatus.FORBIDDEN
    assert response.get_json()["status"] == HTTPStatus.FORBIDDEN