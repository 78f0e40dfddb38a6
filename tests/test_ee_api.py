import json

import pytest

from nudm.context import UDMContext
from nudm.ee_api import create_app

GPSI = "msisdn-ue-one"
BASE = "/nudm-ee/v1"
SUBSCRIPTION = {"callbackReference": "http://localhost/cb"}


@pytest.fixture
def ctx():
    context = UDMContext()
    ue = context.new_ue("imsi-test1")
    ue.gpsi = GPSI
    return context


@pytest.fixture
def client(ctx):
    return create_app(ctx).test_client()


def _post(client, identity, body):
    return client.post(
        f"{BASE}/{identity}/ee-subscriptions", data=body, content_type="application/json"
    )


def _send_patch(client, path, body):
    return client.open(path, method="PATCH", data=body, content_type="application/json")


def test_index(client):
    response = client.get(f"{BASE}/")
    assert response.status_code == 200
    assert response.get_data(as_text=True) == "Hello World!"


def test_create_subscription(client, ctx):
    response = _post(client, GPSI, json.dumps(SUBSCRIPTION))
    assert response.status_code == 201
    assert response.mimetype == "application/json"
    assert response.get_json() == {"eeSubscription": SUBSCRIPTION}
    assert list(ctx.find_ue_by_gpsi(GPSI).ee_subscriptions.values()) == [SUBSCRIPTION]


def test_create_malformed_body(client):
    response = _post(client, GPSI, "{not json")
    assert response.status_code == 400
    body = response.get_json()
    assert body["title"] == "Malformed request syntax"
    assert body["detail"].startswith("[Request Body] ")


def test_create_non_object_body(client):
    response = _post(client, GPSI, "[1, 2]")
    assert response.status_code == 400
    assert response.get_json()["status"] == 400


def test_create_bad_identity(client):
    response = _post(client, "imsi-test1", json.dumps(SUBSCRIPTION))
    assert response.status_code == 400
    assert response.get_json()["cause"] == "MANDATORY_IE_INCORRECT"


def test_create_unknown_user(client):
    response = _post(client, "msisdn-nobody", json.dumps(SUBSCRIPTION))
    assert response.status_code == 404
    assert response.get_json()["cause"] == "USER_NOT_FOUND"


def test_delete_subscription(client, ctx):
    _post(client, GPSI, json.dumps(SUBSCRIPTION))
    ue = ctx.find_ue_by_gpsi(GPSI)
    (subscription_id,) = ue.ee_subscriptions
    response = client.delete(f"{BASE}/{GPSI}/ee-subscriptions/{subscription_id}")
    assert response.status_code == 204
    assert response.get_data() == b""
    assert ue.ee_subscriptions == {}


def test_update_existing_is_no_content(client, ctx):
    _post(client, GPSI, json.dumps(SUBSCRIPTION))
    (subscription_id,) = ctx.find_ue_by_gpsi(GPSI).ee_subscriptions
    patch_list = [{"op": "replace", "path": "/callbackReference", "value": "http://localhost/x"}]
    response = _send_patch(
        client, f"{BASE}/{GPSI}/ee-subscriptions/{subscription_id}", json.dumps(patch_list)
    )
    assert response.status_code == 204
    assert response.get_data() == b""


def test_update_missing_subscription(client):
    response = _send_patch(client, f"{BASE}/{GPSI}/ee-subscriptions/42", "[]")
    assert response.status_code == 404
    assert response.get_json()["cause"] == "SUBSCRIPTION_NOT_FOUND"


def test_update_malformed_patch_list(client):
    response = _send_patch(
        client, f"{BASE}/{GPSI}/ee-subscriptions/1", json.dumps({"op": "replace"})
    )
    assert response.status_code == 400
    assert response.get_json()["title"] == "Malformed request syntax"


def test_unknown_method_not_routed(client):
    response = client.put(f"{BASE}/{GPSI}/ee-subscriptions/1", data="[]")
    assert response.status_code == 405