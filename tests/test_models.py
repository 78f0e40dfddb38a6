import pytest

from nudm.models import (
    Guami,
    HandlerResponse,
    InvalidParam,
    PatchItem,
    PlmnId,
    ProblemDetails,
    ProblemError,
)


def test_problem_details_omits_empty_members():
    problem = ProblemDetails(status=404, cause="USER_NOT_FOUND")
    assert problem.to_dict() == {"status": 404, "cause": "USER_NOT_FOUND"}


def test_problem_details_full():
    problem = ProblemDetails(
        status=400,
        cause="MANDATORY_IE_INCORRECT",
        title="Malformed request syntax",
        detail="bad",
        invalid_params=[InvalidParam(param="ueIdentity", reason="incorrect format")],
    )
    out = problem.to_dict()
    assert out["invalidParams"] == [{"param": "ueIdentity", "reason": "incorrect format"}]
    assert out["title"] == "Malformed request syntax"
    assert out["detail"] == "bad"


def test_problem_details_empty_is_empty_dict():
    assert ProblemDetails().to_dict() == {}


def test_problem_error_carries_problem():
    problem = ProblemDetails(status=500, cause="SYSTEM_FAILURE", detail="boom")
    with pytest.raises(ProblemError) as info:
        raise ProblemError(problem)
    assert info.value.problem is problem
    assert info.value.status == 500
    assert str(info.value) == "boom"


def test_problem_error_message_falls_back_to_cause():
    err = ProblemError(ProblemDetails(status=404, cause="USER_NOT_FOUND"))
    assert str(err) == "USER_NOT_FOUND"


def test_plmn_id_from_dict():
    plmn = PlmnId.from_dict({"mcc": "208", "mnc": "93"})
    assert plmn == PlmnId(mcc="208", mnc="93")


def test_plmn_id_rejects_non_string():
    with pytest.raises(ValueError):
        PlmnId.from_dict({"mcc": 208, "mnc": "93"})


def test_plmn_id_rejects_non_mapping():
    with pytest.raises(ValueError):
        PlmnId.from_dict(["208", "93"])


def test_guami_from_dict():
    guami = Guami.from_dict({"plmnId": {"mcc": "208", "mnc": "93"}, "amfId": "cafe00"})
    assert guami.plmn_id == PlmnId("208", "93")
    assert guami.amf_id == "cafe00"


def test_guami_without_plmn():
    guami = Guami.from_dict({"amfId": "cafe00"})
    assert guami.plmn_id is None
    assert guami.amf_id == "cafe00"


def test_patch_item_to_dict_keeps_false_value():
    item = PatchItem(op="replace", path="/PurgeFlag", value=False)
    assert item.to_dict() == {"op": "replace", "path": "/PurgeFlag", "value": False}


def test_patch_item_to_dict_omits_none_and_sets_from():
    item = PatchItem(op="move", path="/a", from_="/b")
    assert item.to_dict() == {"op": "move", "path": "/a", "from": "/b"}


def test_handler_response_defaults():
    response = HandlerResponse(status=204)
    assert response.body is None
    assert response.headers == {}