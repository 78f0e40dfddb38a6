"""Event exposure procedures: create, delete and update EE subscriptions."""

from __future__ import annotations

from collections.abc import Iterable
from http import HTTPStatus
from typing import Any

from nudm.context import UDMContext, UdmUeContext, udm_self
from nudm.logs import get_logger
from nudm.models import HandlerResponse, InvalidParam, ProblemDetails, ProblemError

GPSI_PREFIXES = ("msisdn-", "extid-")
EXTERNAL_GROUP_PREFIX = "extgroupid-"
ANY_UE = "anyUE"

_log = get_logger("EE")


def _incorrect_identity() -> ProblemError:
    return ProblemError(
        ProblemDetails(
            status=HTTPStatus.BAD_REQUEST,
            cause="MANDATORY_IE_INCORRECT",
            invalid_params=[InvalidParam(param="ueIdentity", reason="incorrect format")],
        )
    )


def _subscription_not_found() -> ProblemError:
    return ProblemError(
        ProblemDetails(status=HTTPStatus.NOT_FOUND, cause="SUBSCRIPTION_NOT_FOUND")
    )


def _allocate_id(context: UDMContext) -> str:
    try:
        return str(context.ee_subscription_id_generator.allocate())
    except RuntimeError:
        raise ProblemError(
            ProblemDetails(
                status=HTTPStatus.INTERNAL_SERVER_ERROR, cause="UNSPECIFIED_NF_FAILURE"
            )
        ) from None


def _is_gpsi(ue_identity: str) -> bool:
    return ue_identity.startswith(GPSI_PREFIXES)


def _group_members(context: UDMContext, ue_identity: str) -> list[UdmUeContext]:
    return [ue for ue in context.ues() if ue.external_group_id == ue_identity]


def create_ee_subscription(
    ue_identity: str, subscription: dict, context: UDMContext | None = None
) -> dict[str, Any]:
    """Store an EE subscription for the UEs named by the identity.

    Returns the created subscription; raises ProblemError when the identity
    is malformed, the UE is unknown or no subscription ID is left.
    """
    context = context if context is not None else udm_self()
    _log.debug("ueIdentity: %s", ue_identity)
    created = {"eeSubscription": subscription}

    if _is_gpsi(ue_identity):
        ue = context.find_ue_by_gpsi(ue_identity)
        if ue is None:
            raise ProblemError(
                ProblemDetails(status=HTTPStatus.NOT_FOUND, cause="USER_NOT_FOUND")
            )
        ue.ee_subscriptions[_allocate_id(context)] = subscription
        return created

    if ue_identity.startswith(EXTERNAL_GROUP_PREFIX):
        subscription_id = _allocate_id(context)
        for ue in _group_members(context, ue_identity):
            ue.ee_subscriptions[subscription_id] = subscription
        return created

    if ue_identity == ANY_UE:
        subscription_id = _allocate_id(context)
        for ue in context.ues():
            ue.ee_subscriptions[subscription_id] = subscription
        return created

    raise _incorrect_identity()


def delete_ee_subscription(
    ue_identity: str, subscription_id: str, context: UDMContext | None = None
) -> None:
    """Remove an EE subscription and give its ID back to the generator."""
    context = context if context is not None else udm_self()

    if _is_gpsi(ue_identity):
        ue = context.find_ue_by_gpsi(ue_identity)
        if ue is not None:
            ue.ee_subscriptions.pop(subscription_id, None)
    elif ue_identity.startswith(EXTERNAL_GROUP_PREFIX):
        for ue in _group_members(context, ue_identity):
            ue.ee_subscriptions.pop(subscription_id, None)
    elif ue_identity == ANY_UE:
        for ue in context.ues():
            ue.ee_subscriptions.pop(subscription_id, None)

    try:
        numeric_id = int(subscription_id, 10)
    except (TypeError, ValueError) as exc:
        _log.warning("subscriptionID convert type error: %s", exc)
        return
    context.ee_subscription_id_generator.free(numeric_id)


def _log_patch(patch_list: Iterable[Any]) -> None:
    for item in patch_list:
        _log.debug("patch item: %s", item)


def update_ee_subscription(
    ue_identity: str,
    subscription_id: str,
    patch_list: Iterable[Any],
    context: UDMContext | None = None,
) -> None:
    """Check that the subscription exists and accept the patch items.

    Raises ProblemError when a single UE has no such subscription or the
    identity is malformed.
    """
    context = context if context is not None else udm_self()
    patch_list = list(patch_list)

    if _is_gpsi(ue_identity):
        ue = context.find_ue_by_gpsi(ue_identity)
        if ue is None or subscription_id not in ue.ee_subscriptions:
            raise _subscription_not_found()
        _log_patch(patch_list)
        return

    if ue_identity.startswith(EXTERNAL_GROUP_PREFIX):
        for ue in _group_members(context, ue_identity):
            if subscription_id in ue.ee_subscriptions:
                _log_patch(patch_list)
        return

    if ue_identity == ANY_UE:
        for ue in context.ues():
            if subscription_id in ue.ee_subscriptions:
                _log_patch(patch_list)
        return

    raise _incorrect_identity()


def _problem_response(error: ProblemError) -> HandlerResponse:
    return HandlerResponse(status=int(error.status), body=error.problem.to_dict())


def handle_create_ee_subscription(
    ue_identity: str, body: dict, context: UDMContext | None = None
) -> HandlerResponse:
    """Run the create procedure and shape its outcome as a response."""
    _log.info("Handle Create EE Subscription")
    try:
        created = create_ee_subscription(ue_identity, body, context)
    except ProblemError as error:
        return _problem_response(error)
    return HandlerResponse(status=HTTPStatus.CREATED, body=created)


def handle_delete_ee_subscription(
    ue_identity: str, subscription_id: str, context: UDMContext | None = None
) -> HandlerResponse:
    """Run the delete procedure; the answer is always 204."""
    delete_ee_subscription(ue_identity, subscription_id, context)
    return HandlerResponse(status=HTTPStatus.NO_CONTENT)


def handle_update_ee_subscription(
    ue_identity: str,
    subscription_id: str,
    patch_list: Iterable[Any],
    context: UDMContext | None = None,
) -> HandlerResponse:
    """Run the update procedure and shape its outcome as a response."""
    _log.info("Handle Update EE subscription")
    _log.warning("Update EE Subscription does not modify stored subscriptions")
    try:
        update_ee_subscription(ue_identity, subscription_id, patch_list, context)
    except ProblemError as error:
        return _problem_response(error)
    return HandlerResponse(status=HTTPStatus.NO_CONTENT)