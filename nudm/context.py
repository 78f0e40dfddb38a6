"""Runtime state of the UDM: its own identity and the per-UE contexts."""

from __future__ import annotations

import heapq
import json
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from nudm.config import Keys, PlmnSupportItem
from nudm.models import Guami

MAX_INT32 = 2**31 - 1


class LocationUri(Enum):
    """Kinds of resource location a UE context can build."""

    AMF_3GPP_ACCESS_REGISTRATION = 0
    AMF_NON_3GPP_ACCESS_REGISTRATION = 1
    SMF_REGISTRATION = 2
    SDM_SUBSCRIPTION = 3
    SHARED_DATA_SUBSCRIPTION = 4


class IdGenerator:
    """Hands out integer IDs from a closed range, reusing freed ones first."""

    def __init__(self, min_value: int = 1, max_value: int = MAX_INT32) -> None:
        if min_value > max_value:
            raise ValueError("min_value must not exceed max_value")
        self.min_value = min_value
        self.max_value = max_value
        self._next = min_value
        self._freed: list[int] = []
        self._freed_set: set[int] = set()
        self._lock = threading.Lock()

    def allocate(self) -> int:
        """Return an unused ID, raising RuntimeError when the range is used up."""
        with self._lock:
            if self._freed:
                value = heapq.heappop(self._freed)
                self._freed_set.discard(value)
                return value
            if self._next > self.max_value:
                raise RuntimeError("no ID available")
            value = self._next
            self._next += 1
            return value

    def free(self, id_: int) -> None:
        """Give an ID back; IDs never handed out are ignored."""
        with self._lock:
            if self.min_value <= id_ < self._next and id_ not in self._freed_set:
                heapq.heappush(self._freed, id_)
                self._freed_set.add(id_)


def _as_guami(value: Any) -> Guami | None:
    if value is None or isinstance(value, Guami):
        return value
    return Guami.from_dict(value)


def _same_guami(stored: Any, incoming: Any) -> bool:
    stored_guami = _as_guami(stored)
    incoming_guami = _as_guami(incoming)
    if stored_guami is None or incoming_guami is None:
        return False
    if (stored_guami.plmn_id is None) != (incoming_guami.plmn_id is None):
        return False
    if stored_guami.plmn_id is None:
        return False
    return (
        stored_guami.plmn_id.mcc == incoming_guami.plmn_id.mcc
        and stored_guami.plmn_id.mnc == incoming_guami.plmn_id.mnc
        and stored_guami.amf_id == incoming_guami.amf_id
    )


@dataclass
class UdmUeContext:
    """Everything the UDM keeps about one UE, keyed by its SUPI."""

    supi: str = ""
    gpsi: str = ""
    external_group_id: str = ""
    nssai: dict | None = None
    amf_3gpp_access_registration: dict | None = None
    amf_non_3gpp_access_registration: dict | None = None
    access_and_mobility_subscription_data: dict | None = None
    smf_sel_subs_data: dict | None = None
    ue_ctxt_in_smf_data: dict | None = None
    trace_data: dict | None = None
    session_management_subs_data: dict[str, dict] = field(default_factory=dict)
    subs_data_sets: dict | None = None
    subscribe_to_notif_change: dict[str, dict] = field(default_factory=dict)
    subscribe_to_notif_shared_data_change: dict | None = None
    pdu_session_id: str = ""
    udr_uri: str = ""
    udm_subs_to_notify: dict[str, dict] = field(default_factory=dict)
    ee_subscriptions: dict[str, dict] = field(default_factory=dict)
    trace_data_response: dict = field(default_factory=dict)
    owner: UDMContext | None = field(default=None, repr=False, compare=False)

    def _udm(self) -> UDMContext:
        return self.owner if self.owner is not None else udm_self()

    def create_subscription_to_notif_change(self, subscription_id: str, body: dict) -> None:
        """Record a data change subscription unless one with this ID exists."""
        self.subscribe_to_notif_change.setdefault(subscription_id, body)

    def location_uri(self, kind: LocationUri) -> str:
        """Return the URI of one of this UE's registrations, or ''."""
        base = f"{self._udm().ipv4_uri()}/nudm-uecm/v1/{self.supi}/registrations"
        if kind is LocationUri.AMF_3GPP_ACCESS_REGISTRATION:
            return base + "/amf-3gpp-access"
        if kind is LocationUri.AMF_NON_3GPP_ACCESS_REGISTRATION:
            return base + "/amf-non-3gpp-access"
        if kind is LocationUri.SMF_REGISTRATION:
            return base + "/smf-registrations/" + self.pdu_session_id
        return ""

    def location_uri2(self, kind: LocationUri, supi: str) -> str:
        """Return the URI of an SDM subscription collection, or ''."""
        if kind is LocationUri.SDM_SUBSCRIPTION:
            return f"{self._udm().ipv4_uri()}/nudm-sdm/v1/{supi}/sdm-subscriptions/"
        return ""

    def same_as_stored_guami_3gpp(self, guami: Guami | Mapping) -> bool:
        """Whether the GUAMI matches the stored 3GPP access registration."""
        if self.amf_3gpp_access_registration is None:
            return False
        return _same_guami(self.amf_3gpp_access_registration.get("guami"), guami)

    def same_as_stored_guami_non_3gpp(self, guami: Guami | Mapping) -> bool:
        """Whether the GUAMI matches the stored non-3GPP access registration."""
        if self.amf_non_3gpp_access_registration is None:
            return False
        return _same_guami(self.amf_non_3gpp_access_registration.get("guami"), guami)


def _nssai_key(snssai: Any) -> str:
    if isinstance(snssai, Mapping):
        ordered = {key: snssai[key] for key in ("sst", "sd") if key in snssai}
        ordered.update((key, value) for key, value in snssai.items() if key not in ordered)
        snssai = ordered
    return json.dumps(snssai, separators=(",", ":"))


@dataclass
class UDMContext:
    """The UDM's own identity, services and pool of UE contexts."""

    name: str = ""
    nf_id: str = ""
    group_id: str = ""
    register_ipv4: str = ""
    binding_ipv4: str = ""
    uri_scheme: str = "http"
    nf_service: dict[str, dict] = field(default_factory=dict)
    nrf_uri: str = ""
    gpsi_supi_list: dict = field(default_factory=dict)
    shared_subs_data_map: dict[str, dict] = field(default_factory=dict)
    subscription_of_shared_data_change: dict[str, dict] = field(default_factory=dict)
    keys: Keys | None = None
    ee_subscription_id_generator: IdGenerator = field(default_factory=IdGenerator)
    plmn_list: list[PlmnSupportItem] = field(default_factory=list)
    sbi_port: int = 0

    def __post_init__(self) -> None:
        self._ue_pool: dict[str, UdmUeContext] = {}
        self._pool_lock = threading.Lock()

    def manage_sm_data(
        self, sm_data: Iterable[Mapping], snssai: str, dnn: str
    ) -> tuple[dict[str, Mapping], str, list[dict], list[dict]]:
        """Index SM subscription data by slice.

        Returns the data keyed by the JSON form of each slice, the last slice key
        containing ``snssai``, every DNN configuration named ``dnn`` and the DNN
        configurations of every slice.
        """
        by_slice: dict[str, Mapping] = {}
        snssai_key = ""
        configs_by_dnn: list[dict] = []
        all_dnns: list[dict] = []
        for entry in sm_data:
            key = _nssai_key(entry.get("singleNssai"))
            by_slice[key] = entry
            configurations = dict(entry.get("dnnConfigurations") or {})
            all_dnns.append(configurations)
            if snssai in key:
                snssai_key = key
            if dnn in configurations:
                configs_by_dnn.append(configurations[dnn])
        return by_slice, snssai_key, configs_by_dnn, all_dnns

    def _find_or_create(self, supi: str) -> UdmUeContext:
        ue = self.find_ue_by_supi(supi)
        return ue if ue is not None else self.new_ue(supi)

    def create_subs_data_sets_for_ue(self, supi: str, body: dict) -> None:
        self._find_or_create(supi).subs_data_sets = body

    def create_trace_data_for_ue(self, supi: str, body: dict) -> None:
        self._find_or_create(supi).trace_data = body

    def create_sub_to_notif_shared_data(self, subscription_id: str, body: dict) -> None:
        with self._pool_lock:
            self.subscription_of_shared_data_change[subscription_id] = body

    def create_ue_context_in_smf_data_for_ue(self, supi: str, body: dict) -> None:
        self._find_or_create(supi).ue_ctxt_in_smf_data = body

    def create_smf_selection_subs_data_for_ue(self, supi: str, body: dict) -> None:
        self._find_or_create(supi).smf_sel_subs_data = body

    def create_access_mobility_subs_data_for_ue(self, supi: str, body: dict) -> None:
        self._find_or_create(supi).access_and_mobility_subscription_data = body

    def new_ue(self, supi: str) -> UdmUeContext:
        """Create a fresh UE context, replacing any stored under the same SUPI."""
        ue = UdmUeContext(supi=supi, owner=self)
        with self._pool_lock:
            self._ue_pool[supi] = ue
        return ue

    def find_ue_by_supi(self, supi: str) -> UdmUeContext | None:
        with self._pool_lock:
            return self._ue_pool.get(supi)

    def find_ue_by_gpsi(self, gpsi: str) -> UdmUeContext | None:
        return next((ue for ue in self.ues() if ue.gpsi == gpsi), None)

    def ues(self) -> list[UdmUeContext]:
        """Return a snapshot of all UE contexts."""
        with self._pool_lock:
            return list(self._ue_pool.values())

    def amf_3gpp_reg_context_exists(self, supi: str) -> bool:
        ue = self.find_ue_by_supi(supi)
        return ue is not None and ue.amf_3gpp_access_registration is not None

    def amf_non_3gpp_reg_context_exists(self, supi: str) -> bool:
        ue = self.find_ue_by_supi(supi)
        return ue is not None and ue.amf_non_3gpp_access_registration is not None

    def smf_reg_context_not_exists(self, supi: str) -> bool:
        ue = self.find_ue_by_supi(supi)
        return ue is None or ue.pdu_session_id == ""

    def create_amf_3gpp_reg_context(self, supi: str, body: dict) -> None:
        self._find_or_create(supi).amf_3gpp_access_registration = body

    def create_amf_non_3gpp_reg_context(self, supi: str, body: dict) -> None:
        self._find_or_create(supi).amf_non_3gpp_access_registration = body

    def create_smf_reg_context(self, supi: str, pdu_session_id: str) -> None:
        """Record the PDU session ID unless one is already stored."""
        ue = self._find_or_create(supi)
        if ue.pdu_session_id == "":
            ue.pdu_session_id = pdu_session_id

    def get_amf_3gpp_reg_context(self, supi: str) -> dict | None:
        ue = self.find_ue_by_supi(supi)
        return ue.amf_3gpp_access_registration if ue is not None else None

    def get_amf_non_3gpp_reg_context(self, supi: str) -> dict | None:
        ue = self.find_ue_by_supi(supi)
        return ue.amf_non_3gpp_access_registration if ue is not None else None

    def ipv4_uri(self) -> str:
        return f"{self.uri_scheme}://{self.register_ipv4}:{self.sbi_port}"

    def sdm_uri(self) -> str:
        """Base URI of the subscriber data management service."""
        return self.ipv4_uri() + "/nudm-sdm/v1"

    def init_nf_service(self, service_names: Iterable[str], version: str) -> None:
        """Fill the NF service table, one entry per service name."""
        version_uri = "v" + version.split(".")[0]
        for index, name in enumerate(service_names):
            self.nf_service[name] = {
                "serviceInstanceId": str(index),
                "serviceName": name,
                "versions": [{"apiFullVersion": version, "apiVersionInUri": version_uri}],
                "scheme": self.uri_scheme,
                "nfServiceStatus": "REGISTERED",
                "apiPrefix": self.ipv4_uri(),
                "ipEndPoints": [
                    {
                        "ipv4Address": self.register_ipv4,
                        "transport": "TCP",
                        "port": self.sbi_port,
                    }
                ],
            }


def mapping_shared_data(shared_data: Iterable[Mapping]) -> dict[str, Mapping]:
    """Key shared data records by their sharedDataId."""
    return {item.get("sharedDataId", ""): item for item in shared_data}


def obtain_required_shared_data(shared_ids: Iterable[str], response: Iterable[Mapping]) -> list:
    """Pick, for each requested ID, the last record whose key contains it.

    An ID that matches nothing yields an empty record in its place.
    """
    by_id = mapping_shared_data(response)
    result = []
    for wanted in shared_ids:
        matched = None
        for key in by_id:
            if wanted in key:
                matched = key
        result.append(by_id[matched] if matched is not None else {})
    return result


def corresponding_supi(identity_data: Mapping) -> str:
    """Return the last IMSI-type entry of the SUPI list, or ''."""
    identifier = ""
    for supi in identity_data.get("supiList") or []:
        if "imsi" in supi:
            identifier = supi
    return identifier


_udm_context = UDMContext()


def udm_self() -> UDMContext:
    """Return the process-wide UDM context."""
    return _udm_context