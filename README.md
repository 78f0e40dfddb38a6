# nudm

`nudm` holds building blocks of a 5G Unified Data Management (UDM) network
function: per-UE state, the Nudm event exposure interface and the
data-change callback endpoint as Flask applications, a client for NRF
registration and discovery, and the sequence-number arithmetic used when
authentication vectors are generated.

Install with `pip install .` (add `.[test]` for the test tools).

## Modules

| Module | Contents |
| --- | --- |
| `nudm.models` | `ProblemDetails`, `ProblemError`, `InvalidParam`, `PlmnId`, `Guami`, `PatchItem`, `HandlerResponse` |
| `nudm.logs` | `get_logger(category)`, `set_log_level(level)`, `set_report_caller(flag)` |
| `nudm.config` | `Config`, `Configuration`, `Sbi`, `Tls`, `Keys`, `Info`, `PlmnSupportItem`, `load_config`, `check_config_version` |
| `nudm.context` | `UDMContext`, `UdmUeContext`, `IdGenerator`, `LocationUri`, `udm_self()`, `mapping_shared_data`, `obtain_required_shared_data`, `corresponding_supi` |
| `nudm.event_exposure` | Create, update and delete EE subscriptions, plus `handle_*` wrappers returning `HandlerResponse` |
| `nudm.ee_api` | `create_blueprint(context)` and `create_app(context)` for `/nudm-ee/v1` |
| `nudm.nrf` | `build_nf_instance`, `register_nf_instance`, `deregister_nf_instance`, `update_nf_instance`, `search_nf_instances`, `NrfError` |
| `nudm.notify` | `send_deregistration_notification`, `data_change_notification`, `handle_data_change_notification` |
| `nudm.callback_api` | `create_blueprint(context)` and `create_app(context)` for the callback endpoint |
| `nudm.auth_sequence` | `strict_hex`, `next_sequence_number`, `resync_sequence_number`, `sequence_number_patch` |

## Configuration

The configuration file is YAML, and `check_config_version` accepts only
version `1.0.0`:

```yaml
info:
  version: 1.0.0
  description: UDM initial local configuration
configuration:
  udmName: udm
  sbi:
    scheme: http
    registerIPv4: 127.0.0.3
    bindingIPv4: 127.0.0.3
    port: 8000
  serviceNameList:
    - nudm-sdm
    - nudm-uecm
    - nudm-ueau
    - nudm-ee
    - nudm-pp
  nrfUri: http://127.0.0.10:8000
```

```python
from nudm.config import load_config, check_config_version

config = load_config("udmcfg.yaml")
check_config_version(config)   # ValueError if the version is not 1.0.0
print(config.get_version())
```

Fields that have the wrong type raise `ValueError` while parsing.
`load_config` only parses the file; filling a `UDMContext` from the result
is left to the caller.

## The UDM context

`udm_self()` returns the process-wide `UDMContext`; a separate
`UDMContext()` can be made for tests or for several instances. Every
procedure and application factory takes the context as an argument and falls
back to `udm_self()` when it is `None`.

```python
from nudm.context import UDMContext, LocationUri

context = UDMContext(register_ipv4="127.0.0.3", sbi_port=8000)
ue = context.new_ue("imsi-001010000000001")
context.create_smf_reg_context("imsi-001010000000001", "5")
print(ue.location_uri(LocationUri.SMF_REGISTRATION))
# http://127.0.0.3:8000/nudm-uecm/v1/imsi-001010000000001/registrations/smf-registrations/5

context.init_nf_service(["nudm-ee"], "1.0.1")   # fills context.nf_service
```

`IdGenerator` hands out subscription IDs from 1 to 2^31-1, reusing freed IDs
first, and raises `RuntimeError` when the range is used up.

## Event exposure

```python
from nudm.context import udm_self
from nudm.ee_api import create_app

app = create_app(udm_self())
app.run(host="127.0.0.3", port=8000)
```

Routes under `/nudm-ee/v1`:

* `GET /` answers `Hello World!`
* `POST /{ueIdentity}/ee-subscriptions` creates a subscription (201)
* `PATCH /{ueIdentity}/ee-subscriptions/{subscriptionId}` updates one (204)
* `DELETE /{ueIdentity}/ee-subscriptions/{subscriptionId}` removes one (always 204)

`ueIdentity` may be a GPSI (`msisdn-...`, `extid-...`), which must belong to
a known UE (else 404 `USER_NOT_FOUND`); an external group (`extgroupid-...`);
or `anyUE`. Anything else is answered with 400 `MANDATORY_IE_INCORRECT`.
A body that is not valid JSON of the right shape gets 400 "Malformed
request syntax".

An update checks that the subscription exists (for a GPSI, 404
`SUBSCRIPTION_NOT_FOUND` if not) and logs the patch items; it does not
change the stored subscription.

The same operations are available without HTTP as
`create_ee_subscription`, `update_ee_subscription` and
`delete_ee_subscription` in `nudm.event_exposure`.

## Data-change callbacks

`nudm.callback_api.create_app(context)` serves `GET /` and
`POST /sdm-subscriptions`. The POST body is a JSON object with a
`notifyItems` list; the items are posted to the `originalCallbackReference`
of every entry in the UE's `udm_subs_to_notify`. The route carries no SUPI,
so the UE looked up is the one stored under the empty SUPI; when there is
none the answer is 404 `USER_NOT_FOUND`. If a subscriber fails, the answer
carries the status of the last failure.

## NRF client

```python
from nudm.context import udm_self
from nudm.nrf import build_nf_instance, register_nf_instance

context = udm_self()
profile = build_nf_instance(context)   # NrfError if register_ipv4 is empty
profile, nrf_base, instance_id = register_nf_instance(context.nrf_uri, context.nf_id, profile)
```

`register_nf_instance` keeps retrying (every `retry_interval` seconds, 2 by
default) until the NRF answers 200 or 201. `deregister_nf_instance`,
`update_nf_instance` and `search_nf_instances` raise `NrfError` on
transport failures and error statuses; the NRF's problem details are kept
on `NrfError.problem`.

## Sequence numbers

```python
from nudm.auth_sequence import strict_hex, next_sequence_number

strict_hex("1", 12)                     # '000000000001'
strict_hex("abc", 2)                    # 'bc'
next_sequence_number("000000000001")    # '000000000002'
```

`resync_sequence_number(sqn_ms)` takes the six-byte SQN recovered from AUTS
and returns the value to continue from; `sequence_number_patch(sqn_hex)`
builds the `replace` patch for `/sequenceNumber`.

## Logging

`get_logger("EE")` and the like return loggers under `nudm` that write
`<timestamp> [LEVEL][UDM][category] message`. `set_log_level` takes a
number or a name (`trace`, `debug`, `info`, `warn`, `error`, `fatal`,
`panic`); `set_report_caller(True)` appends the source location.

## Errors

Procedures raise `nudm.models.ProblemError`, which carries a
`ProblemDetails` (`status`, `cause`, `title`, `detail`, `invalid_params`);
the `handle_*` functions and the Flask routes turn it into a JSON problem
response. NRF failures raise `nudm.nrf.NrfError`.

## What the package does not do

* It has no command and no server start-up of its own: the Flask apps are
  built with `create_app` and run by the caller, without TLS set-up.
* It serves only the event exposure and data-change callback interfaces.
  Subscriber data management, UE context management, UE authentication and
  parameter provisioning endpoints are not provided, and there is no client
  for the data repository.
* It does not compute authentication vectors (no MILENAGE or key
  derivation); `nudm.auth_sequence` covers only the sequence-number steps.
* State is kept in memory only.