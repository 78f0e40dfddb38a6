import pytest
import yaml

from nudm.config import (
    EXPECTED_CONFIG_VERSION,
    Config,
    Info,
    check_config_version,
    load_config,
)
from nudm.models import PlmnId

SAMPLE = """
info:
  version: 1.0.0
  description: UDM initial local configuration
configuration:
  udmName: udm-test
  serviceNameList:
    - nudm-sdm
    - nudm-uecm
  sbi:
    scheme: http
    registerIPv4: 127.0.0.3
    bindingIPv4: 0.0.0.0
    port: 29503
    tls:
      log: ssl.log
      pem: udm.pem
      key: udm.key
  nrfUri: http://nrf.example.com:29510
  keys:
    udmProfileAHNPrivateKey: secret
    udmProfileAHNPublicKey: placeholder
  plmnSupportList:
    - mcc: "208"
      mnc: "93"
  plmnList:
    - plmnId:
        mcc: "208"
        mnc: "93"
logger:
  UDM:
    debugLevel: info
"""


@pytest.fixture
def sample_path(tmp_path):
    path = tmp_path / "udmcfg.yaml"
    path.write_text(SAMPLE, encoding="utf-8")
    return path


def test_load_config_reads_sections(sample_path):
    config = load_config(sample_path)
    conf = config.configuration
    assert conf.udm_name == "udm-test"
    assert conf.service_name_list == ["nudm-sdm", "nudm-uecm"]
    assert conf.sbi.port == 29503
    assert conf.sbi.register_ipv4 == "127.0.0.3"
    assert conf.sbi.binding_ipv4 == "0.0.0.0"
    assert conf.sbi.tls.pem == "udm.pem"
    assert conf.nrf_uri == "http://nrf.example.com:29510"
    assert conf.keys.udm_profile_a_hn_public_key == "placeholder"
    assert conf.keys.udm_profile_b_hn_public_key == ""
    assert conf.plmn_support_list == [PlmnId("208", "93")]
    assert conf.plmn_list[0].plmn_id == PlmnId("208", "93")
    assert config.logger == {"UDM": {"debugLevel": "info"}}


def test_version_check_passes(sample_path):
    config = load_config(sample_path)
    assert config.get_version() == EXPECTED_CONFIG_VERSION
    assert check_config_version(config) == "1.0.0"


def test_version_check_fails_on_mismatch():
    config = Config(info=Info(version="2.0.0"))
    with pytest.raises(ValueError, match=r"config version is \[2.0.0\]"):
        check_config_version(config)


def test_get_version_without_info():
    assert Config().get_version() == ""
    with pytest.raises(ValueError):
        check_config_version(Config())


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yaml")


def test_invalid_yaml_raises(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("info: [unclosed\n", encoding="utf-8")
    with pytest.raises(yaml.YAMLError):
        load_config(path)


def test_empty_file_gives_empty_config(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    config = load_config(path)
    assert config == Config()


def test_wrong_section_type_raises():
    with pytest.raises(ValueError):
        Config.from_dict({"configuration": ["not", "a", "mapping"]})


def test_wrong_port_type_raises():
    with pytest.raises(ValueError):
        Config.from_dict({"configuration": {"sbi": {"port": "eight"}}})


def test_unquoted_mcc_rejected():
    with pytest.raises(ValueError):
        Config.from_dict({"configuration": {"plmnSupportList": [{"mcc": 208, "mnc": "93"}]}})


def test_unknown_keys_are_ignored():
    config = Config.from_dict({"info": {"version": "1.0.0", "extra": 1}, "other": True})
    assert config.get_version() == "1.0.0"
    assert config.configuration is None