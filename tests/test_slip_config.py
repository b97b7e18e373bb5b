import os

from slip_config import DEFAULT_BASE_URL, SlipConfig


def test_defaults_without_file(config):
    assert not os.path.exists(config.config_path)
    assert config.get("SLIPVERIFY", "base_url") == DEFAULT_BASE_URL
    assert config.getint("SLIPVERIFY", "timeout_seconds") == 30
    assert config.getint("VALIDATION", "min_matching_digits") == 3
    assert config.get("VALIDATION", "expected_account") == ""


def test_missing_option_returns_fallback(config):
    assert config.get("SLIPVERIFY", "nope", fallback="x") == "x"
    assert config.get("NO_SECTION", "nope") is None


def test_invalid_numbers_return_fallback(config):
    config.config.set("SLIPVERIFY", "timeout_seconds", "soon")
    assert config.getint("SLIPVERIFY", "timeout_seconds", fallback=7) == 7
    assert config.getfloat("SLIPVERIFY", "timeout_seconds", fallback=7.5) == 7.5


def test_file_values_override_defaults(tmp_path):
    path = tmp_path / "custom.ini"
    path.write_text("[SLIPVERIFY]\nclient_id = my-client\n\n[VALIDATION]\nexpected_bank = 014\n", encoding="utf-8")

    config = SlipConfig(str(path))

    assert config.get("SLIPVERIFY", "client_id") == "my-client"
    assert config.get("VALIDATION", "expected_bank") == "014"
    assert config.get("SLIPVERIFY", "base_url") == DEFAULT_BASE_URL


def test_update_config_persists(config):
    config.update_config("VALIDATION", "expected_account", "123-4-56789-0")

    reloaded = SlipConfig(config.config_path)

    assert reloaded.get("VALIDATION", "expected_account") == "123-4-56789-0"
