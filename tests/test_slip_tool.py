import json
import os

from slip_config import SlipConfig
from slip_payment.errors import ApiError, DecodeError
from slip_payment.models import VerificationResult
from slip_payment.slip_verifier import SlipVerifier
from slip_tool import EXIT_ERROR, EXIT_INVALID, EXIT_OK, main

from conftest import slip_response

SLIP_PAYLOAD = "0038000600000101030060217Bf870bf26685f55526203TH9104CF62"


class FakeClient:
    def __init__(self, body=None, error=None):
        self.body = body if body is not None else slip_response()
        self.error = error

    def inquire(self, payload):
        if self.error:
            raise self.error
        return VerificationResult.from_dict(self.body)


class FailingDecoder:
    def read_qr_code(self, image_input):
        raise DecodeError("No QR code found in the image")


def make_verifier(config, client, decoder=None):
    return SlipVerifier(client=client, decoder=decoder, config_source=config)


def test_init_config_writes_file(tmp_path, capsys):
    path = tmp_path / "written.ini"

    assert main(["--config", str(path), "init-config"]) == EXIT_OK

    assert os.path.exists(path)
    assert SlipConfig(str(path)).get("SLIPVERIFY", "base_url") == "https://suba.rdcw.co.th"
    assert str(path) in capsys.readouterr().out


def test_payload_command_accepts_valid_slip(config, capsys):
    verifier = make_verifier(config, FakeClient())

    exit_code = main(["payload", SLIP_PAYLOAD, "--account", "123-4-56789-0", "--bank", "014"], verifier=verifier)

    assert exit_code == EXIT_OK
    assert "Validation successful!" in capsys.readouterr().out


def test_cross_check_flag_checks_qr_merchant_account(config, capsys):
    verifier = make_verifier(config, FakeClient())

    exit_code = main(["payload", SLIP_PAYLOAD, "--account", "123-4-56789-0", "--bank", "014", "--cross-check"],
                     verifier=verifier)

    # The sample payload carries no merchant template
    assert exit_code == EXIT_INVALID
    assert "Validation failed: Invalid account number" in capsys.readouterr().out


def test_payload_command_json_output(config, capsys):
    verifier = make_verifier(config, FakeClient(body=slip_response(is_cached=True)))

    exit_code = main(["payload", SLIP_PAYLOAD, "--account", "123-4-56789-0", "--bank", "014", "--json"], verifier=verifier)

    output = json.loads(capsys.readouterr().out)
    assert exit_code == EXIT_INVALID
    assert output["validation"] == {"isValid": False, "error": "This slip has already been used", "reason": "already_used"}
    assert output["result"]["data"]["receiving_bank"] == "014"


def test_api_error_exit_code(config, capsys):
    verifier = make_verifier(config, FakeClient(error=ApiError("API request failed: boom")))

    assert main(["payload", SLIP_PAYLOAD], verifier=verifier) == EXIT_ERROR
    assert "API request failed: boom" in capsys.readouterr().err


def test_image_decode_error_exit_code(config, tmp_path, capsys):
    image_path = tmp_path / "slip.png"
    image_path.write_bytes(b"not really an image")
    verifier = make_verifier(config, FakeClient(), decoder=FailingDecoder())

    assert main(["image", str(image_path)], verifier=verifier) == EXIT_ERROR
    assert "No QR code found" in capsys.readouterr().err


def test_missing_image_file_exit_code(config, tmp_path, capsys):
    verifier = make_verifier(config, FakeClient())

    assert main(["decode", str(tmp_path / "missing.png")], verifier=verifier) == EXIT_ERROR
