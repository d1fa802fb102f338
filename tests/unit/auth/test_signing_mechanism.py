# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import pytest
import hmac
import hashlib
import base64
from azure.iot.provisioning_e2e.auth import SymmetricKeySigningMechanism
from azure.iot.provisioning_e2e.exceptions import InvalidArgumentError, InvalidKeyEncodingError

fake_key = "NMgJDvdKTxjLi+xBxxkDDEwDJxEvOE5u8BiT0mVgPeg="
fake_signing_key = b"4\xc8\t\x0e\xf7JO\x18\xcb\x8b\xecA\xc7\x19\x03\x0cL\x03'\x11/8Nn\xf0\x18\x93\xd2e`=\xe8"
fake_digest = b"\xd2\x06\xf7\x12\xf1\xe9\x95$\x90\xfd\x12\x9a\xb1\xbe\xb4\xf8\xf3\xc4\x1ap\x8a\xab'\x8a.D\xfb\x84\x96\xca\xf3z"


@pytest.mark.describe("SymmetricKeySigningMechanism - Instantiation")
class TestSymmetricKeySigningMechanismInstantiation(object):
    @pytest.mark.it("Derives the signing key by base64 decoding the provided symmetric key")
    @pytest.mark.parametrize(
        "key",
        [pytest.param(fake_key, id="String"), pytest.param(fake_key.encode("utf-8"), id="Bytes")],
    )
    def test_derives_signing_key(self, key):
        sm = SymmetricKeySigningMechanism(key)
        assert sm._signing_key == fake_signing_key

    @pytest.mark.it("Raises an InvalidKeyEncodingError if the symmetric key is not valid base64")
    @pytest.mark.parametrize(
        "key",
        [pytest.param("not a key", id="Not a key"), pytest.param("YWJjx", id="Incomplete key")],
    )
    def test_invalid_key(self, key):
        with pytest.raises(InvalidKeyEncodingError):
            SymmetricKeySigningMechanism(key)

    @pytest.mark.it("Raises an InvalidArgumentError if the symmetric key is empty")
    @pytest.mark.parametrize(
        "key", [pytest.param("", id="Empty string"), pytest.param(None, id="None")]
    )
    def test_empty_key(self, key):
        with pytest.raises(InvalidArgumentError):
            SymmetricKeySigningMechanism(key)

    @pytest.mark.it("Raises errors that are ValueErrors for any invalid symmetric key")
    @pytest.mark.parametrize("key", [pytest.param("", id="Empty"), pytest.param("YWJjx", id="Bad")])
    def test_value_error(self, key):
        with pytest.raises(ValueError):
            SymmetricKeySigningMechanism(key)


@pytest.mark.describe("SymmetricKeySigningMechanism - .sign()")
class TestSymmetricKeySigningMechanismSign(object):
    @pytest.fixture
    def signing_mechanism(self):
        return SymmetricKeySigningMechanism(fake_key)

    @pytest.mark.it(
        "Generates an HMAC message digest from the signing key and the utf-8 encoded data, using HMAC-SHA256"
    )
    def test_hmac(self, mocker, signing_mechanism):
        hmac_mock = mocker.patch.object(hmac, "HMAC")
        hmac_mock.return_value.digest.return_value = fake_digest

        signing_mechanism.sign("sign this message")

        assert hmac_mock.call_count == 1
        assert hmac_mock.call_args == mocker.call(
            key=fake_signing_key, msg=b"sign this message", digestmod=hashlib.sha256
        )

    @pytest.mark.it("Returns the base64 encoded HMAC message digest as a string")
    def test_b64encode(self, mocker, signing_mechanism):
        hmac_mock = mocker.patch.object(hmac, "HMAC")
        hmac_mock.return_value.digest.return_value = fake_digest

        signature = signing_mechanism.sign("sign this message")

        assert signature == base64.b64encode(fake_digest).decode("utf-8")

    @pytest.mark.it("Supports data in both string and byte formats")
    @pytest.mark.parametrize(
        "data_string",
        [
            pytest.param("sign this message", id="String"),
            pytest.param(b"sign this message", id="Bytes"),
        ],
    )
    def test_supported_types(self, signing_mechanism, data_string):
        assert signing_mechanism.sign(data_string) == "8NJRMT83CcplGrAGaUVIUM/md5914KpWVNngSVoF9/M="

    @pytest.mark.it("Raises a ValueError if unable to sign the provided data")
    def test_bad_input(self, signing_mechanism):
        with pytest.raises(ValueError):
            signing_mechanism.sign(123)
