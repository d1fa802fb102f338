# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module defines an abstract SigningMechanism, as well as common child implementations of it
"""

import abc
import binascii
import hmac
import hashlib
import base64
from ..exceptions import InvalidArgumentError, InvalidKeyEncodingError


class SigningMechanism(abc.ABC):
    @abc.abstractmethod
    def sign(self, data_str):
        pass


class SymmetricKeySigningMechanism(SigningMechanism):
    def __init__(self, key):
        """
        A mechanism that signs data using a symmetric key

        :param key: Symmetric Key (base64 encoded)
        :type key: str or bytes

        :raises: InvalidArgumentError if the key is empty
        :raises: InvalidKeyEncodingError if the key is not valid base64
        """
        if not key:
            raise InvalidArgumentError("Symmetric Key must not be empty")

        # Convert key to bytes
        try:
            key = key.encode("utf-8")
        except AttributeError:
            # If byte string, no need to encode
            pass
        except UnicodeEncodeError as e:
            raise InvalidKeyEncodingError("Invalid Symmetric Key") from e

        # Derives the signing key
        try:
            self._signing_key = base64.b64decode(key, validate=True)
        except (binascii.Error, TypeError) as e:
            raise InvalidKeyEncodingError("Invalid Symmetric Key") from e

    def sign(self, data_str):
        """
        Sign a data string with symmetric key and the HMAC-SHA256 algorithm.

        :param data_str: Data string to be signed
        :type data_str: str or bytes

        :returns: The signed data
        :rtype: str
        """
        # Convert data_str to bytes
        try:
            data_str = data_str.encode("utf-8")
        except AttributeError:
            # If byte string, no need to encode
            pass

        # Derive signature via HMAC-SHA256 algorithm
        try:
            hmac_digest = hmac.HMAC(
                key=self._signing_key, msg=data_str, digestmod=hashlib.sha256
            ).digest()
            signed_data = base64.b64encode(hmac_digest)
        except TypeError as e:
            raise ValueError("Unable to sign string using the provided symmetric key") from e
        # Convert from bytes to string
        return signed_data.decode("utf-8")
