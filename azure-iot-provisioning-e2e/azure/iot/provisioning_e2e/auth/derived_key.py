# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module computes per-device keys for symmetric key group enrollments.

A symmetric key enrollment group holds a single master key. Each device in the group
authenticates with a key derived from that master key and its own registration id, so the
service never stores one key per device. The derivation here must match the service's
exactly, or registration is rejected as unauthorized.
"""

import logging
from .signing_mechanism import SymmetricKeySigningMechanism
from ..exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)


def derive_device_key(master_key, registration_id):
    """
    Derive the symmetric key for a single device of a group enrollment.

    The registration id is encoded as "utf-8" and signed with HMAC-SHA256, using the base64
    decoded group master key as the HMAC key. The device key is the base64 encoding of the
    resulting digest.

    :param master_key: The group master key (base64 encoded). Provisioning is only verified
     with the primary key of the group; derivation from the secondary key is unverified.
    :type master_key: str or bytes
    :param str registration_id: The registration id of the device.

    :returns: The derived device key (base64 encoded)
    :rtype: str

    :raises: InvalidArgumentError if either input is empty
    :raises: InvalidKeyEncodingError if the master key is not valid base64
    """
    if not registration_id:
        raise InvalidArgumentError("Registration id must not be empty")
    if not isinstance(registration_id, str):
        raise InvalidArgumentError("Registration id must be of type str")

    signing_mechanism = SymmetricKeySigningMechanism(master_key)
    logger.debug("Deriving device key for registration id {}".format(registration_id))
    return signing_mechanism.sign(registration_id)
