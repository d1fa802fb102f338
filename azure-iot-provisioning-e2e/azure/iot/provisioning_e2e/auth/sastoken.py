# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the Shared Access Signature (SAS) token the service clients send.

The Device Provisioning Service and IoT Hub both authorize REST requests with a token signed by
the key of a shared access policy. A :class:`ServiceSasToken` renews itself whenever it is read
close to its expiry, so a client kept for a whole test session never sends an expired token.
"""

import logging
import time
import urllib.parse
from ..exceptions import SasTokenError
from .signing_mechanism import SymmetricKeySigningMechanism

logger = logging.getLogger(__name__)

TOKEN_TYPE = "SharedAccessSignature"
DEFAULT_TTL = 3600
# Seconds before expiry at which reading a token renews it
DEFAULT_RENEWAL_MARGIN = 120


class ServiceSasToken(object):
    """SAS token for a service host, signed with a shared access policy key.

    Converting the token to a string returns the current token text, renewing it first if it
    expires within ``renewal_margin`` seconds.

    :param str uri: The resource the token grants access to (the service host name)
    :param signing_mechanism: The signing mechanism holding the policy key
    :type signing_mechanism: Child classes of :class:`SigningMechanism`
    :param str policy_name: The name of the shared access policy (optional)
    :param int ttl: Lifetime of each token, in seconds
    :param int renewal_margin: How close to expiry, in seconds, a token is renewed

    :raises: SasTokenError if the token cannot be signed
    """

    def __init__(
        self,
        uri,
        signing_mechanism,
        policy_name=None,
        ttl=DEFAULT_TTL,
        renewal_margin=DEFAULT_RENEWAL_MARGIN,
    ):
        self.uri = uri
        self.policy_name = policy_name
        self.ttl = ttl
        self.renewal_margin = renewal_margin
        self._signing_mechanism = signing_mechanism
        self._expiry_time = None
        self._token = None
        self.renew()

    @classmethod
    def create_from_shared_access_key(cls, host_name, policy_name, shared_access_key, **kwargs):
        """
        Create a token for a service host from the policy name and key of a connection string

        :raises: ValueError if the shared access key is not valid base64
        """
        return cls(
            host_name,
            SymmetricKeySigningMechanism(shared_access_key),
            policy_name=policy_name,
            **kwargs,
        )

    def __str__(self):
        if self.is_expiring():
            logger.debug("SAS token for {} is about to expire, renewing".format(self.uri))
            self.renew()
        return self._token

    @property
    def expiry_time(self):
        """Time the current token expires, in seconds since the epoch (read only)"""
        return self._expiry_time

    def is_expiring(self):
        """Return True if the current token expires within the renewal margin"""
        return self._expiry_time - time.time() < self.renewal_margin

    def renew(self):
        """Sign a new token expiring ``ttl`` seconds from now"""
        self._expiry_time = int(time.time() + self.ttl)
        self._token = self._sign()

    def _sign(self):
        resource = urllib.parse.quote(self.uri, safe="")
        expiry = str(self._expiry_time)
        try:
            signature = self._signing_mechanism.sign(resource + "\n" + expiry)
        except Exception as e:
            # Signing mechanisms are pluggable, so any error they raise is wrapped
            raise SasTokenError("Unable to sign SAS token for {}".format(self.uri)) from e

        fields = [
            ("sr", resource),
            ("sig", urllib.parse.quote(signature, safe="")),
            ("se", expiry),
        ]
        if self.policy_name:
            fields.append(("skn", self.policy_name))
        return "{} {}".format(TOKEN_TYPE, "&".join("{}={}".format(k, v) for k, v in fields))
