# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Define user-facing exceptions to be shared across the package"""


# Input Exceptions
class InvalidArgumentError(ValueError):
    """Represents an empty or malformed input"""

    pass


class InvalidKeyEncodingError(ValueError):
    """Represents a symmetric key that is not valid base64"""

    pass


class SasTokenError(Exception):
    """Error in SasToken"""

    pass


# Certificate Exceptions
class KeyGenerationFailedError(Exception):
    """Represents a failure generating a key pair"""

    pass


class SigningFailedError(Exception):
    """Represents a failure building or signing a certificate"""

    pass


class InvalidParentError(Exception):
    """Represents an issuer that is absent or cannot sign certificates"""

    pass


# Service Exceptions
class ProvisioningServiceError(Exception):
    """Represents a failure reported by Provisioning Service"""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class IoTHubRegistryError(Exception):
    """Represents a failure reported by the IoT Hub registry"""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


# Scenario Exceptions
class ScenarioError(Exception):
    """Represents a provisioning scenario whose outcome did not match expectations"""

    pass
