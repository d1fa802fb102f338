""" Azure IoT Provisioning End-to-End Library

This library provides the fixtures, service clients and scenarios used to test device
provisioning with the Azure IoT Hub Device Provisioning Service end-to-end.
"""

from .auth import derive_device_key  # noqa: F401
from .x509 import CertificateRecord, CertificateFixtures, create_all_certificates  # noqa: F401
from .service import ProvisioningServiceClient, IoTHubRegistryClient  # noqa: F401
from .config import E2ESettings, get_settings  # noqa: F401
from .exceptions import (  # noqa: F401
    InvalidArgumentError,
    InvalidKeyEncodingError,
    KeyGenerationFailedError,
    SigningFailedError,
    InvalidParentError,
    ProvisioningServiceError,
    IoTHubRegistryError,
    ScenarioError,
)

from . import constant  # noqa: F401

# NOTE: Please import the scenarios and device modules directly rather than through the package
# interface.
