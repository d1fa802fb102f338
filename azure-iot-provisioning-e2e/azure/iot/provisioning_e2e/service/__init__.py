"""Azure IoT Provisioning E2E Service

This package provides the service-side clients used to prepare and verify provisioning scenarios.
"""

from .provisioning_service_client import ProvisioningServiceClient  # noqa: F401
from .registry_client import IoTHubRegistryClient  # noqa: F401
from .query import Query  # noqa: F401
