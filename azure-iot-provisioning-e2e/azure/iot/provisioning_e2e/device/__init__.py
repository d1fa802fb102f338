"""Azure IoT Provisioning E2E Device

This package registers devices with the Provisioning Service using the Azure IoT Device SDK.
"""

from .registration import register_with_symmetric_key, register_with_x509  # noqa: F401
