"""Azure IoT Provisioning E2E Auth

This package provides the symmetric key primitives shared by the service clients and the
derived key engine.
"""

from .signing_mechanism import SymmetricKeySigningMechanism  # noqa: F401
from .derived_key import derive_device_key  # noqa: F401

# NOTE: Please import the sastoken module directly rather than through the package interface.
