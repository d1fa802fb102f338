"""Azure IoT Provisioning E2E Models

This package provides builders for the records sent to the Provisioning Service.
"""

from . import enrollment  # noqa: F401
