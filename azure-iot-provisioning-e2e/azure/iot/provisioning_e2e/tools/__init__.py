"""Azure IoT Provisioning E2E Tools

This package provides command line tools for preparing a Provisioning Service for manual testing.
Each tool is run as a module, e.g. ``python -m azure.iot.provisioning_e2e.tools.query -c <cs>``.
"""
