# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module defines constants for use across the azure-iot-provisioning-e2e package
"""

VERSION = "0.1.0"
USER_AGENT = "azure-iot-provisioning-e2e-py"
PROVISIONING_SERVICE_API_VERSION = "2021-10-01"
IOTHUB_API_VERSION = "2021-04-12"
PROVISIONING_GLOBAL_ENDPOINT = "global.azure-devices-provisioning.net"
CUSTOM_ALLOCATION_API_VERSION = "2019-03-31"

# NOTE: There should probably be a more global timeout configuration, but for now this will do.
HTTP_TIMEOUT = 10

TRANSPORT_MQTT = "mqtt"
TRANSPORT_MQTT_WS = "mqttws"
TRANSPORT_CHOICES = [TRANSPORT_MQTT, TRANSPORT_MQTT_WS]
