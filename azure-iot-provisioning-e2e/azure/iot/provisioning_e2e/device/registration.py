# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module registers devices with the Device Provisioning Service through the
ProvisioningDeviceClient of the Azure IoT Device SDK.
"""

import logging
import os
import tempfile
from azure.iot.device import ProvisioningDeviceClient, X509
from .. import constant

logger = logging.getLogger(__name__)

CERT_FILE_NAME = "device_cert.pem"
KEY_FILE_NAME = "device_key.pem"


def _transport_kwargs(transport):
    if transport == constant.TRANSPORT_MQTT:
        return {"websockets": False}
    elif transport == constant.TRANSPORT_MQTT_WS:
        return {"websockets": True}
    else:
        raise ValueError(
            "Invalid transport: {}. Must be one of {}".format(transport, constant.TRANSPORT_CHOICES)
        )


def register_with_symmetric_key(
    provisioning_host, id_scope, registration_id, symmetric_key, transport, payload=None
):
    """
    Register a device authenticating with a symmetric key.

    :param str provisioning_host: The global endpoint of the Provisioning Service
    :param str id_scope: The ID scope of the Provisioning Service
    :param str registration_id: The registration id of the device
    :param str symmetric_key: The device key. For group enrollments, this is the derived key.
    :param str transport: "mqtt" or "mqttws"
    :param payload: Optional registration payload

    :returns: The result of the registration
    :rtype: :class:`azure.iot.device.RegistrationResult`
    """
    kwargs = _transport_kwargs(transport)
    logger.info(
        "Registering {} with symmetric key over {}".format(registration_id, transport)
    )
    provisioning_device_client = ProvisioningDeviceClient.create_from_symmetric_key(
        provisioning_host=provisioning_host,
        registration_id=registration_id,
        id_scope=id_scope,
        symmetric_key=symmetric_key,
        **kwargs
    )
    if payload is not None:
        provisioning_device_client.provisioning_payload = payload
    return provisioning_device_client.register()


def register_with_x509(
    provisioning_host, id_scope, registration_id, certificate, transport, payload=None
):
    """
    Register a device authenticating with an X509 certificate (or certificate chain).

    The SDK reads certificates from files, so the certificate and key are written to a temporary
    directory that is removed once registration completes.

    :param str provisioning_host: The global endpoint of the Provisioning Service
    :param str id_scope: The ID scope of the Provisioning Service
    :param str registration_id: The registration id of the device
    :param certificate: The device certificate (or chain) and its key
    :type certificate: :class:`azure.iot.provisioning_e2e.x509.CertificateRecord`
    :param str transport: "mqtt" or "mqttws"
    :param payload: Optional registration payload

    :returns: The result of the registration
    :rtype: :class:`azure.iot.device.RegistrationResult`
    """
    kwargs = _transport_kwargs(transport)
    logger.info("Registering {} with X509 over {}".format(registration_id, transport))
    with tempfile.TemporaryDirectory() as cert_dir:
        cert_file = os.path.join(cert_dir, CERT_FILE_NAME)
        key_file = os.path.join(cert_dir, KEY_FILE_NAME)
        with open(cert_file, "w") as f:
            f.write(certificate.certificate_pem)
        with open(key_file, "w") as f:
            f.write(certificate.private_key_pem)

        x509 = X509(cert_file=cert_file, key_file=key_file)
        provisioning_device_client = ProvisioningDeviceClient.create_from_x509_certificate(
            provisioning_host=provisioning_host,
            registration_id=registration_id,
            id_scope=id_scope,
            x509=x509,
            **kwargs
        )
        if payload is not None:
            provisioning_device_client.provisioning_payload = payload
        return provisioning_device_client.register()
