# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains builders for the enrollment records accepted by the Provisioning Service.

Records are plain dictionaries in the JSON shape of the service's REST API, so they can be sent
as-is and compared directly against the records the service returns.
"""

import base64
import uuid

ATTESTATION_TYPE_X509 = "x509"
ATTESTATION_TYPE_SYMMETRIC_KEY = "symmetricKey"
ATTESTATION_TYPE_TPM = "tpm"

PROVISIONING_STATUS_ENABLED = "enabled"
PROVISIONING_STATUS_DISABLED = "disabled"


def generate_symmetric_key():
    """Return a new random symmetric key (base64 encoded)"""
    return base64.b64encode(str(uuid.uuid4()).encode("utf-8")).decode("utf-8")


def create_initial_twin(desired=None, tags=None):
    twin = {"properties": {"desired": dict(desired or {})}}
    if tags:
        twin["tags"] = dict(tags)
    return twin


def x509_client_certificate_attestation(primary_cert, secondary_cert=None):
    """
    Attestation for an individual enrollment, identified by the device's own certificate.

    :param str primary_cert: The PEM encoded device certificate.
    :param str secondary_cert: An optional second PEM encoded device certificate.
    """
    return {
        "type": ATTESTATION_TYPE_X509,
        "x509": {"clientCertificates": _x509_certificates(primary_cert, secondary_cert)},
    }


def x509_signing_certificate_attestation(primary_cert, secondary_cert=None):
    """
    Attestation for a group enrollment, identified by a CA certificate that signed the device
    certificates. The service expects the signing certificate PEM to be base64 encoded.

    :param str primary_cert: The PEM encoded signing certificate.
    :param str secondary_cert: An optional second PEM encoded signing certificate.
    """
    primary = _base64_pem(primary_cert)
    secondary = _base64_pem(secondary_cert) if secondary_cert else None
    return {
        "type": ATTESTATION_TYPE_X509,
        "x509": {"signingCertificates": _x509_certificates(primary, secondary)},
    }


def x509_ca_reference_attestation(primary_ref, secondary_ref=None):
    """Attestation for a group enrollment, identified by the name of a CA uploaded to the service"""
    ca_references = {"primary": primary_ref}
    if secondary_ref:
        ca_references["secondary"] = secondary_ref
    return {"type": ATTESTATION_TYPE_X509, "x509": {"caReferences": ca_references}}


def symmetric_key_attestation(primary_key=None, secondary_key=None):
    """
    Attestation by symmetric key. When no keys are provided the service generates them.

    :param str primary_key: The primary key (base64 encoded).
    :param str secondary_key: The secondary key (base64 encoded).
    """
    attestation = {"type": ATTESTATION_TYPE_SYMMETRIC_KEY}
    if primary_key or secondary_key:
        symmetric_key = {}
        if primary_key:
            symmetric_key["primaryKey"] = primary_key
        if secondary_key:
            symmetric_key["secondaryKey"] = secondary_key
        attestation["symmetricKey"] = symmetric_key
    return attestation


def tpm_attestation(endorsement_key, storage_root_key=None):
    tpm = {"endorsementKey": endorsement_key}
    if storage_root_key:
        tpm["storageRootKey"] = storage_root_key
    return {"type": ATTESTATION_TYPE_TPM, "tpm": tpm}


def individual_enrollment(
    registration_id,
    attestation,
    device_id=None,
    initial_twin=None,
    provisioning_status=PROVISIONING_STATUS_ENABLED,
    **kwargs
):
    """
    Build an individual enrollment record.

    :param str registration_id: The registration id of the device.
    :param dict attestation: The attestation mechanism of the device.
    :param str device_id: The device id to assign in IoT Hub. Defaults to the registration id.
    :param dict initial_twin: The twin the device is created with.
    :param str provisioning_status: "enabled" or "disabled".

    Any other keyword argument (e.g. allocation_policy, reprovision_policy, capabilities) is
    added to the record with its name converted to camelCase.
    """
    enrollment = {"registrationId": registration_id, "attestation": attestation}
    if device_id:
        enrollment["deviceId"] = device_id
    return _finish_record(enrollment, initial_twin, provisioning_status, kwargs)


def enrollment_group(
    enrollment_group_id,
    attestation,
    initial_twin=None,
    provisioning_status=PROVISIONING_STATUS_ENABLED,
    **kwargs
):
    """
    Build an enrollment group record.

    :param str enrollment_group_id: The id of the enrollment group.
    :param dict attestation: The attestation mechanism shared by the group.
    :param dict initial_twin: The twin every device of the group is created with.
    :param str provisioning_status: "enabled" or "disabled".
    """
    group = {"enrollmentGroupId": enrollment_group_id, "attestation": attestation}
    return _finish_record(group, initial_twin, provisioning_status, kwargs)


def reprovision_policy(update_hub_assignment=True, migrate_device_data=True):
    return {
        "updateHubAssignment": update_hub_assignment,
        "migrateDeviceData": migrate_device_data,
    }


def custom_allocation_definition(webhook_url, api_version):
    return {"webhookUrl": webhook_url, "apiVersion": api_version}


def _finish_record(record, twin, provisioning_status, extra):
    if twin is not None:
        record["initialTwin"] = twin
    if provisioning_status:
        record["provisioningStatus"] = provisioning_status
    for key, value in extra.items():
        if value is not None:
            record[_to_camel_case(key)] = value
    return record


def _x509_certificates(primary, secondary):
    certificates = {"primary": {"certificate": primary}}
    if secondary:
        certificates["secondary"] = {"certificate": secondary}
    return certificates


def _base64_pem(pem):
    return base64.b64encode(pem.encode("utf-8")).decode("utf-8")


def _to_camel_case(name):
    first, *rest = name.split("_")
    return first + "".join(word.capitalize() for word in rest)
