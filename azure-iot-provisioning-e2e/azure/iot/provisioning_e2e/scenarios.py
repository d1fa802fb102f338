# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module defines the provisioning scenarios exercised end-to-end.

Each scenario knows how to create its enrollment, register its device over a given transport,
and clean up afterwards. :func:`run_scenario` drives a scenario through a full provisioning and
verifies that the device was created with the twin described by its enrollment.
"""

import collections
import logging
import uuid
from . import constant
from .auth.derived_key import derive_device_key
from .device import registration
from .exceptions import ProvisioningServiceError, ScenarioError
from .models import enrollment
from .service.provisioning_service_client import ProvisioningServiceClient
from .service.registry_client import IoTHubRegistryClient

logger = logging.getLogger(__name__)

DEVICE_ID_PREFIX = "deleteMe_provisioning_python_e2e_"
REGISTRATION_ID_PREFIX = "reg-"
GROUP_ID_PREFIX = "deleteMe-python-"
DEFAULT_X509_GROUP_ID = "testgroup"
TEST_PROPERTY = "testProp"
STATUS_ASSIGNED = "assigned"

ProvisioningEnvironment = collections.namedtuple(
    "ProvisioningEnvironment", ["service_client", "registry", "provisioning_host", "id_scope"]
)


def create_environment(settings):
    """
    Create the service clients and endpoints used by the scenarios.

    :param settings: The end-to-end settings
    :type settings: :class:`azure.iot.provisioning_e2e.config.E2ESettings`
    :rtype: :class:`ProvisioningEnvironment`
    """
    return ProvisioningEnvironment(
        service_client=ProvisioningServiceClient.create_from_connection_string(
            settings.provisioning_connection_string
        ),
        registry=IoTHubRegistryClient.create_from_connection_string(
            settings.iothub_connection_string
        ),
        provisioning_host=settings.provisioning_host,
        id_scope=settings.id_scope,
    )


def new_ids():
    """Return a new (device_id, registration_id) pair sharing a random suffix"""
    suffix = str(uuid.uuid4())
    return DEVICE_ID_PREFIX + suffix, REGISTRATION_ID_PREFIX + suffix


class ProvisioningScenario(object):
    """Base class of provisioning scenarios"""

    transports = constant.TRANSPORT_CHOICES

    def __init__(self, environment):
        self.environment = environment
        self.registration_id = None
        self.device_id = None
        self.test_prop = None

    @property
    def service_client(self):
        return self.environment.service_client

    @property
    def registry(self):
        return self.environment.registry

    def initialize(self):
        pass

    def enroll(self):
        raise NotImplementedError

    def register(self, transport):
        raise NotImplementedError

    def cleanup(self):
        raise NotImplementedError

    def _new_initial_twin(self):
        self.test_prop = str(uuid.uuid4())
        return enrollment.create_initial_twin({TEST_PROPERTY: self.test_prop})

    def _delete_individual_enrollment(self):
        logger.debug("deleting enrollment")
        try:
            self.service_client.delete_individual_enrollment(self.registration_id)
        except ProvisioningServiceError:
            logger.debug("ignoring delete_individual_enrollment error")

    def _delete_enrollment_group(self, group_id):
        logger.debug("deleting enrollment group")
        try:
            self.service_client.delete_enrollment_group(group_id)
        except ProvisioningServiceError:
            logger.debug("ignoring delete_enrollment_group error")

    def _delete_device(self):
        if self.device_id:
            logger.debug("deleting device")
            self.registry.try_delete_device(self.device_id)


class SymmetricKeyIndividual(ProvisioningScenario):
    """Individual enrollment attested by a symmetric key"""

    def initialize(self):
        self.device_id, self.registration_id = new_ids()
        self.primary_key = enrollment.generate_symmetric_key()

    def enroll(self):
        record = enrollment.individual_enrollment(
            registration_id=self.registration_id,
            attestation=enrollment.symmetric_key_attestation(
                primary_key=self.primary_key, secondary_key=enrollment.generate_symmetric_key()
            ),
            device_id=self.device_id,
            initial_twin=self._new_initial_twin(),
        )
        self.service_client.create_or_update_individual_enrollment(record)

    def register(self, transport):
        return registration.register_with_symmetric_key(
            provisioning_host=self.environment.provisioning_host,
            id_scope=self.environment.id_scope,
            registration_id=self.registration_id,
            symmetric_key=self.primary_key,
            transport=transport,
        )

    def cleanup(self):
        self._delete_individual_enrollment()
        self._delete_device()
        logger.debug("done with Symmetric Key individual cleanup")


class SymmetricKeyGroup(ProvisioningScenario):
    """Enrollment group attested by a symmetric key, whose device registers with a derived key"""

    def initialize(self):
        suffix = str(uuid.uuid4())
        self.group_id = GROUP_ID_PREFIX + suffix
        self.registration_id = REGISTRATION_ID_PREFIX + suffix
        self.device_id = self.registration_id
        self.primary_key = enrollment.generate_symmetric_key()

    def enroll(self):
        record = enrollment.enrollment_group(
            enrollment_group_id=self.group_id,
            attestation=enrollment.symmetric_key_attestation(
                primary_key=self.primary_key, secondary_key=enrollment.generate_symmetric_key()
            ),
            initial_twin=self._new_initial_twin(),
        )
        self.service_client.create_or_update_enrollment_group(record)

    def register(self, transport):
        return registration.register_with_symmetric_key(
            provisioning_host=self.environment.provisioning_host,
            id_scope=self.environment.id_scope,
            registration_id=self.registration_id,
            symmetric_key=derive_device_key(self.primary_key, self.registration_id),
            transport=transport,
        )

    def cleanup(self):
        self._delete_enrollment_group(self.group_id)
        self._delete_device()
        logger.debug("done with Symmetric Key group cleanup")


class X509Individual(ProvisioningScenario):
    """
    Individual enrollment attested by the device's own (self-signed) certificate

    :param certificate: The device certificate, whose subject is the registration id
    :type certificate: :class:`azure.iot.provisioning_e2e.x509.CertificateRecord`
    :param str registration_id: The registration id of the device
    :param str device_id: The device id to assign in IoT Hub
    """

    def __init__(self, environment, certificate, registration_id, device_id):
        super().__init__(environment)
        self._cert = certificate
        self._registration_id = registration_id
        self._device_id = device_id

    def initialize(self):
        self.registration_id = self._registration_id
        self.device_id = self._device_id

    def enroll(self):
        record = enrollment.individual_enrollment(
            registration_id=self.registration_id,
            attestation=enrollment.x509_client_certificate_attestation(self._cert.certificate_pem),
            device_id=self.device_id,
            initial_twin=self._new_initial_twin(),
        )
        self.service_client.create_or_update_individual_enrollment(record)

    def register(self, transport):
        return registration.register_with_x509(
            provisioning_host=self.environment.provisioning_host,
            id_scope=self.environment.id_scope,
            registration_id=self.registration_id,
            certificate=self._cert,
            transport=transport,
        )

    def cleanup(self):
        self._delete_individual_enrollment()
        self._delete_device()
        logger.debug("done with X509 individual cleanup")


def certs_without_chain(root, fixtures):
    """Enroll the group with the root, and register with a device certificate issued by it"""

    def factory():
        return root, fixtures.without_chain

    return factory


def certs_with_chain(fixtures):
    """Enroll the group with the nearest intermediate, and register with the full chain"""

    def factory():
        return fixtures.intermediate2, fixtures.with_chain

    return factory


class X509Group(ProvisioningScenario):
    """
    Enrollment group attested by a signing certificate. The device id is assigned by the service
    and read from the registration result.

    :param certificate_factory: Function returning (enrollment_cert, device_cert)
    :param str registration_id: The registration id of the device (the device cert's subject)
    :param str group_id: The id of the enrollment group
    """

    def __init__(
        self, environment, certificate_factory, registration_id, group_id=DEFAULT_X509_GROUP_ID
    ):
        super().__init__(environment)
        self._certificate_factory = certificate_factory
        self._registration_id = registration_id
        self.group_id = group_id

    def initialize(self):
        self.registration_id = self._registration_id
        self.device_id = None
        self._enrollment_cert, self._cert = self._certificate_factory()

    def enroll(self):
        record = enrollment.enrollment_group(
            enrollment_group_id=self.group_id,
            attestation=enrollment.x509_signing_certificate_attestation(
                self._enrollment_cert.certificate_pem
            ),
            initial_twin=self._new_initial_twin(),
        )
        # A group left over from a previous run would hold a different signing certificate
        self._delete_enrollment_group(self.group_id)
        self.service_client.create_or_update_enrollment_group(record)

    def register(self, transport):
        result = registration.register_with_x509(
            provisioning_host=self.environment.provisioning_host,
            id_scope=self.environment.id_scope,
            registration_id=self.registration_id,
            certificate=self._cert,
            transport=transport,
        )
        device_id = _assigned_device_id(result)
        if not device_id:
            raise ScenarioError(
                "Registration of {} did not assign a device id".format(self.registration_id)
            )
        self.device_id = device_id
        return result

    def cleanup(self):
        self._delete_device()
        self._delete_enrollment_group(self.group_id)
        logger.debug("done with X509 group cleanup")


def _assigned_device_id(result):
    registration_state = getattr(result, "registration_state", None)
    return getattr(registration_state, "device_id", None)


def verify_twin(twin, expected_test_prop):
    """
    Verify that a device twin holds the test property its enrollment's initial twin defined.

    :raises: ScenarioError if the property is missing or different
    """
    desired = twin.get("properties", {}).get("desired", {})
    actual = desired.get(TEST_PROPERTY)
    if actual != expected_test_prop:
        raise ScenarioError(
            "Twin {} is {!r}, expected {!r}".format(TEST_PROPERTY, actual, expected_test_prop)
        )


def run_scenario(scenario, transport):
    """
    Provision a device end-to-end: create the enrollment, register the device over the
    transport, then verify the twin of the provisioned device.

    Cleanup is left to the caller, so that it runs whether or not provisioning succeeded.

    :param scenario: The scenario to run
    :type scenario: :class:`ProvisioningScenario`
    :param str transport: "mqtt" or "mqttws"
    :returns: The registration result
    :raises: ScenarioError if the device was not provisioned as enrolled
    """
    logger.debug("initializing")
    scenario.initialize()
    logger.debug("enrolling")
    scenario.enroll()
    logger.debug("registering device")
    result = scenario.register(transport)
    if getattr(result, "status", None) != STATUS_ASSIGNED:
        raise ScenarioError(
            "Registration of {} ended with status {}".format(
                scenario.registration_id, getattr(result, "status", None)
            )
        )
    logger.debug("success registering device: {}".format(result))
    logger.debug("getting twin")
    twin = scenario.registry.get_twin(scenario.device_id)
    logger.debug("asserting twin contents")
    verify_twin(twin, scenario.test_prop)
    return result
