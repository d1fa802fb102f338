# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import logging
import pytest
from azure.iot.provisioning_e2e import config, scenarios
from azure.iot.provisioning_e2e.x509 import create_all_certificates

logging.basicConfig(
    format="%(asctime)s %(levelname)-8s %(module)s:%(funcName)s:%(message)s",
    level=logging.WARNING,
    datefmt="%Y-%m-%d %H:%M:%S",
)
logging.getLogger("e2e").setLevel(level=logging.DEBUG)
logging.getLogger("azure.iot").setLevel(level=logging.DEBUG)

logger = logging.getLogger("e2e")

SERVICE_SETTINGS = ("id_scope", "provisioning_connection_string", "iothub_connection_string")
ROOT_SETTINGS = ("root_cert", "root_cert_key")


@pytest.fixture(scope="session")
def settings():
    settings = config.get_settings()
    if not settings.has(*SERVICE_SETTINGS):
        pytest.skip("provisioning end-to-end settings are not configured")
    logger.info("using settings from {}".format(settings.source))
    return settings


@pytest.fixture(scope="session")
def environment(settings):
    return scenarios.create_environment(settings)


@pytest.fixture(scope="session")
def root(settings):
    if not settings.has(*ROOT_SETTINGS):
        pytest.skip("root certificate settings are not configured")
    return settings.root_certificate()


@pytest.fixture(scope="session")
def x509_ids():
    device_id, registration_id = scenarios.new_ids()
    return device_id, registration_id


@pytest.fixture(scope="session")
def certificate_fixtures(root, x509_ids):
    logger.info("creating certificates")
    return create_all_certificates(x509_ids[1], root)


@pytest.fixture(scope="session")
def service_client(environment):
    return environment.service_client
