# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import logging
import pytest
from azure.iot.provisioning_e2e.x509 import certificate_builder

logging.basicConfig(
    format="%(asctime)s %(levelname)-8s %(module)s:%(funcName)s:%(message)s",
    level=logging.WARNING,
    datefmt="%Y-%m-%d %H:%M:%S",
)
logging.getLogger("azure.iot").setLevel(level=logging.DEBUG)

"""
NOTE: Tests needing a non-specific, arbitrary exception should use one of the following fixtures.
The exceptions they return are not defined anywhere else, so they can only be handled by broad,
all-encompassing handling, and a test checking that one is raised cannot spuriously pass because
some other exception was raised.
"""

# Certificate generation dominates the runtime of these tests, so the smallest key size
# accepted by the cryptography library is used
TEST_KEY_SIZE = 1024


@pytest.fixture
def unexpected_exception():
    class UnexpectedException(Exception):
        pass

    e = UnexpectedException()
    return e


@pytest.fixture
def unexpected_base_exception():
    class UnexpectedBaseException(BaseException):
        pass

    return UnexpectedBaseException()


@pytest.fixture(scope="session")
def key_size():
    return TEST_KEY_SIZE


@pytest.fixture(scope="session")
def root_ca(key_size):
    return certificate_builder.create_intermediate_ca_certificate(
        "Test Root CA", None, key_size=key_size
    )


@pytest.fixture(scope="session")
def certificate_fixtures(root_ca, key_size):
    return certificate_builder.create_all_certificates("reg-0001", root_ca, key_size=key_size)
