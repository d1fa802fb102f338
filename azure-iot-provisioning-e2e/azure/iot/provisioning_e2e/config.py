# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module loads the settings of the provisioning end-to-end environment.

Settings are read from a ``_e2e_settings.json`` file found in the working directory or any of its
parents. Without such a file, they are read from environment variables.
"""

import base64
import json
import logging
import os
from . import constant
from .x509.certificate_builder import CertificateRecord

logger = logging.getLogger(__name__)

SETTINGS_FILE_NAME = "_e2e_settings.json"

# setting name -> (settings file key, environment variable)
_SETTINGS = {
    "id_scope": ("idScope", "IOT_PROVISIONING_DEVICE_IDSCOPE"),
    "provisioning_host": ("provisioningHost", "IOT_PROVISIONING_DEVICE_ENDPOINT"),
    "provisioning_connection_string": (
        "provisioningConnectionString",
        "IOT_PROVISIONING_SERVICE_CONNECTION_STRING",
    ),
    "iothub_connection_string": ("iothubConnectionString", "IOTHUB_CONNECTION_STRING"),
    "root_cert": ("rootCert", "IOT_PROVISIONING_ROOT_CERT"),
    "root_cert_key": ("rootCertKey", "IOT_PROVISIONING_ROOT_CERT_KEY"),
}


class E2ESettings(object):
    """
    Settings of the provisioning end-to-end environment. Accessing a setting that has not been
    configured raises a ValueError naming the environment variable that provides it.
    """

    def __init__(self, values, source=None):
        self._values = dict(values)
        self.source = source

    def __getattr__(self, name):
        if name.startswith("_") or name not in _SETTINGS:
            raise AttributeError(name)
        value = self._values.get(name)
        if name == "provisioning_host" and not value:
            return constant.PROVISIONING_GLOBAL_ENDPOINT
        if not value:
            raise ValueError(
                "Setting {} is not configured (environment variable {})".format(
                    name, _SETTINGS[name][1]
                )
            )
        return value

    def has(self, *names):
        """Return True if every one of the named settings is configured"""
        return all(self._values.get(name) for name in names)

    def root_certificate(self):
        """Decode the base64 encoded root certificate and key into a CertificateRecord"""
        return CertificateRecord(
            certificate_pem=base64.b64decode(self.root_cert).decode("ascii"),
            private_key_pem=base64.b64decode(self.root_cert_key).decode("ascii"),
        )


def _find_settings_file(start_path):
    test_path = os.path.realpath(start_path)
    while True:
        filename = os.path.join(test_path, SETTINGS_FILE_NAME)
        if os.path.isfile(filename):
            return filename
        new_test_path = os.path.dirname(test_path)
        if new_test_path == test_path:
            return None
        test_path = new_test_path


def get_settings(start_path=None, environ=None):
    """
    Load the end-to-end settings.

    :param str start_path: The directory to start searching for a settings file from.
     Defaults to the working directory.
    :param dict environ: The environment to read from. Defaults to os.environ.
    :rtype: :class:`E2ESettings`
    """
    filename = _find_settings_file(start_path or os.getcwd())
    if filename:
        with open(filename, "r") as f:
            secrets = json.load(f)
        logger.info("settings loaded from {}".format(filename))
        values = {name: secrets.get(key) for name, (key, _) in _SETTINGS.items()}
        return E2ESettings(values, source=filename)

    environ = os.environ if environ is None else environ
    values = {name: environ.get(variable) for name, (_, variable) in _SETTINGS.items()}
    return E2ESettings(values, source="environment")
