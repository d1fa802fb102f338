# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import logging
import urllib.parse
import uuid
import requests  # type: ignore
from .. import connection_string as cs
from .. import constant
from ..auth.sastoken import ServiceSasToken
from ..exceptions import IoTHubRegistryError
from .retry import run_with_retry

logger = logging.getLogger(__name__)

DEVICES_URL = "/devices/{id}"
TWINS_URL = "/twins/{id}"


class IoTHubRegistryClient(object):
    """
    Minimal IoT Hub registry access used to verify and clean up provisioned devices.

    :param str service_connection_string: The IoT Hub service connection string
    """

    err_msg = "Service Error {} - {}"

    def __init__(self, service_connection_string):
        conn_str = cs.ConnectionString(service_connection_string)
        self.host_name = conn_str[cs.HOST_NAME]
        self._sastoken = ServiceSasToken.create_from_shared_access_key(
            self.host_name, conn_str[cs.SHARED_ACCESS_KEY_NAME], conn_str[cs.SHARED_ACCESS_KEY]
        )
        self._session = requests.Session()

    @classmethod
    def create_from_connection_string(cls, connection_string):
        return cls(connection_string)

    def headers(self):
        return {
            "Authorization": str(self._sastoken),
            "Request-Id": str(uuid.uuid4()),
            "User-Agent": constant.USER_AGENT,
            "Accept": "application/json",
        }

    def get_twin(self, device_id):
        """Get the twin of a device

        :param str device_id: The id of the device
        :returns: The device twin
        :rtype: dict
        """
        response = run_with_retry(
            self._send,
            ("GET", TWINS_URL.format(id=_quote(device_id))),
            retry_on=IoTHubRegistryError,
        )
        return response.json()

    def delete_device(self, device_id, etag="*"):
        """Delete a device identity from the registry

        :param str device_id: The id of the device
        :param str etag: The ETag of the device identity. Defaults to any version.
        """
        logger.info("Deleting device {}".format(device_id))
        run_with_retry(
            self._send,
            ("DELETE", DEVICES_URL.format(id=_quote(device_id))),
            {"extra_headers": {"If-Match": etag}},
            retry_on=IoTHubRegistryError,
        )

    def try_delete_device(self, device_id):
        """Delete a device identity, logging rather than raising any failure

        :returns: True if the device was deleted
        """
        try:
            self.delete_device(device_id)
        except IoTHubRegistryError as e:
            logger.warning("ignoring delete error for device {}: {}".format(device_id, e))
            return False
        return True

    def _send(self, method, path, extra_headers=None):
        url = "https://{hostname}{path}".format(hostname=self.host_name, path=path)
        headers = self.headers()
        headers.update(extra_headers or {})
        logger.debug("sending https {} request to {}".format(method, path))
        try:
            response = self._session.request(
                method,
                url,
                params={"api-version": constant.IOTHUB_API_VERSION},
                headers=headers,
                timeout=constant.HTTP_TIMEOUT,
            )
        except requests.exceptions.RequestException as e:
            raise IoTHubRegistryError(
                "Unexpected HTTPS failure during {} {}".format(method, path)
            ) from e

        if not 200 <= response.status_code < 300:
            raise IoTHubRegistryError(
                self.err_msg.format(response.status_code, response.reason),
                status_code=response.status_code,
            )
        return response


def _quote(value):
    return urllib.parse.quote(value, safe="")
