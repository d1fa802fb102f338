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
from ..exceptions import ProvisioningServiceError
from .query import Query
from .retry import run_with_retry

logger = logging.getLogger(__name__)

ENROLLMENTS_URL = "/enrollments/{id}"
ENROLLMENT_GROUPS_URL = "/enrollmentGroups/{id}"
REGISTRATIONS_URL = "/registrations/{id}"
ATTESTATION_MECHANISM_SUFFIX = "/attestationmechanism"
QUERY_SUFFIX = "/query"


class ProvisioningServiceClient(object):
    """
    API for connecting to, and conducting operations on a Device Provisioning Service

    Enrollment records are exchanged as dictionaries in the JSON shape of the service's REST API
    (see :mod:`azure.iot.provisioning_e2e.models.enrollment`).

    :param str host_name: The host name of the Device Provisioning Service
    :param str shared_access_key_name: The shared access key name of the
     Device Provisioning Service
    :param str shared_access_key: The shared access key of the Device Provisioning Service
    """

    err_msg = "Service Error {} - {}"

    def __init__(self, host_name, shared_access_key_name, shared_access_key):
        self.host_name = host_name
        self.shared_access_key_name = shared_access_key_name
        self._sastoken = ServiceSasToken.create_from_shared_access_key(
            host_name, shared_access_key_name, shared_access_key
        )
        self._session = requests.Session()

    @classmethod
    def create_from_connection_string(cls, connection_string):
        """
        Create a Provisioning Service Client from a connection string

        :param str connection_string: The connection string for the Device Provisioning Service
        :return: A new instance of :class:`ProvisioningServiceClient`
        :raises: ValueError if connection string is invalid
        """
        conn_str = cs.ConnectionString(connection_string)
        return cls(
            conn_str[cs.HOST_NAME],
            conn_str[cs.SHARED_ACCESS_KEY_NAME],
            conn_str[cs.SHARED_ACCESS_KEY],
        )

    # Individual Enrollments

    def create_or_update_individual_enrollment(self, enrollment, etag=None):
        """Create or update a device enrollment record.

        :param dict enrollment: The device enrollment record.
        :param str etag: The ETag of the enrollment record. Defaults to the record's own etag.
        :returns: The enrollment record stored by the service
        :rtype: dict
        """
        registration_id = enrollment["registrationId"]
        logger.info("Creating or updating individual enrollment {}".format(registration_id))
        return self._request(
            "PUT",
            ENROLLMENTS_URL.format(id=_quote(registration_id)),
            body=enrollment,
            etag=etag or enrollment.get("etag"),
        )

    def get_individual_enrollment(self, registration_id):
        return self._request("GET", ENROLLMENTS_URL.format(id=_quote(registration_id)))

    def get_individual_enrollment_attestation_mechanism(self, registration_id):
        return self._request(
            "POST",
            ENROLLMENTS_URL.format(id=_quote(registration_id)) + ATTESTATION_MECHANISM_SUFFIX,
        )

    def delete_individual_enrollment(self, registration_id, etag=None):
        """Delete a device enrollment record.

        :param str registration_id: The registration id of the enrollment, or the enrollment
         record itself (in which case its etag is used).
        :param str etag: The ETag of the enrollment record.
        """
        registration_id, etag = _id_and_etag(registration_id, "registrationId", etag)
        logger.info("Deleting individual enrollment {}".format(registration_id))
        self._request("DELETE", ENROLLMENTS_URL.format(id=_quote(registration_id)), etag=etag)

    # Enrollment Groups

    def create_or_update_enrollment_group(self, enrollment_group, etag=None):
        """Create or update a device enrollment group.

        :param dict enrollment_group: The device enrollment group.
        :param str etag: The ETag of the enrollment group. Defaults to the group's own etag.
        :returns: The enrollment group stored by the service
        :rtype: dict
        """
        group_id = enrollment_group["enrollmentGroupId"]
        logger.info("Creating or updating enrollment group {}".format(group_id))
        return self._request(
            "PUT",
            ENROLLMENT_GROUPS_URL.format(id=_quote(group_id)),
            body=enrollment_group,
            etag=etag or enrollment_group.get("etag"),
        )

    def get_enrollment_group(self, enrollment_group_id):
        return self._request("GET", ENROLLMENT_GROUPS_URL.format(id=_quote(enrollment_group_id)))

    def get_enrollment_group_attestation_mechanism(self, enrollment_group_id):
        return self._request(
            "POST",
            ENROLLMENT_GROUPS_URL.format(id=_quote(enrollment_group_id))
            + ATTESTATION_MECHANISM_SUFFIX,
        )

    def delete_enrollment_group(self, enrollment_group_id, etag=None):
        """Delete a device enrollment group.

        :param str enrollment_group_id: The id of the enrollment group, or the group record
         itself (in which case its etag is used).
        :param str etag: The ETag of the enrollment group.
        """
        enrollment_group_id, etag = _id_and_etag(enrollment_group_id, "enrollmentGroupId", etag)
        logger.info("Deleting enrollment group {}".format(enrollment_group_id))
        self._request(
            "DELETE", ENROLLMENT_GROUPS_URL.format(id=_quote(enrollment_group_id)), etag=etag
        )

    # Device Registration States

    def get_device_registration_state(self, registration_id):
        return self._request("GET", REGISTRATIONS_URL.format(id=_quote(registration_id)))

    def delete_device_registration_state(self, registration_id, etag=None):
        registration_id, etag = _id_and_etag(registration_id, "registrationId", etag)
        logger.info("Deleting device registration state {}".format(registration_id))
        self._request("DELETE", REGISTRATIONS_URL.format(id=_quote(registration_id)), etag=etag)

    # Queries

    def create_individual_enrollment_query(self, query_spec, page_size=None):
        """
        Create a Query object to access results of a Provisioning Service query
        for Individual Enrollments

        :param dict query_spec: The specification for the query, e.g. {"query": "*"}
        :param int page_size: The max results per page (optional)
        :returns: Query object that can iterate over results of the query
        :rtype: :class:`Query`
        """
        path = ENROLLMENTS_URL.format(id="").rstrip("/") + QUERY_SUFFIX
        return Query(query_spec, self._create_query_fn(path), page_size)

    def create_enrollment_group_query(self, query_spec, page_size=None):
        """
        Create a Query object to access results of a Provisioning Service query
        for Enrollment Groups

        :param dict query_spec: The specification for the query, e.g. {"query": "*"}
        :param int page_size: The max results per page (optional)
        :returns: Query object that can iterate over results of the query
        :rtype: :class:`Query`
        """
        path = ENROLLMENT_GROUPS_URL.format(id="").rstrip("/") + QUERY_SUFFIX
        return Query(query_spec, self._create_query_fn(path), page_size)

    def create_enrollment_group_device_registration_state_query(
        self, query_spec, enrollment_group_id, page_size=None
    ):
        """
        Create a Query object to access the Device Registration States of an Enrollment Group

        :param dict query_spec: The specification for the query, e.g. {"query": "*"}
        :param str enrollment_group_id: The id of the enrollment group
        :param int page_size: The max results per page (optional)
        :returns: Query object that can iterate over results of the query
        :rtype: :class:`Query`
        """
        path = REGISTRATIONS_URL.format(id=_quote(enrollment_group_id)) + QUERY_SUFFIX
        return Query(query_spec, self._create_query_fn(path), page_size)

    def _create_query_fn(self, path):
        def query_fn(query_spec, page_size, continuation_token):
            headers = {}
            if page_size is not None:
                headers[Query.page_size_header] = str(page_size)
            if continuation_token:
                headers[Query.continuation_token_header] = continuation_token
            response = self._send("POST", path, body=query_spec, extra_headers=headers)
            results = response.json() if response.content else []
            return results, response.headers.get(Query.continuation_token_header)

        return query_fn

    def _headers(self, etag=None, extra_headers=None):
        headers = {
            "Authorization": str(self._sastoken),
            "Request-Id": str(uuid.uuid4()),
            "User-Agent": constant.USER_AGENT,
            "Accept": "application/json",
        }
        if etag:
            headers["If-Match"] = etag
        headers.update(extra_headers or {})
        return headers

    def _request(self, method, path, body=None, etag=None):
        response = self._send(method, path, body=body, etag=etag)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def _send(self, method, path, body=None, etag=None, extra_headers=None):
        return run_with_retry(
            self._send_once,
            (method, path),
            {"body": body, "etag": etag, "extra_headers": extra_headers},
            retry_on=ProvisioningServiceError,
        )

    def _send_once(self, method, path, body=None, etag=None, extra_headers=None):
        url = "https://{hostname}{path}".format(hostname=self.host_name, path=path)
        logger.debug("sending https {} request to {}".format(method, path))
        try:
            response = self._session.request(
                method,
                url,
                params={"api-version": constant.PROVISIONING_SERVICE_API_VERSION},
                json=body,
                headers=self._headers(etag, extra_headers),
                timeout=constant.HTTP_TIMEOUT,
            )
        except requests.exceptions.RequestException as e:
            raise ProvisioningServiceError(
                "Unexpected HTTPS failure during {} {}".format(method, path)
            ) from e

        if not 200 <= response.status_code < 300:
            raise ProvisioningServiceError(
                self.err_msg.format(response.status_code, _error_message(response)),
                status_code=response.status_code,
            )
        return response


def _quote(value):
    return urllib.parse.quote(value, safe="")


def _id_and_etag(id_or_record, id_key, etag):
    if isinstance(id_or_record, dict):
        return id_or_record[id_key], etag or id_or_record.get("etag")
    return id_or_record, etag


def _error_message(response):
    try:
        details = response.json()
    except ValueError:
        return response.reason or response.text
    if isinstance(details, dict):
        return details.get("message") or details.get("Message") or response.reason
    return response.reason
