# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""List every individual enrollment, every enrollment group, and each group's registrations"""

import argparse
import json
import sys
from ..exceptions import ProvisioningServiceError
from . import common

QUERY_ALL = {"query": "*"}
PAGE_SIZE = 10


def query_all(service_client, out=print, page_size=PAGE_SIZE):
    """
    Page through the individual enrollments, then the enrollment groups and the device
    registration states of each group, passing every line of output to out.
    """
    out("Querying for the enrollments: ")
    for page in service_client.create_individual_enrollment_query(QUERY_ALL, page_size):
        for record in page:
            out(json.dumps(record, indent=2))

    out("Querying for the Enrollment Groups")
    for page in service_client.create_enrollment_group_query(QUERY_ALL, page_size):
        for group in page:
            out(json.dumps(group, indent=2))
            _query_registration_states(service_client, group["enrollmentGroupId"], out, page_size)


def _query_registration_states(service_client, group_id, out, page_size):
    query = service_client.create_enrollment_group_device_registration_state_query(
        QUERY_ALL, group_id, page_size
    )
    printed_header = False
    for page in query:
        for registration_state in page:
            if not printed_header:
                printed_header = True
                out(
                    "For {}, all of its the Device Registrations Status objects: ".format(group_id)
                )
            out(json.dumps(registration_state, indent=2))


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="List the enrollments and registrations of a Device Provisioning instance."
    )
    common.add_connection_string_argument(parser)
    parser.add_argument(
        "--page-size",
        type=int,
        default=PAGE_SIZE,
        help="Max number of results per page. Default is {}".format(PAGE_SIZE),
    )
    common.add_verbose_argument(parser)
    args = parser.parse_args(argv)
    common.configure_logging(args)

    try:
        service_client = common.create_service_client(args)
        query_all(service_client, page_size=args.page_size)
    except (ProvisioningServiceError, ValueError) as e:
        common.print_error("fetching the results", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
