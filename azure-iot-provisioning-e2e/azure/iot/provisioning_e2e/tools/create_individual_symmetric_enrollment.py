# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Create a symmetric key individual enrollment allocated by a custom allocation webhook"""

import argparse
import sys
from .. import constant
from ..exceptions import ProvisioningServiceError
from ..models import enrollment
from . import common

ALLOCATION_POLICY_CUSTOM = "custom"


def create_enrollment(service_client, device_id, webhook_url):
    record = enrollment.individual_enrollment(
        registration_id=device_id,
        attestation=enrollment.symmetric_key_attestation(),
        device_id=device_id,
        allocation_policy=ALLOCATION_POLICY_CUSTOM,
        custom_allocation_definition=enrollment.custom_allocation_definition(
            webhook_url, constant.CUSTOM_ALLOCATION_API_VERSION
        ),
    )
    return service_client.create_or_update_individual_enrollment(record)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Create a symmetric key individual enrollment with custom allocation."
    )
    parser.add_argument(
        "-d",
        "--deviceid",
        dest="device_id",
        required=True,
        help="Unique identifier for the device that shall be created",
    )
    common.add_connection_string_argument(parser)
    parser.add_argument(
        "-w",
        "--webhookurl",
        dest="webhook_url",
        required=True,
        help="Web URL of the Azure Function performing the allocation",
    )
    common.add_verbose_argument(parser)
    args = parser.parse_args(argv)
    common.configure_logging(args)

    try:
        service_client = common.create_service_client(args)
        result = create_enrollment(service_client, args.device_id, args.webhook_url)
    except (ProvisioningServiceError, ValueError) as e:
        common.print_error("creating the individual enrollment", e)
        return 1
    common.print_record("enrollment record returned", result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
