# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Create an X509 enrollment group from a signing certificate, first disabled and then enabled"""

import argparse
import sys
from ..exceptions import ProvisioningServiceError
from ..models import enrollment
from . import common

GROUP_ID = "first"


def create_enrollment_group(service_client, certificate_pem, group_id=GROUP_ID):
    """
    Create a disabled enrollment group, then re-submit the stored record enabled.

    :returns: The created record and the updated record
    """
    group = enrollment.enrollment_group(
        enrollment_group_id=group_id,
        attestation=enrollment.x509_signing_certificate_attestation(certificate_pem),
        provisioning_status=enrollment.PROVISIONING_STATUS_DISABLED,
    )
    created = service_client.create_or_update_enrollment_group(group)
    updated_group = dict(created)
    updated_group["provisioningStatus"] = enrollment.PROVISIONING_STATUS_ENABLED
    updated = service_client.create_or_update_enrollment_group(updated_group)
    return created, updated


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Create an X509 enrollment group from a signing certificate."
    )
    common.add_connection_string_argument(parser)
    parser.add_argument(
        "--certificate", required=True, help="Path to the PEM certificate used for the group"
    )
    common.add_verbose_argument(parser)
    args = parser.parse_args(argv)
    common.configure_logging(args)

    with open(args.certificate, "r") as f:
        certificate_pem = f.read()

    try:
        service_client = common.create_service_client(args)
        created, updated = create_enrollment_group(service_client, certificate_pem)
    except (ProvisioningServiceError, ValueError) as e:
        common.print_error("creating the group enrollment", e)
        return 1
    common.print_record("enrollment record returned", created)
    common.print_record("updated enrollment record returned", updated)
    return 0


if __name__ == "__main__":
    sys.exit(main())
