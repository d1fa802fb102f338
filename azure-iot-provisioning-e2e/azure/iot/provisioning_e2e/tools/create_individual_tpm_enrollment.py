# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Create a TPM individual enrollment from an endorsement key"""

import argparse
import sys
from ..exceptions import ProvisioningServiceError
from ..models import enrollment
from . import common

REGISTRATION_ID = "first"


def create_enrollment(service_client, endorsement_key, registration_id=REGISTRATION_ID):
    record = enrollment.individual_enrollment(
        registration_id=registration_id,
        attestation=enrollment.tpm_attestation(endorsement_key),
    )
    return service_client.create_or_update_individual_enrollment(record)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create a TPM individual enrollment.")
    parser.add_argument(
        "-e",
        "--endorsementkey",
        dest="endorsement_key",
        required=True,
        help="Endorsement key for TPM",
    )
    common.add_connection_string_argument(parser)
    parser.add_argument(
        "-r",
        "--registrationid",
        dest="registration_id",
        default=REGISTRATION_ID,
        help="Registration id of the enrollment. Default is '{}'".format(REGISTRATION_ID),
    )
    common.add_verbose_argument(parser)
    args = parser.parse_args(argv)
    common.configure_logging(args)

    try:
        service_client = common.create_service_client(args)
        result = create_enrollment(service_client, args.endorsement_key, args.registration_id)
    except (ProvisioningServiceError, ValueError) as e:
        common.print_error("creating the individual enrollment", e)
        return 1
    common.print_record("enrollment record returned", result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
