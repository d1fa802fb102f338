# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Create an X509 individual enrollment from a device certificate file"""

import argparse
import os
import sys
from ..exceptions import ProvisioningServiceError
from ..models import enrollment
from . import common

CERT_FILE_SUFFIX = "-cert.pem"


def device_cert_file(cert_dir, device_id):
    return os.path.join(cert_dir, device_id + CERT_FILE_SUFFIX)


def create_enrollment(service_client, device_id, certificate_pem):
    record = enrollment.individual_enrollment(
        registration_id=device_id,
        attestation=enrollment.x509_client_certificate_attestation(certificate_pem),
        device_id=device_id,
    )
    return service_client.create_or_update_individual_enrollment(record)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create an X509 individual enrollment.")
    parser.add_argument(
        "-d",
        "--deviceid",
        dest="device_id",
        required=True,
        help="Unique identifier for the device that shall be created",
    )
    common.add_connection_string_argument(parser)
    parser.add_argument(
        "--certdir",
        default="cert",
        help="Directory holding <deviceid>-cert.pem. Default is ./cert",
    )
    common.add_verbose_argument(parser)
    args = parser.parse_args(argv)
    common.configure_logging(args)

    cert_file = device_cert_file(args.certdir, args.device_id)
    if not os.path.isfile(cert_file):
        print("Certificate File not found: {}".format(cert_file))
        return 1
    with open(cert_file, "r") as f:
        certificate_pem = f.read()

    try:
        service_client = common.create_service_client(args)
        result = create_enrollment(service_client, args.device_id, certificate_pem)
    except (ProvisioningServiceError, ValueError) as e:
        common.print_error("creating the individual enrollment", e)
        return 1
    common.print_record("enrollment record returned", result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
