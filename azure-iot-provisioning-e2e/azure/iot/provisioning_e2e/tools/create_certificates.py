# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""
Create the certificate fixtures of the X509 scenarios for a registration id and write them to a
directory. The root CA is read from PEM files, or created as a self-signed CA when omitted.
"""

import argparse
import os
import sys
from ..exceptions import (
    InvalidArgumentError,
    InvalidParentError,
    KeyGenerationFailedError,
    SigningFailedError,
)
from ..x509 import certificate_builder

ROOT_COMMON_NAME = "Azure IoT Provisioning E2E Root CA"
EXTENSION_NAME = ".pem"


def write_record(out_dir, name, record):
    """Write the certificate and key of a record as <name>-cert.pem and <name>-key.pem"""
    cert_file = os.path.join(out_dir, name + "-cert" + EXTENSION_NAME)
    key_file = os.path.join(out_dir, name + "-key" + EXTENSION_NAME)
    with open(cert_file, "w") as f:
        f.write(record.certificate_pem)
    with open(key_file, "w") as f:
        f.write(record.private_key_pem)
    return cert_file, key_file


def load_root(cert_file, key_file):
    with open(cert_file, "r") as f:
        certificate_pem = f.read()
    with open(key_file, "r") as f:
        private_key_pem = f.read()
    return certificate_builder.CertificateRecord(certificate_pem, private_key_pem)


def create_certificates(registration_id, out_dir, root=None, key_size=None):
    """
    Create and write every fixture. Device certificate files are named after the registration id
    so they can be enrolled with create_individual_x509_enrollment.

    :returns: The list of files written
    """
    key_size = key_size or certificate_builder.DEFAULT_KEY_SIZE
    written = []
    if root is None:
        root = certificate_builder.create_intermediate_ca_certificate(
            ROOT_COMMON_NAME, None, key_size=key_size
        )
        written.extend(write_record(out_dir, "root", root))

    fixtures = certificate_builder.create_all_certificates(registration_id, root, key_size=key_size)
    written.extend(write_record(out_dir, registration_id, fixtures.self_signed))
    written.extend(
        write_record(out_dir, registration_id + "-without-chain", fixtures.without_chain)
    )
    written.extend(write_record(out_dir, "intermediate1", fixtures.intermediate1))
    written.extend(write_record(out_dir, "intermediate2", fixtures.intermediate2))
    written.extend(write_record(out_dir, registration_id + "-with-chain", fixtures.with_chain))
    return written


def main(argv=None):
    parser = argparse.ArgumentParser(description="Generate the X509 provisioning fixtures.")
    parser.add_argument("registration_id", help="Registration id used as the device common name.")
    parser.add_argument(
        "-o", "--out-dir", default="cert", help="Directory to write to. Default is ./cert"
    )
    parser.add_argument("--root-cert", help="PEM file of the root CA certificate.")
    parser.add_argument("--root-key", help="PEM file of the root CA private key.")
    parser.add_argument(
        "-s",
        "--key-size",
        type=int,
        help="Size of the keys in bits. Default is {}.".format(
            certificate_builder.DEFAULT_KEY_SIZE
        ),
    )
    args = parser.parse_args(argv)

    if bool(args.root_cert) != bool(args.root_key):
        parser.error("--root-cert and --root-key must be given together")

    os.makedirs(args.out_dir, exist_ok=True)
    root = load_root(args.root_cert, args.root_key) if args.root_cert else None

    try:
        written = create_certificates(
            args.registration_id, args.out_dir, root=root, key_size=args.key_size
        )
    except (
        InvalidArgumentError,
        InvalidParentError,
        KeyGenerationFailedError,
        SigningFailedError,
    ) as e:
        print("error creating the certificates: {}".format(e))
        return 1
    for filename in written:
        print(filename)
    return 0


if __name__ == "__main__":
    sys.exit(main())
