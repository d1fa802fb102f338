# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the argument handling and output shared by the command line tools"""

import json
import logging
from ..service.provisioning_service_client import ProvisioningServiceClient


def add_connection_string_argument(parser):
    parser.add_argument(
        "-c",
        "--connectionstring",
        dest="connection_string",
        required=True,
        help="The connection string for the Device Provisioning instance",
    )


def add_verbose_argument(parser):
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log requests and responses to stderr"
    )


def configure_logging(args):
    if getattr(args, "verbose", False):
        logging.basicConfig(level=logging.DEBUG)


def create_service_client(args):
    return ProvisioningServiceClient.create_from_connection_string(args.connection_string)


def print_record(label, record):
    print("{}: {}".format(label, json.dumps(record, indent=2)))


def print_error(action, error):
    print("error {}: {}".format(action, error))
