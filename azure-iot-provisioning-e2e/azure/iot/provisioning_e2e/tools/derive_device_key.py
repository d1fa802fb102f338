# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Print the device key derived from an enrollment group's key for a registration id"""

import argparse
import sys
from ..auth.derived_key import derive_device_key


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Derive the symmetric key of a device in a symmetric key enrollment group."
    )
    parser.add_argument(
        "--master-key", required=True, help="The base64 encoded key of the enrollment group"
    )
    parser.add_argument(
        "--registration-id", required=True, help="The registration id of the device"
    )
    args = parser.parse_args(argv)

    try:
        device_key = derive_device_key(args.master_key, args.registration_id)
    except ValueError as e:
        print("error deriving the device key: {}".format(e))
        return 1
    print(device_key)
    return 0


if __name__ == "__main__":
    sys.exit(main())
