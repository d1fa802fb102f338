# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Retry of service operations that were throttled"""

import logging
import random
import time

logger = logging.getLogger(__name__)

max_failure_count = 5
initial_backoff = 10

THROTTLED_STATUS_CODE = 429


def is_throttled(error):
    """Return True if the error represents a request rejected because of throttling"""
    if getattr(error, "status_code", None) == THROTTLED_STATUS_CODE:
        return True
    return "ThrottlingBacklogTimeout" in str(error)


def run_with_retry(fun, args=(), kwargs=None, retry_on=Exception):
    """
    Call fun(*args, **kwargs), retrying with exponential backoff while the call is throttled.

    :param fun: The function to call
    :param tuple args: Positional arguments for the function
    :param dict kwargs: Keyword arguments for the function
    :param retry_on: The exception type(s) that may represent throttling
    :returns: The return value of the function
    """
    kwargs = kwargs or {}
    failures_left = max_failure_count
    backoff = initial_backoff + random.randint(1, 10)

    while True:
        try:
            return fun(*args, **kwargs)
        except retry_on as e:
            if is_throttled(e) and failures_left:
                failures_left = failures_left - 1
                logger.warning("{} failures left before giving up".format(failures_left))
                logger.warning("sleeping for {} seconds".format(backoff))
                time.sleep(backoff)
                backoff = backoff * 2
            else:
                raise
