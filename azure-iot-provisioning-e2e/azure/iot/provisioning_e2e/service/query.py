# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import logging

logger = logging.getLogger(__name__)


class Query(object):
    """
    Query object that can be used to iterate over Provisioning Service data.
    Note that for general usage, Query objects should be generated using a
    :class:`ProvisioningServiceClient` instance, not directly constructed.

    :param dict query_spec: The query specification, e.g. {"query": "*"}
    :param query_fn: Function making the HTTP query request. It must take args in the format
     query_fn(query_spec, page_size, continuation_token) and return a tuple of the page of
     results and the continuation token for the next page (None if there are no more pages).
    :param int page_size: Max number of results per page of query response
    :ivar page_size: Max number of results per page of query response
    :ivar has_next: Indicates if the Query has more results to return
    :ivar continuation_token: Token indicating current position in list of results
    :raises: ValueError if given an invalid page size
    """

    page_size_header = "x-ms-max-item-count"
    continuation_token_header = "x-ms-continuation"

    def __init__(self, query_spec, query_fn, page_size=None):
        self._query_spec = query_spec
        self._query_fn = query_fn
        self.page_size = page_size
        self.has_next = True
        self.continuation_token = None

    def __iter__(self):
        return self

    def __next__(self):
        return self.next()

    @property
    def page_size(self):
        return self._page_size

    @page_size.setter
    def page_size(self, value):
        if value is None or value > 0:
            self._page_size = value
        else:
            raise ValueError("Page size must be a positive number")

    def next(self, continuation_token=None):
        """
        Get the next page of query results

        :param str continuation_token: Token indicating a specific starting point in the set
         of all results
        :returns: The next page of results
        :rtype: list[dict]
        :raises: StopIteration if there are no more results or
         :class:`ProvisioningServiceError` if an error occurs on the Provisioning Service
        """
        if not self.has_next:
            raise StopIteration("No more results")

        if not continuation_token:
            continuation_token = self.continuation_token

        results, self.continuation_token = self._query_fn(
            self._query_spec, self._page_size, continuation_token
        )
        self.has_next = self.continuation_token is not None
        logger.debug(
            "Query returned {} results (more results: {})".format(len(results), self.has_next)
        )

        if not results and not self.has_next:
            raise StopIteration("No more results")
        return results
