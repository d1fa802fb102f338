# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import pytest
import time


@pytest.fixture(autouse=True)
def sleep_mock(mocker):
    return mocker.patch.object(time, "sleep")


@pytest.fixture
def make_response(mocker):
    def _make_response(status_code=200, body=None, headers=None, reason="OK"):
        response = mocker.MagicMock()
        response.status_code = status_code
        response.reason = reason
        response.headers = headers or {}
        response.content = b"" if body is None else b"content"
        if body is None:
            response.json.side_effect = ValueError("No JSON object could be decoded")
        else:
            response.json.return_value = body
        return response

    return _make_response
