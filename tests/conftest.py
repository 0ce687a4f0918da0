"""
tests/conftest.py — Shared fixtures.

FakeSession stands in for requests.Session: routes are registered per
(method, path) and every request is recorded for assertions.
"""

import os
import sys
import json as jsonlib

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import requests


HOST = "http://mock.portainer"
BASE_URL = f"{HOST}/api"
TOKEN = "mock-token"


class FakeResponse:
    def __init__(self, status_code=200, data=None):
        self.status_code = status_code
        self._data = data
        self.text = "" if data is None else jsonlib.dumps(data)

    def json(self):
        if self._data is None:
            raise ValueError("No JSON body")
        return self._data


class FakeCall:
    def __init__(self, method, path, params, body, headers):
        self.method = method
        self.path = path
        self.params = params
        self.body = body
        self.headers = headers


class FakeSession:
    def __init__(self):
        self.headers = {}
        self.routes = {}
        self.calls = []

    def add(self, method, path, data=None, status=200, error=None):
        """Queue a response (or exception) for method + path."""
        self.routes.setdefault((method, path), []).append(
            error if error is not None else FakeResponse(status, data)
        )

    def request(self, method, url, params=None, json=None, timeout=None):
        assert url.startswith(BASE_URL), url
        path = url[len(BASE_URL):]
        self.calls.append(FakeCall(method, path, params, json, dict(self.headers)))

        queue = self.routes.get((method, path))
        if not queue:
            raise AssertionError(f"Unexpected request: {method} {path}")
        reply = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(reply, Exception):
            raise reply
        return reply

    def paths(self):
        return [(c.method, c.path) for c in self.calls]

    def last(self, method, path):
        for c in reversed(self.calls):
            if c.method == method and c.path == path:
                return c
        raise AssertionError(f"No {method} {path} call recorded")


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def client(session):
    from stackdeploy.api.client import DirectoryClient
    return DirectoryClient(HOST, TOKEN, session=session)


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")
