"""Test doubles for the OBS session and the ImageFlux HTTP endpoint."""

import json

import httpx

from skills.obs_websocket.templates.python_client import ObsVersionInfo


class FakeObsController:
    """In-memory stand-in for ObsController that records every call."""

    def __init__(self, fail_on: str | None = None, error: Exception | None = None):
        self.calls: list[tuple] = []
        self.disconnects = 0
        self.fail_on = fail_on
        self.error = error

    def _record(self, name: str, *args):
        self.calls.append((name, *args))
        if name == self.fail_on:
            raise self.error

    def get_version(self) -> ObsVersionInfo:
        self._record("get_version")
        return ObsVersionInfo(obs_version="30.1.2", obs_web_socket_version="5.4.2", rpc_version=1)

    def set_stream_service_settings(self, service_type, settings):
        self._record("set_stream_service_settings", service_type, settings)
        return None

    def start_stream(self):
        self._record("start_stream")
        return None

    def disconnect(self):
        self.disconnects += 1

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.disconnect()


class RecordingHandler:
    """httpx.MockTransport handler returning a canned response."""

    def __init__(self, status_code: int = 200, body=None, raw: bytes | None = None, exc=None):
        self.status_code = status_code
        self.body = body
        self.raw = raw
        self.exc = exc
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        if self.raw is not None:
            return httpx.Response(self.status_code, content=self.raw)
        return httpx.Response(self.status_code, content=json.dumps(self.body).encode())


