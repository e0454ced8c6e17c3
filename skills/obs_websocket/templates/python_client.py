"""
Gesell template: OBS WebSocket Python client (obsws-python).

Install:
  pip install obsws-python

Env vars (recommended):
  OBS_WS_HOST, OBS_WS_PORT, OBS_WS_PASSWORD

Only the requests the go-live flow needs are wrapped. Every failure coming
out of obsws-python is re-raised as ObsConnectionError (connect) or RPCError
(any request), so callers deal with one error family.
"""

import os
from dataclasses import dataclass
from importlib import metadata
from typing import Any, Dict, Optional

from obsws_python import ReqClient
from obsws_python.error import OBSSDKError
from websocket import WebSocketException

from skills.imageflux_whip.templates.errors import (
    ConfigurationError,
    ObsConnectionError,
    RPCError,
)


@dataclass
class ObsWsConfig:
    host: str = "localhost"
    port: int = 4455
    password: str = ""

    @staticmethod
    def from_env(environ: Optional[Dict[str, str]] = None) -> "ObsWsConfig":
        env = os.environ if environ is None else environ
        host = env.get("OBS_WS_HOST", "localhost")
        raw_port = env.get("OBS_WS_PORT", "4455")
        try:
            port = int(raw_port)
        except ValueError:
            raise ConfigurationError(f"OBS_WS_PORT must be an integer, got {raw_port!r}")
        # The password is handed to obsws-python as-is, even when empty.
        password = env.get("OBS_WS_PASSWORD", "")
        return ObsWsConfig(host=host, port=port, password=password)

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass
class ObsVersionInfo:
    obs_version: str
    obs_web_socket_version: str
    rpc_version: int


def client_library_version() -> str:
    try:
        return metadata.version("obsws-python")
    except metadata.PackageNotFoundError:
        return "unknown"


class ObsController:
    """One obs-websocket session, owned by a single go-live run."""

    def __init__(self, client, cfg: ObsWsConfig):
        self.cfg = cfg
        self.client = client
        self._closed = False

    @classmethod
    def connect(cls, cfg: ObsWsConfig) -> "ObsController":
        try:
            client = ReqClient(host=cfg.host, port=cfg.port, password=cfg.password)
        except (OBSSDKError, WebSocketException, OSError, ValueError) as e:
            raise ObsConnectionError(f"could not connect to OBS at {cfg.address}: {e}") from e
        return cls(client, cfg)

    def _call(self, request: str, fn, *args) -> Any:
        try:
            return fn(*args)
        except (OBSSDKError, WebSocketException, OSError) as e:
            raise RPCError(request, e) from e

    def get_version(self) -> ObsVersionInfo:
        ver = self._call("GetVersion", self.client.get_version)
        return ObsVersionInfo(
            obs_version=getattr(ver, "obs_version", ""),
            obs_web_socket_version=getattr(ver, "obs_web_socket_version", ""),
            rpc_version=getattr(ver, "rpc_version", 0),
        )

    def set_stream_service_settings(self, service_type: str, settings: Dict[str, Any]):
        return self._call(
            "SetStreamServiceSettings",
            self.client.set_stream_service_settings,
            service_type,
            settings,
        )

    def start_stream(self):
        return self._call("StartStream", self.client.start_stream)

    def disconnect(self):
        if self._closed:
            return
        self._closed = True
        self.client.disconnect()

    def __enter__(self) -> "ObsController":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.disconnect()
