"""
Go live on ImageFlux over WHIP.

- Connect to OBS (obs-websocket)
- Create an ImageFlux multistream channel with HLS renditions
- Point OBS's stream service at https://<sora host>/whip/<channel_id>
- Start streaming

Requires:
  pip install obsws-python httpx

The run is strictly linear. A failure at any step aborts the run; the OBS
session is always disconnected, the ImageFlux channel is never rolled back.
"""

import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional

from skills.imageflux_whip.templates.config import GoLiveConfig
from skills.imageflux_whip.templates.errors import ImageFluxWhipError
from skills.imageflux_whip.templates.imageflux_client import (
    ChannelCreationResult,
    ImageFluxClient,
    require_channel_id,
)
from skills.imageflux_whip.templates.whip_target import build_whip_server_url
from skills.obs_websocket.templates.python_client import (
    ObsController,
    ObsVersionInfo,
    client_library_version,
)

WHIP_SERVICE_TYPE = "whip_custom"


class Step(Enum):
    INIT = "init"
    CONNECTED = "connected"
    CHANNEL_CREATED = "channel_created"
    HOST_EXTRACTED = "host_extracted"
    SETTINGS_APPLIED = "settings_applied"
    STREAM_STARTED = "stream_started"
    DONE = "done"
    FAILED = "failed"


# What the run attempts while sitting in a given step.
NEXT_ACTION = {
    Step.INIT: "connect to OBS",
    Step.CONNECTED: "create ImageFlux channel",
    Step.CHANNEL_CREATED: "derive WHIP ingest host",
    Step.HOST_EXTRACTED: "set OBS stream service settings",
    Step.SETTINGS_APPLIED: "start stream",
    Step.STREAM_STARTED: "finish",
}


class GoLiveError(Exception):
    def __init__(self, step: Step, cause: BaseException, states: Optional[List[Step]] = None):
        self.step = step
        self.cause = cause
        # States reached by the run, ending in FAILED.
        self.states = list(states or [step]) + [Step.FAILED]
        super().__init__(f"go-live failed at '{NEXT_ACTION.get(step, step.value)}' (after {step.value}): {cause}")

    @property
    def exit_code(self) -> int:
        return getattr(self.cause, "exit_code", 1)


@dataclass
class GoLiveResult:
    channel: ChannelCreationResult
    server_url: str
    version: ObsVersionInfo
    settings_response: Any
    start_response: Any
    states: List[Step] = field(default_factory=list)


def go_live(
    cfg: GoLiveConfig,
    connect: Callable[..., ObsController] = ObsController.connect,
    provisioner: Optional[ImageFluxClient] = None,
    out: Optional[Callable[[str], None]] = None,
) -> GoLiveResult:
    if out is None:
        def out(msg: str):
            print(msg, flush=True)

    def _log(msg: str):
        if cfg.print_events:
            out(msg)

    if provisioner is None:
        provisioner = ImageFluxClient(cfg.imageflux_auth_key, api_url=cfg.api_url)

    states = [Step.INIT]
    _log(f"Connecting to OBS at {cfg.obs.address}...")
    try:
        ctl = connect(cfg.obs)
    except ImageFluxWhipError as e:
        raise GoLiveError(states[-1], e, states) from e

    with ctl:
        try:
            version = ctl.get_version()
            states.append(Step.CONNECTED)

            _log(f"Creating ImageFlux channel ({len(cfg.profile.hls)} HLS renditions)...")
            channel = require_channel_id(provisioner.create_channel(cfg.profile))
            out(f"CreateChannelResponse: {channel}")
            states.append(Step.CHANNEL_CREATED)

            server_url = build_whip_server_url(channel)
            states.append(Step.HOST_EXTRACTED)

            _log(f"Setting OBS stream service to {WHIP_SERVICE_TYPE} server={server_url}")
            settings_response = ctl.set_stream_service_settings(
                WHIP_SERVICE_TYPE, {"server": server_url}
            )
            out(f"SetStreamServiceSettings response: {settings_response!r}")
            states.append(Step.SETTINGS_APPLIED)

            start_response = ctl.start_stream()
            out(f"StartStream response: {start_response!r}")
            states.append(Step.STREAM_STARTED)
        except ImageFluxWhipError as e:
            raise GoLiveError(states[-1], e, states) from e

    out(f"OBS Studio version: {version.obs_version}")
    out(f"Server protocol version: {version.obs_web_socket_version}")
    out(f"RPC version: {version.rpc_version}")
    out(f"Client library version: {client_library_version()}")
    states.append(Step.DONE)

    return GoLiveResult(
        channel=channel,
        server_url=server_url,
        version=version,
        settings_response=settings_response,
        start_response=start_response,
        states=states,
    )


def main() -> int:
    try:
        cfg = GoLiveConfig.from_env()
    except ImageFluxWhipError as e:
        print(f"configuration error: {e}", file=sys.stderr)
        return e.exit_code

    try:
        go_live(cfg)
    except GoLiveError as e:
        print(str(e), file=sys.stderr)
        return e.exit_code

    print("Go live (ImageFlux WHIP) executed.")
    return 0
