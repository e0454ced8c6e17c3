"""
ImageFlux Live API client: create a multistream channel with HLS renditions.

Install:
  pip install httpx

One POST, no retries. The response body is fully buffered and decoded into
ChannelCreationResult.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import httpx

from skills.imageflux_whip.templates.errors import (
    ApiStatusError,
    DecodeError,
    EmptyChannelIdError,
    NetworkError,
)

IMAGEFLUX_API_URL = "https://live-api.imageflux.jp/"
CREATE_CHANNEL_TARGET = "ImageFlux_20200316.CreateMultistreamChannelWithHLS"


# ---------------------------
# Streaming profile
# ---------------------------

def _require_positive(owner: str, **values: int):
    for name, value in values.items():
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            raise ValueError(f"{owner}.{name} must be a positive integer, got {value!r}")


@dataclass(frozen=True)
class VideoConfig:
    width: int
    height: int
    fps: int
    bps: int

    def __post_init__(self):
        _require_positive("video", width=self.width, height=self.height, fps=self.fps, bps=self.bps)


@dataclass(frozen=True)
class AudioConfig:
    bps: int

    def __post_init__(self):
        _require_positive("audio", bps=self.bps)


@dataclass(frozen=True)
class RenditionConfig:
    video: VideoConfig
    audio: AudioConfig
    duration_seconds: int = 1
    # Negative values are relative to the live edge.
    start_time_offset: int = -2
    archive_destination_id: str = ""

    def to_payload(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "durationSeconds": self.duration_seconds,
            "startTimeOffset": self.start_time_offset,
            "video": {
                "width": self.video.width,
                "height": self.video.height,
                "fps": self.video.fps,
                "bps": self.video.bps,
            },
            "audio": {"bps": self.audio.bps},
        }
        if self.archive_destination_id:
            out["archive"] = {"archive_destination_id": self.archive_destination_id}
        return out


@dataclass(frozen=True)
class StreamingProfile:
    hls: Tuple[RenditionConfig, ...]
    encrypt_key_uri: str = ""
    event_webhook_url: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return {
            "hls": [r.to_payload() for r in self.hls],
            "encrypt_key_uri": self.encrypt_key_uri,
            "event_webhook_url": self.event_webhook_url,
        }


DEFAULT_PROFILE = StreamingProfile(
    hls=(
        RenditionConfig(VideoConfig(1920, 1080, 60, 15_000_000), AudioConfig(320_000)),
        RenditionConfig(VideoConfig(1280, 720, 60, 2_500_000), AudioConfig(128_000)),
        RenditionConfig(VideoConfig(854, 480, 24, 950_000), AudioConfig(96_000)),
    )
)


# ---------------------------
# Response
# ---------------------------

@dataclass(frozen=True)
class ChannelCreationResult:
    channel_id: str
    sora_url: str

    @staticmethod
    def from_json(data: Any) -> "ChannelCreationResult":
        if not isinstance(data, dict):
            raise DecodeError(f"expected a JSON object, got {type(data).__name__}")
        channel_id = data.get("channel_id") or ""
        sora_url = data.get("sora_url") or ""
        if not isinstance(channel_id, str) or not isinstance(sora_url, str):
            raise DecodeError("channel_id and sora_url must be strings")
        return ChannelCreationResult(channel_id=channel_id, sora_url=sora_url)


def require_channel_id(result: ChannelCreationResult) -> ChannelCreationResult:
    if not result.channel_id:
        raise EmptyChannelIdError("Channel ID is empty in the response")
    return result


# ---------------------------
# Client
# ---------------------------

class ImageFluxClient:
    def __init__(
        self,
        auth_key: str,
        api_url: str = IMAGEFLUX_API_URL,
        http_client: Optional[httpx.Client] = None,
    ):
        self.auth_key = auth_key
        self.api_url = api_url
        self.http_client = http_client

    def _build_headers(self, target: str) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-Sora-Target": target,
            "Authorization": f"Bearer {self.auth_key}",
        }

    def _post(self, target: str, body: Dict[str, Any]) -> httpx.Response:
        content = json.dumps(body, separators=(",", ":"))
        headers = self._build_headers(target)
        if self.http_client is not None:
            return self.http_client.post(self.api_url, content=content, headers=headers)
        with httpx.Client() as client:
            return client.post(self.api_url, content=content, headers=headers)

    def create_channel(self, profile: StreamingProfile) -> ChannelCreationResult:
        """Create a multistream channel. Does not check channel_id; see require_channel_id."""
        try:
            response = self._post(CREATE_CHANNEL_TARGET, profile.to_payload())
        except httpx.TransportError as e:
            raise NetworkError(f"failed to reach ImageFlux API at {self.api_url}: {e}") from e

        if not response.is_success:
            raise ApiStatusError(response.status_code, response.text)

        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(f"failed to decode ImageFlux response body: {e}") from e
        return ChannelCreationResult.from_json(data)
