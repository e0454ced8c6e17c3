"""
Configuration for the ImageFlux WHIP go-live skill.

Env vars:
  IMAGE_FLUX_AUTH_KEY            (required) ImageFlux Live API bearer token
  OBS_WS_HOST, OBS_WS_PORT, OBS_WS_PASSWORD
Optional:
  IMAGEFLUX_LADDER_FILE  TOML file overriding the default HLS ladder
  IMAGEFLUX_API_URL      (default: https://live-api.imageflux.jp/)
  PRINT_EVENTS           (default: "1"; "0" silences progress output)

Ladder file:

  encrypt_key_uri = ""
  event_webhook_url = ""

  [[hls]]
  duration-seconds = 1
  start-time-offset = -2
  video = { width = 1920, height = 1080, fps = 60, bps = 15000000 }
  audio = { bps = 320000 }
  archive = { archive_destination_id = "" }
"""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from skills.imageflux_whip.templates.errors import ConfigurationError
from skills.imageflux_whip.templates.imageflux_client import (
    DEFAULT_PROFILE,
    IMAGEFLUX_API_URL,
    AudioConfig,
    RenditionConfig,
    StreamingProfile,
    VideoConfig,
)
from skills.obs_websocket.templates.python_client import ObsWsConfig

AUTH_KEY_ENV = "IMAGE_FLUX_AUTH_KEY"


# ---------------------------
# Ladder file
# ---------------------------

def _rendition_from_toml(index: int, entry: Dict[str, Any]) -> RenditionConfig:
    try:
        video = entry["video"]
        audio = entry["audio"]
        return RenditionConfig(
            video=VideoConfig(
                width=video["width"],
                height=video["height"],
                fps=video["fps"],
                bps=video["bps"],
            ),
            audio=AudioConfig(bps=audio["bps"]),
            duration_seconds=entry.get("duration-seconds", 1),
            start_time_offset=entry.get("start-time-offset", -2),
            archive_destination_id=entry.get("archive", {}).get("archive_destination_id", ""),
        )
    except KeyError as e:
        raise ConfigurationError(f"hls[{index}] is missing key {e}") from e
    except (TypeError, ValueError, AttributeError) as e:
        raise ConfigurationError(f"hls[{index}] is invalid: {e}") from e


def load_profile(path: Path) -> StreamingProfile:
    try:
        with path.open("rb") as f:
            doc = tomllib.load(f)
    except OSError as e:
        raise ConfigurationError(f"cannot read ladder file {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"ladder file {path} is not valid TOML: {e}") from e

    entries = doc.get("hls") or []
    if not isinstance(entries, list) or not entries:
        raise ConfigurationError(f"ladder file {path} defines no [[hls]] renditions")

    return StreamingProfile(
        hls=tuple(_rendition_from_toml(i, e) for i, e in enumerate(entries)),
        encrypt_key_uri=doc.get("encrypt_key_uri", ""),
        event_webhook_url=doc.get("event_webhook_url", ""),
    )


# ---------------------------
# Run configuration
# ---------------------------

@dataclass(repr=False)
class GoLiveConfig:
    obs: ObsWsConfig
    imageflux_auth_key: str
    profile: StreamingProfile = DEFAULT_PROFILE
    api_url: str = IMAGEFLUX_API_URL
    print_events: bool = True

    def __repr__(self) -> str:
        # No secrets in diagnostics.
        return (
            f"GoLiveConfig(obs={self.obs.address}, api_url={self.api_url!r}, "
            f"renditions={len(self.profile.hls)})"
        )

    @staticmethod
    def from_env(environ: Optional[Dict[str, str]] = None) -> "GoLiveConfig":
        env = os.environ if environ is None else environ

        key = env.get(AUTH_KEY_ENV, "").strip()
        if not key:
            raise ConfigurationError(f"{AUTH_KEY_ENV} environment variable is not set")

        obs_cfg = ObsWsConfig.from_env(env)

        ladder_file = env.get("IMAGEFLUX_LADDER_FILE", "").strip() or None
        profile = load_profile(Path(ladder_file)) if ladder_file else DEFAULT_PROFILE

        return GoLiveConfig(
            obs=obs_cfg,
            imageflux_auth_key=key,
            profile=profile,
            api_url=env.get("IMAGEFLUX_API_URL", "").strip() or IMAGEFLUX_API_URL,
            print_events=env.get("PRINT_EVENTS", "1") != "0",
        )
