import httpx
import pytest

from skills.imageflux_whip.templates.config import GoLiveConfig
from skills.imageflux_whip.templates.imageflux_client import DEFAULT_PROFILE, ImageFluxClient
from skills.obs_websocket.templates.python_client import ObsWsConfig
from tests.fakes import RecordingHandler

ENV_VARS = [
    "IMAGE_FLUX_AUTH_KEY",
    "OBS_WS_HOST",
    "OBS_WS_PORT",
    "OBS_WS_PASSWORD",
    "IMAGEFLUX_LADDER_FILE",
    "IMAGEFLUX_API_URL",
    "PRINT_EVENTS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_client():
    def _make(handler: RecordingHandler) -> ImageFluxClient:
        http = httpx.Client(transport=httpx.MockTransport(handler))
        return ImageFluxClient("secret-token", http_client=http)

    return _make


@pytest.fixture
def go_live_config() -> GoLiveConfig:
    return GoLiveConfig(
        obs=ObsWsConfig(host="100.64.0.2", port=4455, password="pw"),
        imageflux_auth_key="secret-token",
        profile=DEFAULT_PROFILE,
    )
