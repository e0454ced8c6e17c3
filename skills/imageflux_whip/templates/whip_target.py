"""Derive the WHIP ingest endpoint from a channel creation response."""

from dataclasses import dataclass

from skills.imageflux_whip.templates.imageflux_client import ChannelCreationResult

# Checked in order; only the first match is stripped.
KNOWN_PREFIXES = ("wss://", "https://")


def extract_host(url: str) -> str:
    """Best-effort host: drop a known scheme prefix, cut at the first '/'.

    Never raises. Scheme-less input is returned up to its first '/'.
    """
    rest = url
    for prefix in KNOWN_PREFIXES:
        if rest.startswith(prefix):
            rest = rest[len(prefix):]
            break
    slash = rest.find("/")
    if slash == -1:
        return rest
    return rest[:slash]


@dataclass(frozen=True)
class IngestTarget:
    host: str
    channel_id: str

    @staticmethod
    def from_channel(result: ChannelCreationResult) -> "IngestTarget":
        return IngestTarget(host=extract_host(result.sora_url), channel_id=result.channel_id)

    @property
    def server_url(self) -> str:
        return f"https://{self.host}/whip/{self.channel_id}"


def build_whip_server_url(result: ChannelCreationResult) -> str:
    return IngestTarget.from_channel(result).server_url
