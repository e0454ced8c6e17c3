"""
Example macro: Go Live on ImageFlux (WHIP)
- Create an ImageFlux multistream channel
- Point OBS at the channel's WHIP endpoint
- Start streaming

Requires:
  pip install obsws-python httpx

Configure via env vars:
  IMAGE_FLUX_AUTH_KEY, OBS_WS_HOST, OBS_WS_PORT, OBS_WS_PASSWORD
Optional:
  IMAGEFLUX_LADDER_FILE (TOML ladder, default: built-in 1080p60/720p60/480p24)
  PRINT_EVENTS (default: "1")
"""

import sys

from skills.imageflux_whip.templates.go_live_whip import main

if __name__ == "__main__":
    sys.exit(main())
