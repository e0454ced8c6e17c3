"""
Error taxonomy for the ImageFlux WHIP go-live skill.

Every error is fatal to the run. `main()` maps the class to an exit code.
"""


class ImageFluxWhipError(Exception):
    exit_code = 1


class ConfigurationError(ImageFluxWhipError):
    """Missing or malformed environment / ladder file."""

    exit_code = 2


class NetworkError(ImageFluxWhipError):
    """The ImageFlux API could not be reached."""

    exit_code = 3


class ApiStatusError(NetworkError):
    """The ImageFlux API answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"ImageFlux API returned HTTP {status_code}: {body[:200]}")


class DecodeError(ImageFluxWhipError):
    exit_code = 4


class EmptyChannelIdError(ImageFluxWhipError):
    """The API call succeeded but no channel was allocated."""

    exit_code = 5


class ObsConnectionError(ImageFluxWhipError):
    exit_code = 6


class RPCError(ImageFluxWhipError):
    exit_code = 7

    def __init__(self, request: str, cause: BaseException):
        self.request = request
        self.cause = cause
        super().__init__(f"{request} failed: {cause}")
