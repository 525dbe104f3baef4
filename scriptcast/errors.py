"""Error taxonomy for synthesis and playback failures."""

ERROR_KIND_AUTHENTICATION = "authentication"
ERROR_KIND_SYNTHESIS = "synthesis"
ERROR_KIND_TRANSPORT = "transport"
ERROR_KIND_PLAYBACK = "playback"
ERROR_KIND_ALREADY_RUNNING = "already_running"
ERROR_KIND_INVALID_FILE_NAME = "invalid_file_name"
ERROR_KIND_UNKNOWN = "unknown"


class ScriptcastError(RuntimeError):
    kind = ERROR_KIND_UNKNOWN


class AuthenticationError(ScriptcastError):
    """No API key configured, or the provider rejected it."""

    kind = ERROR_KIND_AUTHENTICATION


class SynthesisError(ScriptcastError):
    """Provider answered with a non-success response."""

    kind = ERROR_KIND_SYNTHESIS

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransportError(ScriptcastError):
    kind = ERROR_KIND_TRANSPORT


class PlaybackError(ScriptcastError):
    kind = ERROR_KIND_PLAYBACK


class AlreadyRunningError(ScriptcastError):
    kind = ERROR_KIND_ALREADY_RUNNING


class InvalidFileNameError(ScriptcastError):
    kind = ERROR_KIND_INVALID_FILE_NAME


def error_kind(exc: BaseException) -> str:
    """Return the taxonomy kind for an exception, "unknown" for foreign ones."""
    if isinstance(exc, ScriptcastError):
        return exc.kind
    return ERROR_KIND_UNKNOWN
