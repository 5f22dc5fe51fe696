"""
Errors raised by the gateway service layer.

Each error carries the HTTP status the API answers with; the message is
what ends up in the ``{"error": ...}`` body.
"""


class GatewayError(Exception):
    """Base class for failures that are reported to the client."""

    status_code = 500
    default_message = 'Internal error'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class MissingParameter(GatewayError):
    status_code = 400
    default_message = 'URL parameter is required'


class InvalidUrl(GatewayError):
    status_code = 400
    default_message = 'Invalid URL'


class InvalidParameter(GatewayError):
    status_code = 400
    default_message = 'Invalid parameter'


class ExternalToolFailure(GatewayError):
    """yt-dlp exited non-zero, timed out, or could not be started."""

    default_message = 'yt-dlp failed'


class MetadataParseFailure(GatewayError):
    default_message = 'Failed to parse video info'


class ArtifactNotFound(GatewayError):
    """yt-dlp reported success but no file carries the request token."""

    default_message = 'Downloaded file not found'


class AmbiguousArtifact(GatewayError):
    """More than one file carries the request token."""

    def __init__(self, token, filenames):
        self.token = token
        self.filenames = list(filenames)
        super().__init__(
            f'Found {len(self.filenames)} files for download {token}, expected exactly one'
        )


class NotFound(GatewayError):
    status_code = 404
    default_message = 'File not found'
