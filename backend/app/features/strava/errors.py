"""
Strava integration errors.

StravaError
 ├── StravaConfigError      client id/secret or encryption key missing
 ├── StravaAPIError         non-2xx response (status_code + body)
 ├── StravaTransportError   network failure or timeout
 ├── StravaDecodeError      malformed or incomplete JSON
 └── TokenError             stored credentials unusable
      ├── TokenDecryptionError
      ├── TokenRefreshError
      └── TokenPersistError
"""


class StravaError(Exception):
    """Base Strava error."""
    pass


class StravaConfigError(StravaError):
    """Required configuration is missing."""
    pass


class StravaAPIError(StravaError):
    """Strava API returned a non-success status."""

    def __init__(self, status_code: int, body: str, message: str = "Strava API error"):
        self.status_code = status_code
        self.body = body
        super().__init__(f"{message}: status={status_code}, body={body}")


class StravaTransportError(StravaError):
    """Request never produced a response (connection error, timeout)."""
    pass


class StravaDecodeError(StravaError):
    """Response body could not be decoded."""
    pass


class TokenError(StravaError):
    """Stored OAuth tokens cannot be used."""
    pass


class TokenDecryptionError(TokenError):
    """Stored token could not be decrypted."""
    pass


class TokenRefreshError(TokenError):
    """Refresh round-trip with Strava failed."""
    pass


class TokenPersistError(TokenError):
    """Refreshed tokens could not be saved."""
    pass
