from typing import Optional


class ReportError(Exception):
    """Base class for every failure the report endpoint can surface.

    ``public_message`` is what the caller sees; ``str(exc)`` is the
    operator-facing detail and is only ever written to the logs.
    """

    status_code: int = 500
    public_message: str = "Unexpected server error. Please try again later."

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail or self.public_message)


class MethodNotAllowed(ReportError):
    status_code = 405
    public_message = "Method not allowed. Use POST."


class ConfigError(ReportError):
    status_code = 500
    public_message = "Server configuration error: API key not set."


class ServiceExpired(ReportError):
    status_code = 410
    public_message = (
        "This 2026 Auspicious Report campaign has ended. "
        "Please check back for future editions."
    )


class InvalidBody(ReportError):
    status_code = 400
    public_message = "Invalid JSON body."


class InvalidInput(ReportError):
    status_code = 400
    public_message = "Missing or invalid 'dob'. Please provide DDMMMYYYY (e.g. 08DEC1977)."


class UpstreamError(ReportError):
    status_code = 502
    public_message = (
        "Report provider error. Please try again later "
        "or contact the site owner if this persists."
    )

    def __init__(self, upstream_status: int, upstream_body: str = ""):
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body
        super().__init__(f"Upstream API error: {upstream_status} {upstream_body}")


class UnexpectedError(ReportError):
    status_code = 500
    public_message = "Unexpected server error. Please try again later."
