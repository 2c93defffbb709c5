"""Error types surfaced by the alert service."""


class AlertError(Exception):
    """Base exception for alert operations."""

    message = "Alert operation failed."

    def __str__(self) -> str:
        return self.message


class InvalidLocationError(AlertError):
    """No location was available for a report submission."""

    message = "Invalid location."


class AlertNotFoundError(AlertError):
    """A mutation referenced an alert id that is not in the store."""

    message = "Alert not found."

    def __init__(self, alert_id=None):
        super().__init__(alert_id)
        self.alert_id = alert_id


class UploadFailedError(AlertError):
    """Photo attachment failed."""

    message = "Upload failed."


class NetworkError(AlertError):
    """Wraps any backend failure, transport or decode."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return f"Network error: {self.detail}"
