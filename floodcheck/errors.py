"""Error taxonomy for the daily flood check."""


class FloodCheckError(Exception):
    """Base class for flood check failures."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamUnavailable(FloodCheckError):
    """Weather provider unreachable or returned an unusable response. Fatal to the run."""


class PredictionFailure(FloodCheckError):
    """Prediction service call failed for a single forecast period."""


class NotificationDeliveryFailure(FloodCheckError):
    """Push notification could not be sent."""


class AuditWriteFailure(FloodCheckError):
    """Run record could not be appended to the audit store."""
