class ClientError(Exception):
    """Base class for everything the screen-ads client raises."""


class ApiError(ClientError):
    def __init__(self, status_code, message, payload=None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}

    @property
    def is_conflict(self) -> bool:
        return self.status_code == 409

    def __str__(self):
        if self.status_code is None:
            return self.message
        return f"{self.status_code}: {self.message}"


class ValidationError(ClientError):
    pass


class WizardError(ClientError):
    """Raised for a step change the booking wizard does not allow."""


class RequestInFlightError(ClientError):
    """An action of the same kind is still waiting for the server."""
