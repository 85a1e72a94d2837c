"""Client-facing broker failures.

Each failure carries the HTTP status and the error key the service broker
protocol expects, so the HTTP layer can render it without knowing the cause.
"""

from http import HTTPStatus
from typing import Optional


class FailureResponse(Exception):
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    error_key = "internal-error"

    def __init__(self, message: str, status_code: Optional[int] = None, error_key: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error_key is not None:
            self.error_key = error_key

    def to_dict(self) -> dict:
        return {"error": self.error_key, "description": self.message}


class InvalidServiceIDError(FailureResponse):
    status_code = HTTPStatus.BAD_REQUEST
    error_key = "invalid-service-id"

    def __init__(self, message: str = "Invalid service ID"):
        super().__init__(message)


class InvalidPlanIDError(FailureResponse):
    status_code = HTTPStatus.BAD_REQUEST
    error_key = "invalid-plan-id"

    def __init__(self, message: str = "Invalid plan ID"):
        super().__init__(message)
