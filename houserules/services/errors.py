from __future__ import annotations

# houserules/services/errors.py


class ServiceError(Exception):
    """Base class for failures a route turns into a 4xx response."""

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFound(ServiceError):
    status_code = 404


class BadRequest(ServiceError):
    status_code = 400
