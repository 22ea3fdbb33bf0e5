"""
Client-visible failures raised by the order engine and the auth stage.

Each carries the HTTP status the API layer answers with.
"""


class OrderingError(Exception):
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFound(OrderingError):
    status_code = 404


class InvalidState(OrderingError):
    status_code = 400


class Forbidden(OrderingError):
    status_code = 403


class Unauthorized(OrderingError):
    status_code = 401
