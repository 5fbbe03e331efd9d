"""API error types

ClientError wraps a use case Error with the HTTP status it maps to; the app
renders it as {"error": {"code": ..., "message": ...}}.
"""

from fastapi import status
from libs.result import Error


class ClientError(Exception):
    def __init__(self, error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code

    def to_dict(self) -> dict:
        body = {
            "code": self.error.code,
            "message": self.error.message,
        }
        if self.error.reason:
            body["reason"] = self.error.reason
        return {"error": body}
