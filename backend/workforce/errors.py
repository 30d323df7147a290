"""Application errors rendered as {"detail": {"code", "message"}} responses."""
from fastapi import status

class BaseAppException(Exception):
    def __init__(self, code: str, message: str, http_status: int):
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)

    def to_body(self) -> dict:
        return {"detail": {"code": self.code, "message": self.message}}

class NotFoundError(BaseAppException):
    def __init__(self, code: str, message: str):
        super().__init__(code, message, status.HTTP_404_NOT_FOUND)
