"""Error taxonomy shared by the service, access gate and routes.

Every error carries the HTTP status it maps to and a short public message.
The message passed to the constructor is the internal diagnostic; it is logged
but never returned to the client.
"""
from __future__ import annotations


class AppError(Exception):
    status_code = 500
    public_message = "Internal server error."

    def __init__(self, detail: str | None = None, *, public_message: str | None = None):
        super().__init__(detail or public_message or self.public_message)
        if public_message is not None:
            self.public_message = public_message

    @property
    def headers(self) -> dict[str, str] | None:
        return None


class ValidationError(AppError):
    status_code = 400
    public_message = "No status fields provided to update."


class NotFoundError(AppError):
    status_code = 404
    public_message = "Submission not found."


class StorageError(AppError):
    status_code = 500
    public_message = "Storage operation failed."


class AuthError(AppError):
    status_code = 401
    public_message = "Authentication required."

    def __init__(self, detail: str | None = None, *, realm: str = "SafetyFix"):
        super().__init__(detail)
        self.realm = realm

    @property
    def headers(self) -> dict[str, str]:
        return {"WWW-Authenticate": f'Basic realm="{self.realm}"'}


class BadRequestError(AppError):
    status_code = 400
    public_message = "Invalid request body."
