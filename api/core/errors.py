"""
Typed failures raised by the feature services.

Services never build HTTP responses. They raise one of these and
`core.error_handlers` turns it into `{"error": "<message>"}` with the
status code carried by the class.
"""

from __future__ import annotations


class AppError(RuntimeError):
    status_code = 500
    default_message = "Unexpected error."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class DuplicateIdentityError(AppError):
    status_code = 400
    default_message = "An account with this email or document is already registered."


class InvalidKindError(AppError):
    status_code = 400
    default_message = "Invalid institution kind. Must be NGO or MUNICIPALITY."


class InvalidCredentialsError(AppError):
    status_code = 401
    # Same text whether the email is unknown or the password is wrong.
    default_message = "Invalid email or password."


class InvalidTokenError(AppError):
    status_code = 401
    default_message = "Invalid access token."


class UnknownPrincipalError(AppError):
    status_code = 401
    default_message = "Token subject no longer exists."


class ForbiddenError(AppError):
    status_code = 403
    default_message = "You do not have permission to modify this resource."


class NotFoundError(AppError):
    status_code = 404
    default_message = "Resource not found."


class NoStatusError(AppError):
    status_code = 400
    default_message = "No status found for this pet."


class InvalidUploadError(AppError):
    status_code = 400
    default_message = "Invalid image upload."


class UnexpectedError(AppError):
    status_code = 500
