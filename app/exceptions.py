from typing import Optional


class UploadUrlError(Exception):
    """Base error for the upload URL endpoint.

    Every subclass maps to one HTTP status and one envelope message; the
    optional ``error`` carries the underlying detail for the caller.
    """

    status_code = 500
    message = "request failed"

    def __init__(self, error: Optional[str] = None, message: Optional[str] = None):
        if message:
            self.message = message
        self.error = error
        super().__init__(error or self.message)


class InvalidBody(UploadUrlError):
    status_code = 400
    message = "invalid request body"


class InvalidContentLength(UploadUrlError):
    status_code = 400
    message = "invalid content length"


class SessionError(UploadUrlError):
    status_code = 500
    message = "failed to create AWS session"


class SigningError(UploadUrlError):
    status_code = 500
    message = "failed to sign request"
