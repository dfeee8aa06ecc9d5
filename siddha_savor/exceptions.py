"""
Domain errors rendered by the app-level error handler as
{'success': False, 'error': message} with the matching status code.
"""


class SavorError(Exception):
    status_code = 500
    message = 'Server error. Please try again later'

    def __init__(self, message=None, details=None):
        self.message = message or self.message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self):
        return {'success': False, 'error': self.message}


class ValidationError(SavorError):
    status_code = 400
    message = 'Invalid request parameters'


class InvalidTokenError(ValidationError):
    message = 'Invalid or expired token'


class TokenExpiredError(ValidationError):
    message = 'This link or code has expired'


class TokenAlreadyUsedError(ValidationError):
    message = 'This link or code has already been used'


class CodeMismatchError(ValidationError):
    message = 'Invalid verification code'


class NotFoundError(SavorError):
    status_code = 404
    message = 'Not found'


class AuthError(SavorError):
    status_code = 401
    message = 'Authentication required'


class PermissionDeniedError(SavorError):
    status_code = 403
    message = 'Permission denied'


class UpstreamError(SavorError):
    status_code = 500
