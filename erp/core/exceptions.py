"""Domain errors raised by service functions and translated to HTTP responses by views"""
from rest_framework import status
from rest_framework.response import Response


class ERPError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BusinessRuleError(ERPError):
    status_code = status.HTTP_400_BAD_REQUEST


class ForbiddenError(ERPError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ERPError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ERPError):
    status_code = status.HTTP_409_CONFLICT


class UnprocessableError(ERPError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


def error_response(exc):
    """Response body for a domain error"""
    return Response({'success': False, 'message': exc.message}, status=exc.status_code)
