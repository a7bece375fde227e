"""
Custom exceptions for the ChezFlora backend

Services raise these; api.exceptions.custom_exception_handler turns them
into the uniform error envelope using ``status_code``.
"""


class ChezFloraException(Exception):
    """Base exception for all ChezFlora errors"""
    status_code = 500

    def __init__(self, message: str, code: str = "CHEZFLORA_ERROR", status_code: int = None):
        self.message = message
        self.code = code
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class NotFoundException(ChezFloraException):
    """Entity is missing or not owned by the requester"""
    status_code = 404

    def __init__(self, message: str, entity: str = None):
        self.entity = entity
        super().__init__(message=message, code="NOT_FOUND")


class InvalidOperationException(ChezFloraException):
    """Business rule violation: stock, status transitions, duplicates"""
    status_code = 400

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message=message, code="INVALID_OPERATION")


class InsufficientStockException(InvalidOperationException):
    """Requested quantity exceeds what the product has on hand"""
    def __init__(self, message: str, product_id=None, available: int = None):
        self.product_id = product_id
        self.available = available
        super().__init__(message=message, field="quantity")


class InvalidTransitionException(InvalidOperationException):
    """Order or quote is not in the status the operation requires"""
    def __init__(self, message: str, current_status: str = None):
        self.current_status = current_status
        super().__init__(message=message, field="status")


class AuthenticationException(ChezFloraException):
    """Missing, invalid or expired credentials"""
    status_code = 401

    def __init__(self, message: str):
        super().__init__(message=message, code="AUTHENTICATION_FAILED")


class PermissionException(ChezFloraException):
    """Authenticated but not allowed (wrong role, deactivated account)"""
    status_code = 403

    def __init__(self, message: str):
        super().__init__(message=message, code="PERMISSION_DENIED")
