from fastapi import HTTPException, status

class BaseAppException(HTTPException):
    def __init__(self, status_code: int, detail: str, headers: dict = None):
        super().__init__(status_code=status_code, detail=detail, headers=headers)

class ValidationError(BaseAppException):
    def __init__(self, detail: str = "Validation error"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class NotFoundError(BaseAppException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class ForbiddenError(BaseAppException):
    def __init__(self, detail: str = "Not authorized to perform this action"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

class UnauthorizedError(BaseAppException):
    def __init__(self, detail: str = "Not authorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

# State conflicts on the attendance ledger
class AlreadyCheckedInError(BaseAppException):
    def __init__(self, detail: str = "Already checked in today"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class NoCheckInFoundError(BaseAppException):
    def __init__(self, detail: str = "No check-in found for today"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class AlreadyCheckedOutError(BaseAppException):
    def __init__(self, detail: str = "Already checked out today"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

# State conflicts on the leave ledger
class AlreadyProcessedError(BaseAppException):
    def __init__(self, detail: str = "Leave application already processed"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class InsufficientBalanceError(BaseAppException):
    def __init__(self, detail: str = "Insufficient casual leave balance"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
