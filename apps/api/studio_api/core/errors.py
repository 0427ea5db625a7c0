"""
Domain errors.

Each one is an HTTPException so FastAPI renders it directly; services
raise them and routers let them propagate.
"""
from fastapi import HTTPException, status


class InvalidDate(HTTPException):
    def __init__(self, detail: str = "Invalid or past date"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ValidationError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class DuplicateTimeOff(HTTPException):
    def __init__(self, detail: str = "Time off already requested for this day"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class EmptyBatch(HTTPException):
    def __init__(self, detail: str = "All requested days already have time off"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class SlotConflict(HTTPException):
    def __init__(self, detail: str = "Time slot already booked"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ShiftStateError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Not allowed"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
