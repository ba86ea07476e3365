from fastapi import HTTPException, status

# Typed failures. Each one is an HTTPException so routes can let them
# propagate and FastAPI renders the status/detail as-is.


class PerimeterViolation(HTTPException):
    def __init__(self, detail: str = "You cannot clock in outside the designated perimeter."):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class LocationUnavailable(HTTPException):
    def __init__(
        self,
        detail: str = "Unable to retrieve your location. Please enable location services.",
    ):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class MissingRecordId(HTTPException):
    def __init__(self, detail: str = "Missing record ID"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class AuthRequired(HTTPException):
    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class RoleForbidden(HTTPException):
    def __init__(self, detail: str = "User doesn't have sufficient privileges for this action"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class RecordNotFound(HTTPException):
    def __init__(self, record_id: str | None = None):
        detail = (
            f"Clock record with ID '{record_id}' not found."
            if record_id
            else "Clock record not found."
        )
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class SessionAlreadyOpen(HTTPException):
    def __init__(self, detail: str = "You are already clocked in."):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class SessionAlreadyClosed(HTTPException):
    def __init__(self, detail: str = "This shift has already been clocked out."):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ProfileExists(HTTPException):
    def __init__(self, detail: str = "User profile already exists."):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class StoreFailure(HTTPException):
    def __init__(
        self,
        detail: str = "Failed to update record",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    ):
        super().__init__(status_code=status_code, detail=detail)
