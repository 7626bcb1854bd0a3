from fastapi import status

from partner_iam.domain.errors import ErrorKind
from partner_iam.domain.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)

    def body(self) -> dict:
        return {"error": self.base_error.code, "message": self.base_error.message}


class ServerError(Exception):
    """
    Failure the caller cannot fix.

    Only COMPENSATION_FAILURE exposes its details: operators need the
    orphaned identity id to clean up by hand.
    """

    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)

    def body(self) -> dict:
        error = self.base_error
        if error.code == ErrorKind.compensation_failure.value:
            return {
                "error": error.code,
                "message": error.message,
                "orphaned_identity_id": error.details.get("orphaned_identity_id"),
            }
        return {"error": error.code, "message": "Internal server error"}
