class SessionStoreError(Exception):
    """
    Base error for upload session storage operations.
    """


class ClientUnavailableError(SessionStoreError):
    def __init__(self, message: str = "Records client not available"):
        super().__init__(message)


class BackendError(SessionStoreError):
    """
    Backend answered with success=false, or returned no usable result.
    """


class BatchOperationError(SessionStoreError):
    """
    One or more records in a batch request failed.
    `failures` holds the per-record messages reported by the backend.
    """

    def __init__(self, message: str, failures: list[str] | None = None):
        super().__init__(message)
        self.failures = failures or []


class SessionNotFoundError(SessionStoreError):
    def __init__(self, session_id: int):
        super().__init__(f"Upload session with ID {session_id} not found")
        self.session_id = session_id


class UploadFailedError(Exception):
    """
    Raised by the upload simulator when a fault is injected.
    """
