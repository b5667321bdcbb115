"""Exception types raised by JobBoard stores and clients."""


class JobBoardError(Exception):
    """Base class for JobBoard errors."""
    pass


class ProfileStoreError(JobBoardError):
    """Raised when a profile read or write fails in the database."""
    pass


class JobStoreError(JobBoardError):
    """Raised when the job catalog cannot be read or written."""
    pass


class StorageError(JobBoardError):
    """Raised when an object storage upload or delete fails."""
    pass
