# =============================================================================
# Custom Exceptions for Daybook Calendar
# =============================================================================

from models.data_models import RefusalReason

class CalendarError(Exception):
    """Base exception class for Daybook Calendar."""
    pass

class FileOperationError(CalendarError):
    """Raised when file operations fail."""
    pass

class MutationRefusedError(CalendarError):
    """Raised inside the mutation layer when an operation must be a no-op."""
    reason = RefusalReason.INVALID_INPUT

    def __init__(self, message: str, reason: RefusalReason = None):
        super().__init__(message)
        if reason is not None:
            self.reason = reason

class DeletionBlockedError(MutationRefusedError):
    """Raised when a category is in use or an entity is system-protected."""
    reason = RefusalReason.SYSTEM_PROTECTED

class EntityNotFoundError(MutationRefusedError):
    """Raised when the target id does not exist in the snapshot."""
    reason = RefusalReason.NOT_FOUND

class InvalidPatchError(MutationRefusedError):
    """Raised when input or a merged patch does not validate."""
    reason = RefusalReason.INVALID_INPUT

class TimeOverlapError(MutationRefusedError):
    """Raised when new timed events would overlap existing ones."""
    reason = RefusalReason.TIME_OVERLAP

    def __init__(self, message: str, conflicts=None):
        super().__init__(message)
        self.conflicts = list(conflicts or [])
