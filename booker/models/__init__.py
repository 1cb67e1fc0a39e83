from booker.models.failure import (
    ApiResponse,
    CredentialUnavailableError,
    FailureDetail,
    FailureKind,
    KnownError,
    OutcomeType,
)
from booker.models.record import Record, SortDirection, SortSpec, new_record_id, utc_now_iso

__all__ = [
    "ApiResponse",
    "CredentialUnavailableError",
    "FailureDetail",
    "FailureKind",
    "KnownError",
    "OutcomeType",
    "Record",
    "SortDirection",
    "SortSpec",
    "new_record_id",
    "utc_now_iso",
]
