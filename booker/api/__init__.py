from booker.api.credential import router as credential_router
from booker.api.health import router as health_router
from booker.api.records import router as records_router
from booker.api.transfer import router as transfer_router

__all__ = [
    "credential_router",
    "health_router",
    "records_router",
    "transfer_router",
]
