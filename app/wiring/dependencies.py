from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.application.ports.bookings_api import BookingsApiPort
from app.application.ports.draft_store import DraftStorePort
from app.application.use_cases.recover_booking import RecoverBookingUseCase
from app.application.use_cases.save_draft import SaveDraftUseCase
from app.infrastructure.backend.jadwa_client import JadwaBookingsClient
from app.infrastructure.backend.mock_bookings_api import MockBookingsApi
from app.infrastructure.store.json_store import JsonDraftStore
from app.infrastructure.store.memory_store import MemoryDraftStore


_draft_store: DraftStorePort | None = None


def get_draft_store() -> DraftStorePort:
    global _draft_store
    if _draft_store is None:
        if settings.DRAFT_STORE.lower() == "json":
            _draft_store = JsonDraftStore(data_dir=settings.DRAFT_DATA_DIR, ttl_seconds=settings.DRAFT_TTL_SECONDS)
        else:
            _draft_store = MemoryDraftStore(ttl_seconds=settings.DRAFT_TTL_SECONDS)
    return _draft_store


@lru_cache
def get_bookings_api() -> BookingsApiPort:
    logger = logging.getLogger(__name__)
    if not settings.JADWA_API_TOKEN and settings.ENV.lower() in {"dev", "local"}:
        logger.info("Using MockBookingsApi (token missing, ENV=dev/local)")
        return MockBookingsApi()
    logger.info("Using JadwaBookingsClient", extra={"reason": settings.JADWA_API_URL})
    return JadwaBookingsClient()


def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


def get_save_draft_use_case() -> SaveDraftUseCase:
    return SaveDraftUseCase(
        store=get_draft_store(),
        timezone=get_timezone(),
        scope_per_attempt=settings.DRAFT_SCOPE_PER_ATTEMPT,
        failure_policy=settings.DRAFT_WRITE_FAILURE_POLICY,
    )


def get_recover_booking_use_case() -> RecoverBookingUseCase:
    return RecoverBookingUseCase(
        store=get_draft_store(),
        bookings_api=get_bookings_api(),
        timezone=get_timezone(),
        redirect_path=settings.SUCCESS_REDIRECT_PATH,
        success_delay_ms=settings.SUCCESS_REDIRECT_DELAY_MS,
        lost_draft_delay_ms=settings.LOST_DRAFT_REDIRECT_DELAY_MS,
    )
