"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from portion_tracker.adapters.file_store import JsonFileKeyValueStore
from portion_tracker.adapters.supabase_kv_store import SupabaseKeyValueStore
from portion_tracker.config import Settings, parse_storage_backend
from portion_tracker.services.calendar import Calendar, LocalCalendar
from portion_tracker.services.records import KeyValueStore, RecordStore
from portion_tracker.services.tracking import TrackingService
from portion_tracker.services.weights import WeightService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    calendar: Calendar
    record_store: RecordStore
    tracking_service: TrackingService
    weight_service: WeightService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    calendar = LocalCalendar(timezone_name=resolved_settings.timezone)
    record_store = RecordStore(
        backend=_build_backend(resolved_settings),
        key_prefix=resolved_settings.key_prefix,
    )
    return AppContainer(
        settings=resolved_settings,
        calendar=calendar,
        record_store=record_store,
        tracking_service=TrackingService(store=record_store, calendar=calendar),
        weight_service=WeightService(store=record_store, calendar=calendar),
    )


def _build_backend(settings: Settings) -> KeyValueStore:
    backend = parse_storage_backend(settings.storage_backend)
    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError("Supabase storage needs supabase_url and service key")
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseKeyValueStore(client=client, table=settings.supabase_table)
    return JsonFileKeyValueStore.create(settings.storage_path)
