from .config import PROFILES, VenueConfig, get_profile, load_venue_config
from .engine import Creating, Editing, ReservationEngine, SubmitResult, next_mode, open_engine
from .models import ReservationDraft, ReservationRecord
from .reports import ReservationStats, export_csv, reservation_stats
from .store import PersistenceError, ReservationIntegrityError, ReservationStore, Snapshot
from .validation import ErrorKind, FieldResult, ValidationError, validate_field, validate_reservation
from .yaml_store import YamlSnapshotFile

__all__ = [
	"PROFILES",
	"VenueConfig",
	"get_profile",
	"load_venue_config",
	"Creating",
	"Editing",
	"ReservationEngine",
	"SubmitResult",
	"next_mode",
	"open_engine",
	"ReservationDraft",
	"ReservationRecord",
	"ReservationStats",
	"export_csv",
	"reservation_stats",
	"PersistenceError",
	"ReservationIntegrityError",
	"ReservationStore",
	"Snapshot",
	"ErrorKind",
	"FieldResult",
	"ValidationError",
	"validate_field",
	"validate_reservation",
	"YamlSnapshotFile",
]
