from gymtrack.models.routine_day import RoutineDay
from gymtrack.models.session_record import SessionRecord
from gymtrack.models.session_set_record import SessionSetRecord
from gymtrack.models.store_entry import StoreEntry

__all__ = ["RoutineDay", "SessionRecord", "SessionSetRecord", "StoreEntry"]
