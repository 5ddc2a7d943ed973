from gymtrack.adapters.catalog import InMemoryCatalog, SqlExerciseCatalog
from gymtrack.adapters.submission import InMemorySubmissionBackend, SqlSubmissionBackend

__all__ = ["InMemoryCatalog", "SqlExerciseCatalog", "InMemorySubmissionBackend", "SqlSubmissionBackend"]
