"""
Point gymtrack at a throwaway SQLite file and create the tables before any
test module imports the app.
"""
import os
import tempfile

_tmp = tempfile.mkdtemp(prefix="gymtrack-tests-")
os.environ["DB_URL"] = f"sqlite:///{os.path.join(_tmp, 'gymtrack.db')}"

from gymtrack.db import Base, engine  # noqa: E402
from gymtrack import models  # noqa: E402,F401

Base.metadata.create_all(engine)
