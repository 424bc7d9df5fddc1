# costtrack/db/init_db.py
from costtrack.db.session import get_engine
from costtrack.db.base import Base
import costtrack.models  # noqa: F401  registers every table on Base.metadata


def init_db():
    engine = get_engine()
    Base.metadata.create_all(bind=engine)


def drop_db():
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
