# SQLAlchemy persistence
from .database import create_db_engine, get_engine, get_session_factory, init_db, session_scope
from .models import AppSetting, Base, ReviewRecordRow

__all__ = [
    "AppSetting",
    "Base",
    "ReviewRecordRow",
    "create_db_engine",
    "get_engine",
    "get_session_factory",
    "init_db",
    "session_scope",
]
