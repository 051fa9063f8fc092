"""데이터베이스 패키지"""

from .connection import Base, engine, get_session, init_db, drop_db, check_connection
from .migration import run_migration, seed_default_settings

__all__ = [
    'Base', 'engine', 'get_session', 'init_db', 'drop_db', 'check_connection',
    'run_migration', 'seed_default_settings',
]
