from tex_sync.core import Config
from tex_sync.core.config import get_db
from tex_sync.core.database import Database
from tex_sync.services import SyncTexLocator


def get_database() -> Database:
    return get_db()


def get_locator() -> SyncTexLocator:
    return SyncTexLocator(
        encodings=Config.FALLBACK_ENCODINGS,
        resolve_input_path=Config.RESOLVE_INPUT_PATH,
        use_builtin_engine=Config.USE_BUILTIN_ENGINE,
        synctex_path=Config.SYNCTEX_PATH,
    )
