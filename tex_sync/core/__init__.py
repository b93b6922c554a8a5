from tex_sync.core.config import Config
from tex_sync.core.database import Database

__all__ = ["Config", "Database"]
