import os


class classproperty:
    def __init__(self, getter):
        self.getter = getter

    def __get__(self, instance, owner):
        return self.getter(owner)


_db_instance = None


def get_db():
    global _db_instance
    if _db_instance is None:
        from tex_sync.core.database import Database

        db_url = os.getenv("TEX_SYNC_DATABASE_URL", "sqlite:///data/tex_sync.db")
        _db_instance = Database(db_url)
    return _db_instance


DEFAULT_CONFIG = {
    "fallback_encodings": "",
    "resolve_input_path": "true",
    "log_level": "INFO",
    "use_builtin_engine": "true",
    "synctex_path": "synctex",
}


class Config:
    @classmethod
    def _get(cls, key: str, default: str = "") -> str:
        db = get_db()
        value = db.get_config(key)
        return value if value is not None else default

    @classmethod
    def _get_bool(cls, key: str, default: bool = False) -> bool:
        value = cls._get(key, "true" if default else "false")
        return value.strip().lower() in ("1", "true", "yes", "on")

    @classmethod
    def _set(cls, key: str, value: str) -> None:
        db = get_db()
        db.set_config(key, value)

    @classproperty
    def DATABASE_URL(cls) -> str:
        return os.getenv("TEX_SYNC_DATABASE_URL", "sqlite:///data/tex_sync.db")

    @classproperty
    def FALLBACK_ENCODINGS(cls) -> tuple[str, ...] | None:
        value = cls._get("fallback_encodings", "")
        encodings = tuple(e.strip() for e in value.split(",") if e.strip())
        return encodings if encodings else None

    @classproperty
    def RESOLVE_INPUT_PATH(cls) -> bool:
        return cls._get_bool("resolve_input_path", True)

    @classproperty
    def LOG_LEVEL(cls) -> str:
        return cls._get("log_level", "INFO").upper()

    @classproperty
    def USE_BUILTIN_ENGINE(cls) -> bool:
        return cls._get_bool("use_builtin_engine", True)

    @classproperty
    def SYNCTEX_PATH(cls) -> str:
        return cls._get("synctex_path", "synctex").strip() or "synctex"

    @classmethod
    def get_all_config(cls) -> dict[str, str]:
        db = get_db()
        return db.get_all_config()

    @classmethod
    def update_config(cls, config_dict: dict[str, str]) -> None:
        for key, value in config_dict.items():
            cls._set(key, value)
