from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from tex_sync.core import Config
from tex_sync.synctex.paths import LEGACY_ENCODINGS
from tex_sync.web.dependencies import get_database

router = APIRouter()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class UpdateConfigRequest(BaseModel):
    fallback_encodings: str | None = None
    resolve_input_path: bool | None = None
    log_level: str | None = None
    use_builtin_engine: bool | None = None
    synctex_path: str | None = None


@router.get("")
async def get_config():
    return {
        "fallback_encodings": ",".join(Config.FALLBACK_ENCODINGS or ()),
        "resolve_input_path": Config.RESOLVE_INPUT_PATH,
        "log_level": Config.LOG_LEVEL,
        "use_builtin_engine": Config.USE_BUILTIN_ENGINE,
        "synctex_path": Config.SYNCTEX_PATH,
        "default_encodings": list(LEGACY_ENCODINGS),
    }


@router.patch("")
async def update_config(data: UpdateConfigRequest):
    updates = {k: v for k, v in data.model_dump().items() if v is not None}
    if not updates:
        return {"success": True, "message": "No updates provided"}

    if "log_level" in updates:
        updates["log_level"] = updates["log_level"].upper()
        if updates["log_level"] not in LOG_LEVELS:
            raise HTTPException(status_code=400, detail=f"Unknown log level: {data.log_level}")
    for key in ("resolve_input_path", "use_builtin_engine"):
        if key in updates:
            updates[key] = "true" if updates[key] else "false"

    db = get_database()
    for key, value in updates.items():
        db.set_config(key, value)
    return {"success": True, "updated": list(updates.keys())}
