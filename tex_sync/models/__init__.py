from tex_sync.models.base import Base, Project, SystemConfig

__all__ = ["Base", "Project", "SystemConfig"]
