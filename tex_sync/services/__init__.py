from tex_sync.services.locator import SyncTexLocator

__all__ = ["SyncTexLocator"]
