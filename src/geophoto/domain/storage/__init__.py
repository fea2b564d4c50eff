from .base import ObjectExistsError, StorageService
from .factory import get_storage_client

__all__ = ["ObjectExistsError", "StorageService", "get_storage_client"]
