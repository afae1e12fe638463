"""Request Dependencies — shared services handed to routes via FastAPI Depends.

Invariants:
    - One image store per process, rooted at Settings.upload_dir
    - Tests replace these through app.dependency_overrides, never by patching modules
"""

from functools import lru_cache

from postboard.config import get_settings
from postboard.infrastructure.image_store import LocalImageStore


@lru_cache
def get_image_store() -> LocalImageStore:
    return LocalImageStore(get_settings().upload_dir)
