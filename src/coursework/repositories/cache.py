"""NoOpCache - ICache that never stores anything; every read is a miss."""
from __future__ import annotations

from typing import Any, Optional

from coursework.repositories.ports import ICache


class NoOpCache(ICache):

    def get(self, key: str) -> Optional[Any]:
        return None

    def set(self, key: str, value: Any, ttl_seconds: int = 0) -> None:
        return None

    def delete(self, key: str) -> None:
        return None
