from abc import ABC, abstractmethod

from ..models import StatsRecord


class PersistError(Exception):
    """存储端不可达或写入被拒绝"""


class BaseSink(ABC):
    async def open(self):
        pass

    async def close(self):
        pass

    async def __aenter__(self):
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    @abstractmethod
    async def save(self, url: str, category: str, stats: StatsRecord, label: str = None, tag: str = None):
        pass
