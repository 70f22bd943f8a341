import asyncio
import json
import os
from datetime import datetime

import aiofiles

from .base import BaseSink, PersistError
from ..models import StatsRecord


class JsonLinesSink(BaseSink):
    """每条统计追加一行 JSON"""

    def __init__(self, path: str):
        self.path = path
        self._lock = asyncio.Lock()

    async def save(self, url: str, category: str, stats: StatsRecord, label: str = None, tag: str = None):
        record = {
            "time": datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
            "url": url,
            "type": category,
            "label": label,
            "tag": tag,
        }
        record.update(stats.to_dict())

        try:
            async with self._lock:
                directory = os.path.dirname(self.path)
                if directory:
                    os.makedirs(directory, exist_ok=True)
                async with aiofiles.open(self.path, 'a', encoding='utf8') as f:
                    await f.write(json.dumps(record, ensure_ascii=False) + '\n')
        except OSError as e:
            raise PersistError(f"写入 {self.path} 失败: {e}") from e
