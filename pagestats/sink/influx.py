import asyncio
import time

import aiohttp

from .base import BaseSink, PersistError
from ..config import INFLUX_MEASUREMENT
from ..models import StatsRecord


def _escape_tag(value: str) -> str:
    return str(value).replace('\\', '\\\\').replace(',', '\\,').replace('=', '\\=').replace(' ', '\\ ')


def format_line(measurement: str, url: str, category: str, stats: StatsRecord,
                label: str = None, tag: str = None, timestamp_ns: int = None) -> str:
    """
    InfluxDB line protocol，例如：
    page_stats,url=https://example.com,type=images numberRequested=1i,numberNotFound=0i,totalSize=2000i
    """
    tags = [('url', url), ('type', category)]
    if label:
        tags.append(('label', label))
    if tag:
        tags.append(('tag', tag))
    tag_str = ','.join(f"{key}={_escape_tag(value)}" for key, value in tags)
    field_str = ','.join(f"{key}={value}i" for key, value in stats.to_dict().items())

    measurement = measurement.replace(',', '\\,').replace(' ', '\\ ')
    line = f"{measurement},{tag_str} {field_str}"
    if timestamp_ns is not None:
        line += f" {timestamp_ns}"
    return line


class InfluxSink(BaseSink):
    def __init__(self, url: str, database: str, measurement: str = INFLUX_MEASUREMENT,
                 session=None, timeout: float = 30):
        self.write_url = url.rstrip('/') + '/write'
        self.database = database
        self.measurement = measurement
        self.timeout = timeout
        self.session = session
        self._owns_session = session is None

    async def open(self):
        if self.session is None:
            self.session = aiohttp.ClientSession()

    async def close(self):
        if self._owns_session and self.session is not None:
            await self.session.close()
            self.session = None

    async def save(self, url: str, category: str, stats: StatsRecord, label: str = None, tag: str = None):
        if self.session is None:
            raise PersistError("InfluxSink 未打开")

        line = format_line(self.measurement, url, category, stats, label, tag, time.time_ns())
        try:
            async with self.session.post(self.write_url, params={'db': self.database}, data=line.encode('utf-8'),
                                         timeout=aiohttp.ClientTimeout(total=self.timeout)) as response:
                if response.status >= 300:
                    body = await response.text()
                    raise PersistError(f"HTTP {response.status}: {body.strip()}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            error_msg = str(e)
            raise PersistError(f"{type(e).__name__}: {error_msg}" if error_msg else type(e).__name__) from e
