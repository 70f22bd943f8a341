from typing import List

from rich.console import Console

from .capture.base import BaseEventSource, NavigationError
from .classifier import classify
from .config import DEFAULT_WAIT_UNTIL
from .models import Category, LogicalLoadEvent, PageStats, SiteJob, TransportByteEvent
from .reducer import reduce_stats
from .resolver import resolve_sizes

console = Console()


async def collect_page_stats(source: BaseEventSource, job: SiteJob) -> PageStats:
    """
    加载一个页面并统计 images / bundle 两类资源。
    source 归本次调用所有：无论导航成功与否，最后都会被关闭。
    导航失败时不抛出，返回失败前已收集到的部分统计。
    """
    images: List[LogicalLoadEvent] = []
    bundle: List[LogicalLoadEvent] = []
    received: List[TransportByteEvent] = []
    collections = {Category.IMAGE: images, Category.BUNDLE: bundle}

    def on_logical_load(event: LogicalLoadEvent):
        collection = collections.get(classify(event.resource_type))
        if collection is not None:
            collection.append(event)

    error = None
    try:
        source.on_transport_bytes(received.append)
        source.on_logical_load(on_logical_load)

        try:
            await source.navigate(job.url, timeout_ms=job.timeout_ms, wait_until=DEFAULT_WAIT_UNTIL)
            if job.wait_after_load_ms:
                await source.wait(job.wait_after_load_ms)
        except NavigationError as e:
            error = str(e)
            console.print(f"[red]✘[/] 🌐 {job.display_name} | [bright_red]{error}[/bright_red]")

        # 导航已结束 (网络空闲或失败)，此后才允许关联字节数
        for collection in collections.values():
            resolve_sizes(collection, received)

        return PageStats(
            url=job.url,
            label=job.label,
            images=reduce_stats(images),
            bundle=reduce_stats(bundle),
            error=error,
        )
    finally:
        await source.close()
