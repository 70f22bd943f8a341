import asyncio
import time
from typing import Awaitable, Callable, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .capture.base import BaseEventSource
from .config import MAX_CONCURRENT_PAGES
from .models import PageStats, SiteJob, get_human_readable_size
from .session import collect_page_stats
from .sink.base import BaseSink, PersistError
from .utils import print_page_stats

console = Console()


class StatsManager:
    """
    依次 (或有限并发) 执行每个页面任务，把结果交给存储端或直接打印。
    失败的任务只记录一次，不重试。
    """

    def __init__(self, jobs: List[SiteJob], open_source: Callable[[SiteJob], Awaitable[BaseEventSource]],
                 sink: Optional[BaseSink] = None, tag: str = None, max_concurrent: int = MAX_CONCURRENT_PAGES):
        self.jobs = jobs
        self.open_source = open_source
        self.sink = sink
        self.tag = tag
        self.semaphore = asyncio.Semaphore(max(1, max_concurrent))
        self.start_time = 0
        self.results: List[PageStats] = []
        self.stats = {"success": 0, "partial": 0, "fail": 0, "save_fail": 0, "size": 0}

    async def process_job(self, job: SiteJob) -> Optional[PageStats]:
        async with self.semaphore:
            try:
                source = await self.open_source(job)
            except Exception as e:
                error_msg = str(e)
                full_error_msg = f"{type(e).__name__}: {error_msg}" if error_msg else type(e).__name__
                console.print(f"[red]✘[/] 🌐 {job.display_name} | 无法打开浏览上下文: [bright_red]{full_error_msg}[/bright_red]")
                self.stats['fail'] += 1
                return None
            page_stats = await collect_page_stats(source, job)

        self.stats['partial' if page_stats.error else 'success'] += 1
        self.stats['size'] += page_stats.total_size
        await self.publish(job, page_stats)
        return page_stats

    async def publish(self, job: SiteJob, page_stats: PageStats):
        if self.sink is None:
            print_page_stats(page_stats)
            return

        tag = job.user_agent or self.tag
        saved = 0
        for category, record in page_stats:
            try:
                await self.sink.save(job.url, category, record, label=job.label, tag=tag)
                saved += 1
            except PersistError as e:
                self.stats['save_fail'] += 1
                console.print(f"[red]✘[/] 💾 {job.display_name} [{category}] | [bright_red]{e}[/bright_red]")
        if saved:
            console.print(
                f"[green]✔[/] 💾 {job.display_name} "
                f"| images {page_stats.images.number_requested} 个 {get_human_readable_size(page_stats.images.total_size)} "
                f"| bundle {page_stats.bundle.number_requested} 个 {get_human_readable_size(page_stats.bundle.total_size)}"
            )

    async def _process_job_wrapper(self, job: SiteJob) -> Optional[PageStats]:
        try:
            return await self.process_job(job)
        except Exception as e:
            error_msg = str(e)
            full_error_msg = f"{type(e).__name__}: {error_msg}" if error_msg else type(e).__name__
            console.print(f"[red]系统错误[/] {job.display_name}: {full_error_msg}")
            self.stats['fail'] += 1
            return None

    async def run(self) -> List[PageStats]:
        self.start_time = time.time()
        console.print(f"[yellow]开始处理 {len(self.jobs)} 个页面...[/yellow]")

        tasks = [self._process_job_wrapper(job) for job in self.jobs]
        results = await asyncio.gather(*tasks, return_exceptions=True)
        self.results = [r for r in results if isinstance(r, PageStats)]

        self.print_summary()
        return self.results

    def print_summary(self):
        total_duration = time.time() - self.start_time
        table = Table(box=None, show_header=True, header_style="bold cyan")
        table.add_column("成功", justify="right", style="green")
        table.add_column("部分结果", justify="right", style="yellow")
        table.add_column("失败", justify="right", style="red")
        table.add_column("写入失败", justify="right", style="red")
        table.add_column("流量", justify="right", style="blue")

        s = self.stats
        table.add_row(str(s['success']), str(s['partial']), str(s['fail']), str(s['save_fail']),
                      get_human_readable_size(s['size']))

        console.print(Panel(table, title=f"🚀 任务完成 (耗时: {total_duration:.1f}s)", expand=False,
                            border_style="green", padding=(1, 2)))
