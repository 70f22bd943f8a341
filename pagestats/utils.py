from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .models import PageStats, get_human_readable_size

console = Console()


def build_stats_table(page_stats: PageStats) -> Table:
    table = Table(box=None, show_header=True, header_style="bold cyan")
    table.add_column("类型", justify="center", no_wrap=True)
    table.add_column("请求数", justify="right", style="green")
    table.add_column("404", justify="right", style="red")
    table.add_column("传输大小", justify="right", style="blue")
    table.add_column("字节", justify="right", style="dim")

    for category, record in page_stats:
        table.add_row(category, str(record.number_requested), str(record.number_not_found),
                      get_human_readable_size(record.total_size), str(record.total_size))
    return table


def print_page_stats(page_stats: PageStats):
    """非生产模式：统计结果直接打印，不写入存储"""
    title = f"📊 {page_stats.url}"
    if page_stats.label:
        title += f" [dim]({page_stats.label})[/dim]"
    border_style = "yellow" if page_stats.error else "cyan"
    subtitle = f"[yellow]部分结果: {page_stats.error}[/yellow]" if page_stats.error else None
    console.print(Panel(build_stats_table(page_stats), title=title, subtitle=subtitle,
                        expand=False, border_style=border_style))
