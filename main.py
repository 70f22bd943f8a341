import argparse
import asyncio
import sys

from rich.console import Console

from pagestats.capture.chromium import ChromiumBrowser
from pagestats.config import (
    DEFAULT_CONFIG_FILE, OUTPUT_MODES, ConfigurationError, load_settings, parse_concurrency, parse_interval,
)
from pagestats.manager import StatsManager
from pagestats.sink.influx import InfluxSink
from pagestats.sink.jsonlines import JsonLinesSink

console = Console()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="定时加载页面，统计图片与 bundle 资源的请求数、404 数和传输大小")
    parser.add_argument('-c', '--config', default=DEFAULT_CONFIG_FILE, help="配置文件 (JSON)")
    parser.add_argument('--output', choices=OUTPUT_MODES, help="覆盖配置中的输出方式")
    parser.add_argument('--concurrency', type=int, help="同时加载的页面数")
    parser.add_argument('--interval', type=float, help="每隔多少秒重复执行一次")
    parser.add_argument('--headful', action='store_true', help="显示浏览器窗口")
    return parser.parse_args(argv)


def build_sink(settings):
    if settings.output == 'influx':
        influx = settings.influx
        return InfluxSink(influx['url'], influx['database'], influx['measurement'])
    if settings.output == 'jsonl':
        return JsonLinesSink(settings.jsonl_path)
    return None


async def run_once(settings, headless: bool):
    sink = build_sink(settings)
    async with ChromiumBrowser(headless=headless) as browser:
        if sink is None:
            manager = StatsManager(settings.jobs, browser.open, max_concurrent=settings.concurrency)
            await manager.run()
            return
        async with sink:
            manager = StatsManager(settings.jobs, browser.open, sink=sink, max_concurrent=settings.concurrency)
            await manager.run()


async def main(settings, headless: bool = True):
    while True:
        await run_once(settings, headless)
        if not settings.interval:
            break
        console.print(f"[dim]{settings.interval:.0f} 秒后再次执行...[/dim]")
        await asyncio.sleep(settings.interval)


def load_cli_settings(args):
    """读取配置文件，再用命令行参数覆盖；任何非法值都以 ConfigurationError 抛出"""
    settings = load_settings(args.config)
    if args.output:
        settings.output = args.output
    if args.concurrency is not None:
        settings.concurrency = parse_concurrency(args.concurrency)
    if args.interval is not None:
        settings.interval = parse_interval(args.interval)
    return settings


def cli(argv=None):
    args = parse_args(argv)
    try:
        settings = load_cli_settings(args)
    except ConfigurationError as e:
        console.print(f"[bold red]{e} 退出...[/bold red]")
        sys.exit(1)

    try:
        asyncio.run(main(settings, headless=not args.headful))
    except KeyboardInterrupt:
        console.print("[bold yellow]程序已停止[/bold yellow]")


if __name__ == "__main__":
    cli()
