import json
import os
from typing import List, Optional

from rich.console import Console

from .models import SiteJob

console = Console()

# --- 默认配置 ---
DEFAULT_CONFIG_FILE = 'config.json'
MAX_CONCURRENT_PAGES = 1
DEFAULT_WAIT_UNTIL = 'networkidle'
LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]

INFLUX_URL = 'http://localhost:8086'
INFLUX_DATABASE = 'pagestats'
INFLUX_MEASUREMENT = 'page_stats'
JSONL_PATH = 'data/stats.jsonl'

OUTPUT_MODES = ('stdout', 'influx', 'jsonl')


class ConfigurationError(Exception):
    pass


class Settings:
    def __init__(self, jobs: List[SiteJob], interval: Optional[float] = None,
                 concurrency: int = MAX_CONCURRENT_PAGES, output: str = 'stdout',
                 influx: Optional[dict] = None, jsonl_path: str = JSONL_PATH):
        self.jobs = jobs
        self.interval = interval
        self.concurrency = concurrency
        self.output = output
        self.influx = {'url': INFLUX_URL, 'database': INFLUX_DATABASE, 'measurement': INFLUX_MEASUREMENT}
        self.influx.update(influx or {})
        self.jsonl_path = jsonl_path


def parse_jobs(entries) -> List[SiteJob]:
    """urls 列表 -> SiteJob；支持 {"url": ...} 或直接写字符串，没有 url 的条目跳过"""
    jobs = []
    for index, entry in enumerate(entries or []):
        if isinstance(entry, str):
            entry = {'url': entry}
        if not isinstance(entry, dict) or not entry.get('url'):
            console.print(f"[yellow]第 {index + 1} 个条目缺少 url，已跳过[/yellow]")
            continue
        jobs.append(SiteJob.from_dict(entry))

    if not jobs:
        raise ConfigurationError("No URLs supplied to process!")
    return jobs


def parse_concurrency(value) -> int:
    # 接受整数或数字字符串；bool 是 int 的子类，需要单独排除
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ConfigurationError(f"concurrency 必须是正整数: {value!r}")
    try:
        concurrency = int(value)
    except ValueError as e:
        raise ConfigurationError(f"concurrency 必须是正整数: {value!r}") from e
    if concurrency < 1:
        raise ConfigurationError(f"concurrency 必须是正整数: {value!r}")
    return concurrency


def parse_interval(value) -> Optional[float]:
    """None 或 0 表示只执行一次"""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"interval 必须是秒数: {value!r}")
    if value < 0:
        raise ConfigurationError(f"interval 不能为负数: {value!r}")
    return float(value) or None


def load_settings(path: str = DEFAULT_CONFIG_FILE) -> Settings:
    if not os.path.exists(path):
        raise ConfigurationError(f"配置文件不存在: {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"配置文件无法读取 {path}: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"配置文件解析失败 {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"配置文件格式错误: {path}")

    output = data.get('output', 'stdout')
    if output not in OUTPUT_MODES:
        raise ConfigurationError(f"未知的输出方式: {output}")

    return Settings(
        jobs=parse_jobs(data.get('urls')),
        interval=parse_interval(data.get('interval')),
        concurrency=parse_concurrency(data.get('concurrency', MAX_CONCURRENT_PAGES)),
        output=output,
        influx=data.get('influx'),
        jsonl_path=data.get('jsonlPath', JSONL_PATH),
    )
