from enum import Enum
from typing import Iterator, Optional, Tuple

from pydash import get


# --- 工具函数 ---
def get_human_readable_size(size_in_bytes):
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_in_bytes < 1024.0:
            return f"{size_in_bytes:.2f} {unit}"
        size_in_bytes /= 1024.0
    return f"{size_in_bytes:.2f} TB"


class Category(Enum):
    IMAGE = 'images'
    BUNDLE = 'bundle'
    IGNORED = 'ignored'


# --- 网络事件 ---
class TransportByteEvent:
    """Network.dataReceived: 某个请求收到的字节数 (累计值，非增量)"""

    def __init__(self, request_id: str, encoded_length: int = 0, raw_length: int = 0):
        self.request_id = request_id
        self.encoded_length = encoded_length
        self.raw_length = raw_length

    @classmethod
    def from_cdp(cls, params: dict) -> 'TransportByteEvent':
        return cls(
            request_id=get(params, 'requestId'),
            encoded_length=get(params, 'encodedDataLength') or 0,
            raw_length=get(params, 'dataLength') or 0,
        )

    def __repr__(self):
        return f"TransportByteEvent({self.request_id!r}, {self.encoded_length}, {self.raw_length})"


class LogicalLoadEvent:
    """Network.responseReceived: 响应头到达时创建，size 稍后由 resolve_sizes 填充"""

    def __init__(self, request_id: str, url: str, status: int, resource_type: str, size: int = 0):
        self.request_id = request_id
        self.url = url
        self.status = status
        self.resource_type = resource_type
        self.size = size

    @classmethod
    def from_cdp(cls, params: dict) -> 'LogicalLoadEvent':
        return cls(
            request_id=get(params, 'requestId'),
            url=get(params, 'response.url', ''),
            status=get(params, 'response.status', 0),
            resource_type=get(params, 'type', ''),
        )

    def __repr__(self):
        return f"LogicalLoadEvent({self.request_id!r}, {self.url!r}, {self.status}, {self.resource_type!r}, size={self.size})"


# --- 统计结果 ---
class StatsRecord:
    __slots__ = ('number_requested', 'number_not_found', 'total_size')

    def __init__(self, number_requested: int = 0, number_not_found: int = 0, total_size: int = 0):
        object.__setattr__(self, 'number_requested', number_requested)
        object.__setattr__(self, 'number_not_found', number_not_found)
        object.__setattr__(self, 'total_size', total_size)

    def __setattr__(self, key, value):
        raise AttributeError("StatsRecord is immutable")

    def __eq__(self, other):
        if not isinstance(other, StatsRecord):
            return NotImplemented
        return (self.number_requested, self.number_not_found, self.total_size) == \
               (other.number_requested, other.number_not_found, other.total_size)

    def __hash__(self):
        return hash((self.number_requested, self.number_not_found, self.total_size))

    def __repr__(self):
        return f"StatsRecord({self.number_requested}, {self.number_not_found}, {self.total_size})"

    def to_dict(self):
        return {
            "numberRequested": self.number_requested,
            "numberNotFound": self.number_not_found,
            "totalSize": self.total_size,
        }


class PageStats:
    """单个任务 (一个 URL) 的结果：images + bundle 两条统计"""

    def __init__(self, url: str, images: StatsRecord, bundle: StatsRecord,
                 label: str = None, error: str = None):
        self.url = url
        self.label = label
        self.images = images
        self.bundle = bundle
        self.error = error

    @property
    def total_size(self) -> int:
        return self.images.total_size + self.bundle.total_size

    def __iter__(self) -> Iterator[Tuple[str, StatsRecord]]:
        yield Category.IMAGE.value, self.images
        yield Category.BUNDLE.value, self.bundle


# --- 任务配置 ---
class SiteJob:
    def __init__(self, url: str, label: str = None, user_agent: str = None,
                 viewport: Optional[dict] = None, navigation_options: Optional[dict] = None,
                 wait_after_load_ms: int = 0):
        self.url = url
        self.label = label
        self.user_agent = user_agent
        self.viewport = viewport
        self.navigation_options = navigation_options or {}
        self.wait_after_load_ms = wait_after_load_ms or 0

    @classmethod
    def from_dict(cls, data: dict) -> 'SiteJob':
        return cls(
            url=data['url'],
            label=data.get('label'),
            user_agent=data.get('userAgent'),
            viewport=data.get('viewport'),
            navigation_options=data.get('navigationOptions'),
            wait_after_load_ms=data.get('waitAfterLoadMs', 0),
        )

    @property
    def timeout_ms(self) -> Optional[int]:
        # 未配置 timeout 时无限等待网络空闲
        return self.navigation_options.get('timeout')

    @property
    def display_name(self) -> str:
        return f"{self.url} ({self.label})" if self.label else self.url

