from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from ..models import LogicalLoadEvent, TransportByteEvent


class NavigationError(Exception):
    """页面导航失败：超时、DNS/网络错误、页面崩溃"""


class BaseEventSource(ABC):
    """
    一个任务独占的浏览上下文，对外只暴露两类网络事件：
    - 传输字节事件 (on_transport_bytes)
    - 资源加载事件 (on_logical_load)
    """

    def __init__(self):
        self._byte_handlers: List[Callable[[TransportByteEvent], None]] = []
        self._load_handlers: List[Callable[[LogicalLoadEvent], None]] = []
        self.closed = False

    def on_transport_bytes(self, handler: Callable[[TransportByteEvent], None]):
        self._byte_handlers.append(handler)

    def on_logical_load(self, handler: Callable[[LogicalLoadEvent], None]):
        self._load_handlers.append(handler)

    def emit_transport_bytes(self, event: TransportByteEvent):
        for handler in self._byte_handlers:
            handler(event)

    def emit_logical_load(self, event: LogicalLoadEvent):
        for handler in self._load_handlers:
            handler(event)

    @abstractmethod
    async def navigate(self, url: str, timeout_ms: Optional[int] = None, wait_until: str = "networkidle"):
        pass

    @abstractmethod
    async def wait(self, ms: int):
        pass

    async def close(self):
        """释放浏览上下文，可重复调用"""
        if self.closed:
            return
        self.closed = True
        self._byte_handlers.clear()
        self._load_handlers.clear()
        await self._release()

    @abstractmethod
    async def _release(self):
        pass
