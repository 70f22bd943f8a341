from typing import Optional

from playwright.async_api import async_playwright, BrowserContext
from playwright.async_api import Error as PlaywrightError
from rich.console import Console

from .base import BaseEventSource, NavigationError
from ..config import LAUNCH_ARGS
from ..models import LogicalLoadEvent, SiteJob, TransportByteEvent

console = Console()


class ChromiumEventSource(BaseEventSource):
    def __init__(self, context: BrowserContext, page, cdp):
        super().__init__()
        self.context = context
        self.page = page
        self.cdp = cdp

    @classmethod
    async def create(cls, context: BrowserContext, intercept_requests: bool = True) -> 'ChromiumEventSource':
        page = await context.new_page()
        cdp = await context.new_cdp_session(page)
        source = cls(context, page, cdp)

        # 两个事件流都来自同一个 CDP 会话，只属于当前任务
        cdp.on("Network.dataReceived", source._handle_data_received)
        cdp.on("Network.responseReceived", source._handle_response_received)
        await cdp.send("Network.enable")
        # 禁用缓存，否则命中缓存的资源没有 dataReceived，大小为 0
        await cdp.send("Network.setCacheDisabled", {"cacheDisabled": True})

        if intercept_requests:
            await page.route("**/*", _continue_route)
        return source

    def _handle_data_received(self, params: dict):
        self.emit_transport_bytes(TransportByteEvent.from_cdp(params))

    def _handle_response_received(self, params: dict):
        self.emit_logical_load(LogicalLoadEvent.from_cdp(params))

    async def navigate(self, url: str, timeout_ms: Optional[int] = None, wait_until: str = "networkidle"):
        # Playwright 中 timeout=0 表示无限等待
        timeout = timeout_ms if timeout_ms else 0
        try:
            await self.page.goto(url, timeout=timeout, wait_until=wait_until)
        except PlaywrightError as e:
            # TimeoutError 也是 playwright Error 的子类
            raise NavigationError(f"{type(e).__name__}: {e.message}") from e

    async def wait(self, ms: int):
        try:
            await self.page.wait_for_timeout(ms)
        except PlaywrightError as e:
            # 等待期间页面崩溃或被关闭，同样按导航失败处理，保留已收集的事件
            raise NavigationError(f"{type(e).__name__}: {e.message}") from e

    async def _release(self):
        try:
            await self.context.close()
        except PlaywrightError as e:
            console.print(f"[yellow]关闭浏览上下文失败[/yellow]: {e.message}")


async def _continue_route(route):
    await route.continue_()


class ChromiumBrowser:
    """
    持有 Playwright 与一个 Chromium 进程；
    每个任务通过 open() 拿到独立的 BrowserContext (不复用、不共享)
    """

    def __init__(self, headless: bool = True, intercept_requests: bool = True):
        self.headless = headless
        self.intercept_requests = intercept_requests
        self._playwright = None
        self._browser = None

    async def __aenter__(self):
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self.headless, args=LAUNCH_ARGS)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        try:
            if self._browser is not None:
                await self._browser.close()
        finally:
            if self._playwright is not None:
                await self._playwright.stop()

    async def open(self, job: SiteJob) -> ChromiumEventSource:
        options = {}
        if job.user_agent:
            options['user_agent'] = job.user_agent
        if job.viewport:
            options['viewport'] = {
                'width': job.viewport.get('width', 1280),
                'height': job.viewport.get('height', 720),
            }

        context = await self._browser.new_context(**options)
        try:
            return await ChromiumEventSource.create(context, self.intercept_requests)
        except Exception:
            await context.close()
            raise
