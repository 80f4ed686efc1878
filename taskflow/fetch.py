"""
外部抓取模块

提供带超时的 HTTP GET，供宿主命令获取网页内容。
"""

import asyncio
import logging

import aiohttp

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """抓取失败"""

    def __init__(self, message: str, url: str = None, status: int = None):
        super().__init__(message)
        self.message = message
        self.url = url
        self.status = status


async def fetch_text(url: str, timeout: float = 5.0) -> str:
    """
    获取网页内容

    Args:
        url: 目标 URL
        timeout: 超时时间（秒）

    Returns:
        响应文本

    Raises:
        FetchError: 超时、网络错误或非 2xx 状态码
    """
    logger.info(f"获取网页: {url}")
    client_timeout = aiohttp.ClientTimeout(total=timeout)
    try:
        async with aiohttp.ClientSession(timeout=client_timeout) as session:
            async with session.get(url) as response:
                if 200 <= response.status < 300:
                    return await response.text()
                raise FetchError(
                    f"获取页面失败: {response.status}",
                    url=url,
                    status=response.status,
                )
    except asyncio.TimeoutError as e:
        raise FetchError("请求超时", url=url) from e
    except aiohttp.ClientError as e:
        raise FetchError(str(e), url=url) from e


__all__ = ["FetchError", "fetch_text"]
