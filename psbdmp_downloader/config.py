import os
import tempfile
from dataclasses import dataclass, replace
from typing import Optional

import requests

# 默认服务地址，可通过环境变量覆盖
DEFAULT_BASE_URL = "https://psbdmp.ws"
BASE_URL: str = os.getenv("PSBDMP_BASE_URL", DEFAULT_BASE_URL)

def _env_float(name: str, default: float) -> float:
    """读取浮点型环境变量，无法解析时回退到默认值。"""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


DEFAULT_TIMEOUT: float = _env_float("PSBDMP_TIMEOUT", 9.0)

# psbdmp 会拦截非浏览器 UA
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/66.0.3359.181 Safari/537.36"
)

DEFAULT_HEADERS = {
    "User-Agent": DEFAULT_USER_AGENT,
    "Accept": "application/json",
}

DEFAULT_OUT_DIR: str = os.getenv("PSBDMP_OUT_DIR") or tempfile.gettempdir()


@dataclass(frozen=True)
class ClientConfig:
    """
    DumpClient 的不可变配置。需要修改时用 with_* 方法得到新的副本。
    """

    base_url: str = BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    proxy: Optional[str] = None

    @classmethod
    def from_env(cls) -> "ClientConfig":
        return cls(
            base_url=os.getenv("PSBDMP_BASE_URL", DEFAULT_BASE_URL),
            timeout=_env_float("PSBDMP_TIMEOUT", 9.0),
            user_agent=os.getenv("PSBDMP_USER_AGENT") or DEFAULT_USER_AGENT,
            proxy=os.getenv("PSBDMP_PROXY") or None,
        )

    def with_base_url(self, base_url: str) -> "ClientConfig":
        return replace(self, base_url=base_url)

    def with_timeout(self, timeout: float) -> "ClientConfig":
        return replace(self, timeout=timeout)

    def with_user_agent(self, user_agent: str) -> "ClientConfig":
        return replace(self, user_agent=user_agent)

    def with_proxy(self, proxy: Optional[str]) -> "ClientConfig":
        return replace(self, proxy=proxy or None)


def create_session(config: ClientConfig) -> requests.Session:
    session = requests.Session()
    session.headers.update(DEFAULT_HEADERS)
    session.headers["User-Agent"] = config.user_agent
    if config.proxy:
        session.proxies.update({"http": config.proxy, "https": config.proxy})
    return session
