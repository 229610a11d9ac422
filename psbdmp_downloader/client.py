"""
psbdmp API client: request building, JSON envelope decoding, typed results.
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple
from urllib.parse import quote, urljoin

import requests

from .config import ClientConfig, create_session
from .errors import DecodeError, RemoteError, TransportError, UsageError

# 相对路径，拼接在 base_url 之后，保留 base_url 自带的路径前缀
SEARCH_PATH = "api/search/"
DOMAIN_PATH = "api/search/domain/"
EMAIL_PATH = "api/search/email/"
BY_DATE_PATH = "api/dump/getbydate"
CONTENT_PATH = "api/dump/get/"

# 服务端要求的固定日期格式 DD.MM.YYYY
DATE_FORMAT = "{day:02d}.{month:02d}.{year:04d}"


@dataclass(frozen=True)
class Dump:
    id: str
    tags: Optional[str] = None
    time: Optional[str] = None


@dataclass(frozen=True)
class SearchResult:
    search: Optional[str]
    count: int
    dumps: Tuple[Dump, ...]
    error: int = 0
    error_info: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error == 0


@dataclass(frozen=True)
class ContentResult:
    id: Optional[str]
    data: str
    time: Optional[str] = None
    error: int = 0
    error_info: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error == 0


def format_date(value: date) -> str:
    """
    按 DD.MM.YYYY 格式化日期。不使用 strftime，避免受本地化设置影响。
    """
    return DATE_FORMAT.format(day=value.day, month=value.month, year=value.year)


def quote_segment(value: str) -> str:
    """
    把任意字符串转义成单个 URL 路径段：'/'、'?'、'#'、'%' 等都会被编码。
    纯点号的段（'.'、'..'）会被 requests 还原并按目录规范化，直接拒绝。
    """
    segment = quote(str(value), safe="")
    if not segment or set(segment) == {"."}:
        raise UsageError(f"无法作为路径段使用: {value!r}")
    return segment


def _error_code(payload: dict) -> int:
    raw = payload.get("error")
    if raw is None or raw == "":
        return 0
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise DecodeError(f"无法识别的 error 字段: {raw!r}")


def _optional_str(value) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _parse_dump(item) -> Dump:
    if not isinstance(item, dict) or item.get("id") in (None, ""):
        raise DecodeError(f"dump 记录缺少 id: {item!r}")
    return Dump(
        id=str(item["id"]),
        tags=_optional_str(item.get("tags")),
        time=_optional_str(item.get("time")),
    )


def parse_search_envelope(payload) -> SearchResult:
    """
    解析搜索类接口返回的 JSON：
    {search, count, data: [{id, tags, time}], error, error_info}
    error 非 0 时 data 一律忽略。
    """
    if not isinstance(payload, dict):
        raise DecodeError(f"响应不是 JSON 对象: {type(payload).__name__}")

    code = _error_code(payload)
    error_info = _optional_str(payload.get("error_info"))
    if code != 0:
        return SearchResult(
            search=_optional_str(payload.get("search")),
            count=0,
            dumps=(),
            error=code,
            error_info=error_info,
        )

    data = payload.get("data")
    if data is None:
        data = []
    if not isinstance(data, list):
        raise DecodeError(f"data 字段不是列表: {type(data).__name__}")
    dumps = tuple(_parse_dump(item) for item in data)

    count = payload.get("count")
    try:
        count = int(count) if count is not None else len(dumps)
    except (TypeError, ValueError):
        raise DecodeError(f"无法识别的 count 字段: {count!r}")

    return SearchResult(
        search=_optional_str(payload.get("search")),
        count=count,
        dumps=dumps,
        error=code,
        error_info=error_info,
    )


def parse_content_envelope(payload) -> ContentResult:
    """
    解析 /api/dump/get/{id} 的返回：{id, data, time, error, error_info}
    """
    if not isinstance(payload, dict):
        raise DecodeError(f"响应不是 JSON 对象: {type(payload).__name__}")

    code = _error_code(payload)
    error_info = _optional_str(payload.get("error_info"))
    data = payload.get("data")
    if code == 0 and data is not None and not isinstance(data, str):
        raise DecodeError(f"data 字段不是字符串: {type(data).__name__}")

    return ContentResult(
        id=_optional_str(payload.get("id")),
        data=data if isinstance(data, str) else "",
        time=_optional_str(payload.get("time")),
        error=code,
        error_info=error_info,
    )


class DumpClient:
    """
    psbdmp 服务的客户端。每个方法只发一次请求、解析一次 JSON，
    不重试、不缓存；除构造时传入的配置外没有其他状态。
    """

    def __init__(self, config: Optional[ClientConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or ClientConfig()
        self.session = session if session is not None else create_session(self.config)

    def search(self, keyword: str) -> List[Dump]:
        """全文关键词搜索。"""
        return self._search("GET", SEARCH_PATH + quote_segment(keyword))

    def search_by_domain(self, domain: str) -> List[Dump]:
        return self._search("GET", DOMAIN_PATH + quote_segment(domain))

    def search_by_email(self, email: str) -> List[Dump]:
        return self._search("GET", EMAIL_PATH + quote_segment(email))

    def get_by_date(self, from_date: date, to_date: date) -> List[Dump]:
        """
        获取两个日期之间发布的 dump。不校验先后顺序，交给服务端处理。
        """
        body = {"from": format_date(from_date), "to": format_date(to_date)}
        return self._search("POST", BY_DATE_PATH, data=body)

    def get_dump_content(self, dump_id: str) -> str:
        """返回 dump 的完整原始内容。"""
        payload = self._request("GET", CONTENT_PATH + quote_segment(dump_id))
        result = parse_content_envelope(payload)
        if not result.ok:
            raise RemoteError(result.error_info or f"error {result.error}", code=result.error)
        return result.data

    def _search(self, method: str, path: str, data=None) -> List[Dump]:
        payload = self._request(method, path, data=data)
        result = parse_search_envelope(payload)
        if not result.ok:
            raise RemoteError(result.error_info or f"error {result.error}", code=result.error)
        return list(result.dumps)

    def _request(self, method: str, path: str, data=None):
        base = self.config.base_url
        if not base.endswith("/"):
            base += "/"
        url = urljoin(base, path)
        headers = {
            "User-Agent": self.config.user_agent,
            "Accept": "application/json",
        }
        try:
            resp = self.session.request(
                method,
                url,
                data=data,
                headers=headers,
                timeout=self.config.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            raise TransportError(f"请求失败（{method} {url}）：{e}") from e

        try:
            return resp.json()
        except ValueError as e:
            raise DecodeError(f"响应不是合法 JSON（{method} {url}）：{e}") from e
