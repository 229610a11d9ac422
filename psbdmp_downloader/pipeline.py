"""
High level orchestration helpers used by the CLI.
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional, Tuple

from .client import Dump, DumpClient
from .download import fetch_all
from .errors import PsbdmpError, UsageError

MODE_DL = "dl"
MODE_DOMAIN = "domain"
MODE_EMAIL = "email"
MODE_SEARCH = "search"
MODE_SINCE = "since"

# 搜索模式的固定优先级
SEARCH_MODES = (MODE_DOMAIN, MODE_EMAIL, MODE_SEARCH, MODE_SINCE)


def date_range_since(days: int, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """
    返回 (now - |days| 天, now)。days 取绝对值，所以 5 和 -5 结果相同。
    """
    now = now or datetime.now()
    try:
        return now - timedelta(days=abs(days)), now
    except OverflowError:
        raise UsageError(f"--since {days} 超出可表示的日期范围")


def select_query(args) -> Tuple[str, object]:
    """
    根据参数挑出唯一的查询模式。--dl 优先于一切；
    其余四种搜索模式只能同时给出一个。
    """
    dl = getattr(args, "dl", None)
    if dl:
        return MODE_DL, dl

    chosen = [(mode, getattr(args, mode, None)) for mode in SEARCH_MODES]
    chosen = [(mode, value) for mode, value in chosen if value]
    if not chosen:
        raise UsageError("需要指定 --dl 或者一种搜索方式（--domain/--email/--search/--since）")
    if len(chosen) > 1:
        names = ", ".join(f"--{mode}" for mode, _ in chosen)
        raise UsageError(f"一次只能使用一种搜索方式，收到了: {names}")
    return chosen[0]


def run_query(client: DumpClient, mode: str, value, now: Optional[datetime] = None) -> List[Dump]:
    if mode == MODE_DOMAIN:
        return client.search_by_domain(value)
    if mode == MODE_EMAIL:
        return client.search_by_email(value)
    if mode == MODE_SEARCH:
        return client.search(value)
    if mode == MODE_SINCE:
        start, end = date_range_since(value, now=now)
        return client.get_by_date(start, end)
    raise UsageError(f"未知的查询模式: {mode}")


def process_args(
    args,
    client: DumpClient,
    out_dir: str | Path,
    logger=None,
    now: Optional[datetime] = None,
) -> int:
    """
    执行一次完整调用，返回进程退出码。查询本身失败是致命的，
    fetch 阶段单条失败只记日志；参数不可用时抛出 UsageError。
    """
    mode, value = select_query(args)

    if mode == MODE_DL:
        try:
            content = client.get_dump_content(value)
        except UsageError:
            raise
        except PsbdmpError as e:
            _log(f"[!] 获取 {value} 失败: {e}", level="error", logger=logger)
            return 1
        print(content)
        return 0

    try:
        dumps = run_query(client, mode, value, now=now)
    except UsageError:
        raise
    except PsbdmpError as e:
        _log(f"[!] 查询失败: {e}", level="error", logger=logger)
        return 1

    print(f"[+] {len(dumps)} dumps found!")

    if getattr(args, "fetch", False):
        print(f"[+] fetching the dumps and writing to {out_dir} ...")
        written = fetch_all(client, dumps, out_dir, logger=logger)
        _log(f"[+] 成功写入 {len(written)}/{len(dumps)} 个文件", level="success", logger=logger)
    else:
        print("[+] dump IDs matching the query:")
        for d in dumps:
            print(d.id)
    return 0


def _log(message, level: str = "info", logger=None):
    if logger:
        try:
            logger(level, message)
            return
        except Exception:
            pass
    stream = sys.stderr if level in ("error", "warning") else sys.stdout
    print(message, file=stream)
