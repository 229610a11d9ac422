"""
Command line entry point for the psbdmp dump downloader.
"""

import argparse
import sys

from .client import DumpClient
from .config import DEFAULT_OUT_DIR, ClientConfig
from .errors import UsageError
from .pipeline import process_args

QUERY_FLAGS = ("dl", "domain", "email", "search", "since")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="psbdmp",
        description="在 psbdmp.ws 上搜索 paste dump，列出匹配的 ID 或把内容下载到本地",
    )
    parser.add_argument("--dl", help="要下载的 dump ID（直接打印内容后退出，忽略其他搜索参数）")

    parser.add_argument("--domain", help="按域名搜索 dump")
    parser.add_argument("--email", help="按邮箱搜索 dump")
    parser.add_argument("--since", type=int, default=0, help="获取最近 N 天内的全部 dump（负数按绝对值处理）")
    parser.add_argument("--search", help="按关键词搜索 dump")

    parser.add_argument("--fetch", action="store_true", help="下载每个搜索结果的内容，而不是只列出 ID")
    parser.add_argument("--out", default=DEFAULT_OUT_DIR, help=f"--fetch 时文件保存目录，默认 {DEFAULT_OUT_DIR}")

    parser.add_argument("--base-url", help="服务地址，默认 https://psbdmp.ws")
    parser.add_argument("--timeout", type=float, help="单次请求超时秒数，默认 9")
    parser.add_argument("--user-agent", help="自定义 User-Agent")
    parser.add_argument("--proxy", help="使用 http(s) 代理，例如 http://127.0.0.1:7890")
    return parser


def build_config(args) -> ClientConfig:
    config = ClientConfig.from_env()
    if args.base_url:
        config = config.with_base_url(args.base_url)
    if args.timeout is not None:
        config = config.with_timeout(args.timeout)
    if args.user_agent:
        config = config.with_user_agent(args.user_agent)
    if args.proxy:
        config = config.with_proxy(args.proxy)
    return config


def main(argv=None, client: DumpClient | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not any(getattr(args, flag) for flag in QUERY_FLAGS):
        print("[!] 需要选择一个操作：用 --dl 下载指定 dump，或者用搜索参数查询。\n")
        parser.print_help()
        return 1

    if args.timeout is not None and args.timeout <= 0:
        parser.error(f"--timeout 必须大于 0，收到了 {args.timeout}")

    if client is None:
        client = DumpClient(build_config(args))

    try:
        return process_args(args, client, args.out)
    except UsageError as e:
        parser.error(str(e))


if __name__ == "__main__":
    sys.exit(main())
