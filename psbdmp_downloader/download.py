"""
Fetch-all helpers: filename cleaning, writing dump content, per-record isolation.
"""

import os
import sys
import unicodedata
from pathlib import Path
from typing import Iterable, List

from .client import Dump, DumpClient
from .errors import PsbdmpError


def clean_filename(name: str, max_length: int = 150) -> str:
    """
    清洗文件名：Unicode 规范化、移除路径分隔符与非法字符、截断过长。
    保证 dump id 不能跳出输出目录。
    """
    name = unicodedata.normalize("NFKC", name)
    prohibited = '<>:"/\\|?*'
    cleaned_chars = []
    for ch in name:
        if ord(ch) < 32:
            continue
        if ch in prohibited:
            continue
        cleaned_chars.append(ch)

    cleaned = "".join(cleaned_chars).strip()
    if not cleaned or set(cleaned) == {"."}:
        cleaned = "dump"

    if len(cleaned) > max_length:
        cleaned = cleaned[:max_length]

    return cleaned


def write_dump(dump_id: str, content: str, out_dir: str | Path) -> Path:
    """
    把 dump 内容原样写入 <out_dir>/<id>，不做任何换行转换。
    """
    os.makedirs(out_dir, exist_ok=True)
    path = Path(out_dir) / clean_filename(dump_id)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)
    return path


def fetch_all(
    client: DumpClient,
    dumps: Iterable[Dump],
    out_dir: str | Path,
    logger=None,
) -> List[Path]:
    """
    按搜索结果顺序逐条获取内容并写盘。单条失败只记录日志并跳过。
    """
    written: List[Path] = []
    for d in dumps:
        try:
            content = client.get_dump_content(d.id)
        except PsbdmpError as e:
            _log(f"[!] {d.id} 获取失败: {e}", level="error", logger=logger)
            continue

        fname = clean_filename(d.id)
        if fname != d.id:
            _log(f"[!] {d.id} 不能直接用作文件名，改存为 {fname}（可能覆盖同名文件）", level="warning", logger=logger)

        try:
            path = write_dump(d.id, content, out_dir)
        except OSError as e:
            _log(f"[!] {d.id} 写入失败: {e}", level="error", logger=logger)
            continue

        _log(f"[+] {d.id} -> {path}", level="success", logger=logger)
        written.append(path)
    return written


def _log(message, level: str = "info", logger=None):
    if logger:
        try:
            logger(level, message)
            return
        except Exception:
            pass
    stream = sys.stderr if level in ("error", "warning") else sys.stdout
    print(message, file=stream)
