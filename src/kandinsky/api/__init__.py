# どこで: `src/kandinsky/api/__init__.py`。
# 何を: 公開 API（`run`）のエントリポイント。
# なぜ: ユーザーコードから `kandinsky.run` だけで起動できるようにするため。

from __future__ import annotations

__all__ = ["run"]


def run(*args, **kwargs):
    """公開 run API へのラッパ（遅延インポートで GUI 依存を後回しにする）。"""

    from .runner import run as _run

    return _run(*args, **kwargs)
