# どこで: `src/kandinsky/__init__.py`。
# 何を: ルート `kandinsky` パッケージを定義する。
# なぜ: import 起点を `kandinsky` に統一するため。

from __future__ import annotations

from kandinsky.api import run

__all__ = ["run"]
