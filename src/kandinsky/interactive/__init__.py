# どこで: `src/kandinsky/interactive/__init__.py`。
# 何を: ウィンドウ表示（pyglet + ModernGL）とフレーム駆動の実装をまとめるパッケージ定義。
# なぜ: 表示系の依存をこの層に閉じ込め、core をヘッドレスに保つため。

from __future__ import annotations

__all__ = []
