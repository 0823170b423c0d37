# どこで: `src/kandinsky/interactive/gl/__init__.py`。
# 何を: ModernGL による三角形バッチ描画の実装をまとめるパッケージ定義。
# なぜ: GPU 資源の扱いを描画面（MeshSurface）やウィンドウ管理から切り離すため。

from __future__ import annotations

__all__ = []
