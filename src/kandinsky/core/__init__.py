# どこで: `src/kandinsky/core/__init__.py`。
# 何を: シーン生成・描画ルーチン・描画面契約などヘッドレスなコア実装をまとめるパッケージ定義。
# なぜ: pyglet/ModernGL に依存しない層を分離し、テストや別ホストから再利用できるようにするため。

from __future__ import annotations

__all__ = []
