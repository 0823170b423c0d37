# どこで: `src/kandinsky/interactive/runtime/__init__.py`。
# 何を: フレーム時計/フレームループ/ライフサイクル制御など実行時の部品をまとめるパッケージ定義。
# なぜ: `src/kandinsky/api/runner.py` を「配線」に寄せ、責務ごとに差し替えやすくするため。

from __future__ import annotations

__all__ = []
