# どこで: `src/kandinsky/interactive/render_settings.py`。
# 何を: ウィンドウ表示の設定値の束を表すデータクラスを定義する。
# なぜ: `run` の引数を簡潔に保ちつつ、interactive 側の設定を一元管理するため。

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RenderSettings:
    """ウィンドウ表示に用いる設定値の集合。"""

    fps: float = 60.0
    fullscreen: bool = False
    window_size: tuple[int, int] = (1280, 800)
    # 論理サイズの下限。これより小さいウィンドウでも構図はこのサイズで組む。
    min_size: tuple[int, int] = (300, 200)
    caption: str = "Kandinsky"
    msaa_samples: int = 4

    def logical_size(self, width: float, height: float) -> tuple[float, float]:
        """ウィンドウの論理サイズを下限で切り上げて返す。"""
        min_w, min_h = self.min_size
        return max(float(min_w), float(width)), max(float(min_h), float(height))
