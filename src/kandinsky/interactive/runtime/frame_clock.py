# どこで: `src/kandinsky/interactive/runtime/frame_clock.py`。
# 何を: フレーム間の経過時間 dt を上限付きで算出する時計を提供する。
# なぜ: ウィンドウが裏に回った後などに、1 フレームで時間が大きく跳ぶのを防ぐため。

from __future__ import annotations

import time

MAX_FRAME_DT_MS = 40.0


def monotonic_ms() -> float:
    """単調増加する現在時刻 [ms] を返す。"""

    return float(time.perf_counter() * 1000.0)


class FrameClock:
    """直前フレームの時刻を覚え、上限付きの dt を返す時計。

    Notes
    -----
    dt は `[0, max_dt_ms]` に収める。時刻が巻き戻った場合（再開直後に古いタイムスタンプが届くなど）は 0。
    """

    def __init__(self, *, now_ms: float, max_dt_ms: float = MAX_FRAME_DT_MS) -> None:
        _max = float(max_dt_ms)
        if _max <= 0:
            raise ValueError("max_dt_ms は正の値である必要がある")
        self._last_ms = float(now_ms)
        self._max_dt_ms = _max

    @property
    def last_ms(self) -> float:
        """直前に記録した時刻 [ms] を返す。"""

        return float(self._last_ms)

    @property
    def max_dt_ms(self) -> float:
        return float(self._max_dt_ms)

    def advance(self, now_ms: float) -> float:
        """`now_ms` までの dt [ms] を返し、直前時刻を更新する。"""

        now = float(now_ms)
        dt = min(self._max_dt_ms, max(0.0, now - self._last_ms))
        self._last_ms = now
        return float(dt)

    def reset(self, now_ms: float) -> None:
        """直前時刻を `now_ms` に置き換える（一時停止からの再開用）。"""

        self._last_ms = float(now_ms)


__all__ = ["MAX_FRAME_DT_MS", "FrameClock", "monotonic_ms"]
