# どこで: `src/kandinsky/interactive/runtime/pyglet_frame_source.py`。
# 何を: pyglet の clock を使って「次の表示フレームで 1 回呼ぶ」フレーム源を提供する。
# なぜ: FrameLoop を pyglet のイベントループへ載せ、OS のイベント配送と同じスレッドで描画を進めるため。

from __future__ import annotations

from collections.abc import Callable

import pyglet

from kandinsky.interactive.runtime.frame_clock import monotonic_ms
from kandinsky.interactive.runtime.frame_loop import FrameCallback


class PygletFrameSource:
    """`pyglet.clock.schedule_once` で 1 フレームずつ予約するフレーム源。

    Notes
    -----
    vsync 有効時は `flip()` が表示リフレッシュで待つため、実際の頻度は表示に同期する。
    `fps` は一時停止中など `flip()` しないフレームの上限頻度として効く。
    """

    def __init__(
        self,
        *,
        fps: float = 60.0,
        now: Callable[[], float] = monotonic_ms,
        after_frame: Callable[[], None] | None = None,
    ) -> None:
        _fps = float(fps)
        self._interval = 1.0 / _fps if _fps > 0 else 0.0
        self._now = now
        self._after_frame = after_frame
        self._pending: FrameCallback | None = None

    @property
    def armed(self) -> bool:
        return self._pending is not None

    def request(self, callback: FrameCallback) -> None:
        if self._pending is not None:
            pyglet.clock.unschedule(self._fire)
        self._pending = callback
        pyglet.clock.schedule_once(self._fire, self._interval)

    def cancel(self) -> None:
        self._pending = None
        pyglet.clock.unschedule(self._fire)

    def _fire(self, _dt: float) -> None:
        callback = self._pending
        if callback is None:
            return
        self._pending = None
        callback(self._now())
        after = self._after_frame
        if after is not None:
            after()
