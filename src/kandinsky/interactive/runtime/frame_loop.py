# どこで: `src/kandinsky/interactive/runtime/frame_loop.py`。
# 何を: 表示同期のフレーム源（FrameSource）と、取り消しトークン付きの再武装ループ（FrameLoop）を提供する。
# なぜ: 「コールバックが自分を無条件に再登録する」形を避け、停止後に次フレームが走らないことを保証するため。

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

FrameCallback = Callable[[float], None]
"""フレーム時刻 `now_ms` を受け取るコールバック。"""


class FrameSource(Protocol):
    """次の表示フレームで 1 回だけコールバックを呼ぶ仕組み。"""

    def request(self, callback: FrameCallback) -> None:
        """次フレームで `callback(now_ms)` を 1 回呼ぶよう予約する。"""
        ...

    def cancel(self) -> None:
        """予約済みのコールバックを取り消す。"""
        ...


class CancelToken:
    """ループの停止要求を表すフラグ。"""

    __slots__ = ("_cancelled",)

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class FrameLoop:
    """1 フレームずつ予約し直すループ。

    Notes
    -----
    - 次フレームの予約は、現在のフレーム処理が戻った後にだけ行う（フレームは重ならない）。
    - フレーム処理の中で `stop()` された場合も、再予約はしない。
    """

    def __init__(self, source: FrameSource, on_frame: FrameCallback) -> None:
        self._source = source
        self._on_frame = on_frame
        self._token: CancelToken | None = None

    @property
    def running(self) -> bool:
        token = self._token
        return token is not None and not token.cancelled

    def start(self) -> None:
        """ループを開始する（開始済みなら何もしない）。"""

        if self.running:
            return
        token = CancelToken()
        self._token = token
        self._arm(token)

    def stop(self) -> None:
        """ループを停止し、予約済みのフレームを取り消す。"""

        token = self._token
        if token is None:
            return
        token.cancel()
        self._source.cancel()

    def _arm(self, token: CancelToken) -> None:
        def tick(now_ms: float) -> None:
            # 取り消し後に届いた古い予約は無視する。
            if token.cancelled:
                return
            self._on_frame(float(now_ms))
            if token.cancelled:
                return
            self._arm(token)

        self._source.request(tick)


class ManualFrameSource:
    """呼び出し側が `fire()` でフレームを進めるフレーム源。

    ヘッドレス実行やテストで、表示同期の代わりに使う。
    """

    def __init__(self) -> None:
        self._pending: FrameCallback | None = None
        self.requests = 0

    @property
    def armed(self) -> bool:
        """次フレームの予約が残っているかを返す。"""

        return self._pending is not None

    def request(self, callback: FrameCallback) -> None:
        self._pending = callback
        self.requests += 1

    def cancel(self) -> None:
        self._pending = None

    def fire(self, now_ms: float) -> bool:
        """予約済みのコールバックを 1 回呼ぶ。予約が無ければ False を返す。"""

        callback = self._pending
        if callback is None:
            return False
        self._pending = None
        callback(float(now_ms))
        return True


__all__ = ["CancelToken", "FrameCallback", "FrameLoop", "FrameSource", "ManualFrameSource"]
