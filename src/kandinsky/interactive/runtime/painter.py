"""
どこで: `src/kandinsky/interactive/runtime/painter.py`。
何を: Scene を所有し、フレームごとの時刻更新と全面再描画、および pause/resume/toggle/destroy を提供する。
なぜ: 実行中インスタンスの状態（Scene/時計/走行フラグ）を 1 つのオブジェクトに閉じ込め、複数インスタンスを独立に扱えるようにするため。
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable

from kandinsky.core.composition import render_frame
from kandinsky.core.generators import Sampler, uniform_sampler
from kandinsky.core.palette import PALETTE
from kandinsky.core.renderer import Viewport
from kandinsky.core.scene import Scene, SceneCounts, populate_scene
from kandinsky.core.surface import Surface
from kandinsky.interactive.runtime.frame_clock import MAX_FRAME_DT_MS, FrameClock, monotonic_ms
from kandinsky.interactive.runtime.frame_loop import FrameLoop, FrameSource

_logger = logging.getLogger(__name__)


class PainterState(enum.Enum):
    RUNNING = "running"
    PAUSED = "paused"
    DESTROYED = "destroyed"


class Painter:
    """アニメーションする抽象構図の 1 インスタンス。

    Notes
    -----
    - 生成直後に Scene を作り、`autostart=True` ならフレームループを開始する。
    - フレーム処理はフレーム源（表示同期コールバック）からのみ呼ばれ、Scene を更新する唯一の経路になる。
    - `destroy()` 後は全操作が no-op になる。
    """

    def __init__(
        self,
        surface: Surface | None,
        size: tuple[float, float],
        *,
        source: FrameSource,
        sampler: Sampler | None = None,
        palette: tuple[str, ...] = PALETTE,
        counts: SceneCounts = SceneCounts(),
        now: Callable[[], float] = monotonic_ms,
        max_dt_ms: float = MAX_FRAME_DT_MS,
        on_destroy: Callable[[], None] | None = None,
        autostart: bool = True,
    ) -> None:
        """Scene を生成し、必要ならループを開始する。

        Parameters
        ----------
        surface : Surface | None
            描画先。None の場合は実行できないため即座に失敗する。
        size : tuple[float, float]
            描画面の論理サイズ (width, height)。
        source : FrameSource
            表示同期のフレーム源。
        sampler : Sampler | None
            生成に使う一様乱数源。None の場合は numpy の既定 Generator。
        now : Callable[[], float]
            現在時刻 [ms]。resume/toggle 時の基準時刻に使う。
        on_destroy : Callable[[], None] | None
            destroy 時に 1 度だけ呼ぶ後始末（ウィンドウ/イベントの切り離しなど）。

        Raises
        ------
        ValueError
            surface が None、size が正でない、または palette が不正な場合。
        """

        if surface is None:
            raise ValueError("描画面を取得できないため Painter を開始できない")
        width, height = _coerce_size(size)

        self._surface: Surface | None = surface
        self._viewport = Viewport(width, height)
        self._now = now
        self._on_destroy = on_destroy

        self._scene: Scene | None = populate_scene(
            width,
            height,
            sampler=sampler if sampler is not None else uniform_sampler(),
            palette=palette,
            counts=counts,
        )
        self._state = PainterState.RUNNING
        self._time = 0.0
        self._frames_drawn = 0
        self._clock = FrameClock(now_ms=now(), max_dt_ms=max_dt_ms)
        self._loop = FrameLoop(source, self.frame)

        if autostart:
            self._loop.start()

    # --- 参照 ---
    @property
    def state(self) -> PainterState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is PainterState.RUNNING

    @property
    def time(self) -> float:
        """累積アニメーション時刻 [s] を返す。"""

        return float(self._time)

    @property
    def frames_drawn(self) -> int:
        return int(self._frames_drawn)

    @property
    def scene(self) -> Scene | None:
        """Scene を返す。destroy 後は None。"""

        return self._scene

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def loop_running(self) -> bool:
        """フレームループが次フレームを予約し続けているかを返す。"""

        return self._loop.running

    # --- フレーム処理 ---
    def start(self) -> None:
        """フレームループを開始する（autostart=False で生成した場合用）。"""

        if self._state is PainterState.DESTROYED:
            return
        self._loop.start()

    def frame(self, now_ms: float) -> None:
        """1 フレーム分の処理を行う。

        dt は常に計測して直前時刻を更新する。描画と時刻の前進は RUNNING のときだけ行う。
        """

        if self._state is PainterState.DESTROYED:
            return
        dt = self._clock.advance(now_ms)
        if self._state is not PainterState.RUNNING:
            return
        scene = self._scene
        surface = self._surface
        if scene is None or surface is None:
            return

        self._time += dt * 0.001
        render_frame(surface, scene, self._time, self._viewport)
        self._frames_drawn += 1

    def resize(self, width: float, height: float) -> None:
        """描画面の論理サイズを更新する。既存レコードの位置はそのまま。"""

        if self._state is PainterState.DESTROYED:
            return
        w, h = _coerce_size((width, height))
        self._viewport = Viewport(w, h)

    # --- ライフサイクル ---
    def pause(self) -> None:
        if self._state is not PainterState.RUNNING:
            return
        self._state = PainterState.PAUSED
        _logger.debug("painter paused at t=%.3f", self._time)

    def resume(self) -> None:
        if self._state is PainterState.DESTROYED:
            return
        self._state = PainterState.RUNNING
        # 停止中の経過時間を dt に含めない。
        self._clock.reset(self._now())
        _logger.debug("painter resumed at t=%.3f", self._time)

    def toggle(self) -> None:
        if self._state is PainterState.DESTROYED:
            return
        if self._state is PainterState.RUNNING:
            self._state = PainterState.PAUSED
        else:
            self._state = PainterState.RUNNING
        self._clock.reset(self._now())
        _logger.debug("painter toggled -> %s", self._state.value)

    def destroy(self) -> None:
        """ループを止め、Scene と描画面を手放し、ホスト側の後始末を呼ぶ。"""

        if self._state is PainterState.DESTROYED:
            return
        self._state = PainterState.DESTROYED
        self._loop.stop()
        self._scene = None
        self._surface = None

        on_destroy = self._on_destroy
        self._on_destroy = None
        _logger.debug("painter destroyed after %d frames", self._frames_drawn)
        if on_destroy is not None:
            on_destroy()


def _coerce_size(size: tuple[float, float]) -> tuple[float, float]:
    try:
        w, h = size
        width = float(w)
        height = float(h)
    except Exception as exc:
        raise ValueError(f"size は (width, height) である必要がある: {size!r}") from exc
    if width <= 0 or height <= 0:
        raise ValueError(f"size は正の (width, height) である必要がある: {size!r}")
    return width, height


__all__ = ["Painter", "PainterState"]
