"""
どこで: `src/kandinsky/interactive/runtime/perf.py`。
何を: ウィンドウ描画 1 フレームの区間計測（tessellate/draw）を集計し、周期的にログへ出す。
なぜ: 遅さが三角形化か、GPU 描画（転送と flip）かを切り分けるため。
"""

from __future__ import annotations

import contextlib
import logging
import os
import time
from collections.abc import Iterator

_logger = logging.getLogger(__name__)


def _env_flag(name: str) -> bool:
    value = os.environ.get(name)
    if value is None:
        return False
    return str(value).strip().lower() not in {"", "0", "false", "no", "off"}


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None:
        return int(default)
    try:
        return int(value)
    except ValueError:
        return int(default)


class _PerfSection:
    def __init__(self, perf: PerfCollector, name: str) -> None:
        self._perf = perf
        self._name = str(name)
        self._t0_ns = 0

    def __enter__(self) -> None:
        self._t0_ns = time.perf_counter_ns()

    def __exit__(self, _exc_type: object, _exc: object, _tb: object) -> None:
        self._perf._add(self._name, int(time.perf_counter_ns() - self._t0_ns))


class PerfCollector:
    """フレーム区間計測の集計器。無効時は全メソッドが no-op。"""

    def __init__(self, *, enabled: bool, report_every: int = 120) -> None:
        self.enabled = bool(enabled)
        self.report_every = int(report_every) if int(report_every) > 0 else 120

        self._window_frames = 0
        self._sum_ns: dict[str, int] = {}

    @classmethod
    def from_env(cls) -> PerfCollector:
        """環境変数から作成する。

        - `KANDINSKY_PERF=1` で有効化する。
        - `KANDINSKY_PERF_EVERY=120` で何フレームごとに出力するかを指定する。
        """
        return cls(
            enabled=_env_flag("KANDINSKY_PERF"),
            report_every=_env_int("KANDINSKY_PERF_EVERY", 120),
        )

    def section(self, name: str) -> contextlib.AbstractContextManager[None]:
        """`with` で囲った区間の時間を加算する。"""
        if not self.enabled:
            return contextlib.nullcontext()
        return _PerfSection(self, str(name))

    @contextlib.contextmanager
    def frame(self) -> Iterator[None]:
        """1 フレーム全体を計測し、`report_every` フレームごとに平均を出す。"""
        if not self.enabled:
            yield
            return

        t0 = time.perf_counter_ns()
        try:
            yield
        finally:
            self._add("frame", int(time.perf_counter_ns() - t0))
            self._window_frames += 1
            if self._window_frames % self.report_every == 0:
                self._report_and_reset()

    def averages_ms(self) -> dict[str, float]:
        """区間ごとの 1 フレーム平均 [ms] を返す。"""

        frames = int(self._window_frames)
        if frames <= 0:
            return {}
        return {
            name: float(total_ns) / float(frames) / 1_000_000.0
            for name, total_ns in self._sum_ns.items()
        }

    def _add(self, name: str, dt_ns: int) -> None:
        self._sum_ns[name] = int(self._sum_ns.get(name, 0)) + int(dt_ns)

    def _report_and_reset(self) -> None:
        averages = self.averages_ms()
        if not averages:
            return
        parts = [f"frame={averages.get('frame', 0.0):.3f}ms"]
        for name in sorted(k for k in averages if k != "frame"):
            parts.append(f"{name}={averages[name]:.3f}ms")
        _logger.info("[kandinsky-perf] %s", " ".join(parts))

        self._window_frames = 0
        self._sum_ns.clear()


__all__ = ["PerfCollector"]
