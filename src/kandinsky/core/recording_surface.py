"""
どこで: `src/kandinsky/core/recording_surface.py`。
何を: 受け取った描画命令を順に記録するだけの描画面を提供する。
なぜ: GPU やウィンドウ無しで描画順・変換の入れ子・色指定を検証できるようにするため。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from kandinsky.core.surface import StatefulSurface


@dataclass(frozen=True, slots=True)
class Command:
    """記録された 1 命令。

    Notes
    -----
    塗り/線系（fill/stroke/fill_rect/stroke_rect）は、発行時点のスタイルも `style` に残す。
    """

    name: str
    args: tuple[Any, ...] = ()
    style: dict[str, Any] | None = None


class RecordingSurface(StatefulSurface):
    """描画命令を `commands` に積む描画面。"""

    def __init__(self) -> None:
        super().__init__()
        self.commands: list[Command] = []

    def _record(self, name: str, *args: Any, paint: str | None = None) -> None:
        style = None
        if paint is not None:
            style = {
                "paint": self.fill_style if paint == "fill" else self.stroke_style,
                "line_width": self.line_width,
                "global_alpha": self.global_alpha,
                "global_composite_operation": self.global_composite_operation,
                "depth": self.depth,
            }
        self.commands.append(Command(name=name, args=tuple(args), style=style))

    def names(self) -> list[str]:
        """記録済み命令名の列を返す。"""

        return [c.name for c in self.commands]

    def clear_commands(self) -> None:
        self.commands.clear()

    # --- 状態スタック ---
    def save(self) -> None:
        self._record("save")
        super().save()

    def restore(self) -> None:
        self._record("restore")
        super().restore()

    def translate(self, x: float, y: float) -> None:
        self._record("translate", float(x), float(y))
        super().translate(x, y)

    def rotate(self, angle: float) -> None:
        self._record("rotate", float(angle))
        super().rotate(angle)

    def scale(self, sx: float, sy: float) -> None:
        self._record("scale", float(sx), float(sy))
        super().scale(sx, sy)

    # --- パス ---
    def begin_path(self) -> None:
        self._record("begin_path")

    def move_to(self, x: float, y: float) -> None:
        self._record("move_to", float(x), float(y))

    def line_to(self, x: float, y: float) -> None:
        self._record("line_to", float(x), float(y))

    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float) -> None:
        self._record("quadratic_curve_to", float(cpx), float(cpy), float(x), float(y))

    def arc(self, x: float, y: float, radius: float, start: float, end: float) -> None:
        self._record("arc", float(x), float(y), float(radius), float(start), float(end))

    def rect(self, x: float, y: float, w: float, h: float) -> None:
        self._record("rect", float(x), float(y), float(w), float(h))

    def close_path(self) -> None:
        self._record("close_path")

    # --- 塗り/線 ---
    def fill(self) -> None:
        self._record("fill", paint="fill")

    def stroke(self) -> None:
        self._record("stroke", paint="stroke")

    def fill_rect(self, x: float, y: float, w: float, h: float) -> None:
        self._record("fill_rect", float(x), float(y), float(w), float(h), paint="fill")

    def stroke_rect(self, x: float, y: float, w: float, h: float) -> None:
        self._record("stroke_rect", float(x), float(y), float(w), float(h), paint="stroke")

    def clear_rect(self, x: float, y: float, w: float, h: float) -> None:
        self._record("clear_rect", float(x), float(y), float(w), float(h))


__all__ = ["Command", "RecordingSurface"]
