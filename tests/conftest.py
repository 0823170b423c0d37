"""テスト共通設定。

ディスプレイの無い Linux では pyglet を headless（EGL）で初期化し、window 層の import で止まらないようにする。
"""

from __future__ import annotations

import os
import sys

try:
    import pyglet
except ImportError:
    pyglet = None

if pyglet is not None:
    pyglet.options["shadow_window"] = False
    if sys.platform.startswith("linux") and not (os.environ.get("DISPLAY") or os.environ.get("WAYLAND_DISPLAY")):
        pyglet.options["headless"] = True
