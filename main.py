"""
どこで: リポジトリ直下 `main.py`。
何を: アニメーションする抽象構図をウィンドウでプレビュー表示する。
なぜ: 動作確認用の最小エントリポイントとして利用するため。
"""

import logging
import sys

sys.path.append("src")

from kandinsky import run

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    run(
        fps=60.0,
        fullscreen=False,
        window_size=(1280, 800),
    )
