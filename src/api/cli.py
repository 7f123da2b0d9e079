"""
どこで: `api.cli`（コンソールスクリプト `voicemotion`）。
何を: MIDI ファイルのパスを 1 つ受け取り、抽出→変換→診断出力→ビューア再生を順に実行する。
なぜ: 数値コアをバッチ処理として 1 度だけ走らせ、失敗を終了コードへ写像する薄い入口を提供するため。

終了コード:
- 0: 正常終了
- 1: 引数の個数が不正（`ConfigError`、ファイルには触れない）
- 2: 読み込み/解析の失敗（`OSError`/`ParseError`/`TimingUnsupported`）

注意:
- 存在しないパスは警告のみで処理を続け、実際の失敗は読み込み段階で報告する（従来挙動を保持）。
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import NoReturn, Sequence

from common.logging import setup_default_logging
from common.settings import get as get_settings
from engine.io.errors import MidiError
from engine.io.timeline import load_frames
from engine.motion.transform import convert

from .report import build_report

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_INPUT = 2

USAGE = "Usage: voicemotion <path-to-midi-file>"


class ConfigError(Exception):
    """コマンドライン引数が不正な場合に送出される。"""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise ConfigError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="voicemotion",
        description="Turn a multi-track MIDI file into voice-motion vectors and animate them.",
    )
    parser.add_argument("path", help="path to a standard MIDI file (first 4 tracks are voices)")
    parser.add_argument(
        "--no-window",
        action="store_true",
        help="print the diagnostic listing only; do not open the viewer",
    )
    parser.add_argument("--log-level", default=None, help="logging level (default: VMV_LOG_LEVEL or INFO)")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    try:
        args = build_parser().parse_args(argv)
    except ConfigError as e:
        print(USAGE, file=sys.stderr)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE

    setup_default_logging(args.log_level or get_settings().LOG_LEVEL)

    path = Path(args.path)
    if not path.exists():
        logger.warning("Path: %s does not exist", path)
    else:
        logger.info("Found midi file at %s", path)

    try:
        frames = load_frames(path)
    except OSError as e:
        print(f"error: could not read {path}: {e}", file=sys.stderr)
        return EXIT_INPUT
    except MidiError as e:
        print(f"error: {path}: {e}", file=sys.stderr)
        return EXIT_INPUT

    motions = convert(frames)
    logger.info("extracted %d frame(s), %d motion vector(s)", len(frames), len(motions))
    for line in build_report(frames, motions):
        print(line)

    if args.no_window:
        return EXIT_OK

    from .viewer import run_viewer

    start = time.perf_counter()
    run_viewer(motions)
    logger.info("Time spent animating: %.3fs", time.perf_counter() - start)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
