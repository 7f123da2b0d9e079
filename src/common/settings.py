"""
どこで: `common.settings`
何を: アニメーション定数とログ設定を型付きで一元管理し、起動時に環境変数から読み込む。
なぜ: `os.getenv` の散在を解消し、既定値/型の一貫性とテスト容易性を高めるため。
"""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_float, env_int, env_str

# キーフレーム間隔の下限（0 除算の回避）
_MIN_KEYFRAME_DURATION = 1e-6


@dataclass
class _Settings:
    # 位置/色のスケール
    POSITION_SCALE: float = 1000.0
    COLOR_SCALE: float = 0.03

    # 1 キーフレーム = 120 BPM の 16 分音符
    KEYFRAME_DURATION: float = 0.125

    # 軌跡バッファ
    HISTORY_CAPACITY: int = 100

    # Misc
    LOG_LEVEL: str = "INFO"
    DEBUG_TIMELINE: bool = False


_settings = _Settings()


def reload_from_env() -> None:
    """環境変数から設定を再読込。

    - 不正値は既定値へフォールバック。
    - キーフレーム間隔と履歴容量は下限丸めを適用。
    """
    _settings.POSITION_SCALE = env_float("VMV_POSITION_SCALE", 1000.0)
    _settings.COLOR_SCALE = env_float("VMV_COLOR_SCALE", 0.03)
    _settings.KEYFRAME_DURATION = env_float(
        "VMV_KEYFRAME_DURATION", 0.125, min_value=_MIN_KEYFRAME_DURATION
    )
    _settings.HISTORY_CAPACITY = env_int("VMV_HISTORY_CAPACITY", 100, min_value=1) or 100

    _settings.LOG_LEVEL = env_str("VMV_LOG_LEVEL", "INFO")
    _settings.DEBUG_TIMELINE = env_bool("VMV_DEBUG_TIMELINE", False)


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings"]
