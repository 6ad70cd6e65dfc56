"""Engine and logging configuration.

ルールエンジンの設定定義。
合法手チェックの有無やオプションのルール（打ち歩詰め）を設定クラスで管理する。
ログレベルは環境変数 SHOGI_LOG_LEVEL で指定する（既定は INFO）。
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

LOG_LEVEL_ENV = "SHOGI_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s | %(levelname)-5s | %(name)s | %(message)s"


@dataclass(frozen=True)
class EngineConfig:
    """Configuration for ShogiGame and the legality filter.

    Attributes:
        validate_moves:        apply_move() で手が合法手集合に含まれるか再確認する。
                               legal_moves() の中から選んで指す呼び出し側なら
                               False にして二重の手生成を省ける。
        forbid_pawn_drop_mate: 打ち歩詰めを禁止する。既定は False
                               （従来のルールセットのまま、打ち歩詰めも合法手に含める）。
    """

    validate_moves: bool = True
    forbid_pawn_drop_mate: bool = False


DEFAULT_CONFIG = EngineConfig()


def log_level_from_env() -> int:
    """環境変数 SHOGI_LOG_LEVEL からログレベルを取得する。

    未設定や不明な値の場合は INFO を返す。
    """
    name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    level_mapping = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return level_mapping.get(name, logging.INFO)


def configure_logging(level: int | None = None) -> logging.Logger:
    """Attach a stream handler to the package logger (entry points only).

    ライブラリとして使う場合はハンドラを付けない。cli / web の main() から呼ぶ。
    """
    logger = logging.getLogger("shogi_engine")
    logger.setLevel(level if level is not None else log_level_from_env())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.propagate = False
    return logger
