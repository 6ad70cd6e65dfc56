"""Random player: selects a legal move uniformly at random.

ランダムプレイヤー: 合法手の中からランダムに手を選ぶ。

用途:
- 実装の動作確認（ランダム対局を最後まで指してもルールが破綻しないか）
- CLI / Web の対戦相手（後手）
"""

from __future__ import annotations

import random

from shogi_engine.game.moves import Move
from shogi_engine.game.state import ShogiGame


def random_move(game: ShogiGame, rng: random.Random | None = None) -> Move:
    """Return a random legal move for the side to move.

    合法手の中から一様ランダムで1手を返す。rng を渡せば再現可能になる。
    合法手がない場合は ValueError を送出する（終局局面では呼ばれないはず）。
    """
    moves = game.legal_moves()
    if not moves:
        raise ValueError("No legal moves available")
    return (rng or random).choice(moves)
