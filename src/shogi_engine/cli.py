"""CLI entry point for shogi-engine: Human vs Random AI.

コマンドラインで動く本将棋の対局プログラム。
プレイヤー（先手）対ランダムAI（後手）で対局できる。

入力:
  番号        合法手一覧の番号（1始まり）
  棋譜表記    "７六歩" / "76歩" / "同歩" / "５五角打" など
  u           待った（AI の手と自分の手を1手ずつ戻す）
  q           投了して終了

起動方法: `shogi-cli`
"""

from __future__ import annotations

import logging

from shogi_engine.config import configure_logging
from shogi_engine.engine.random_player import random_move
from shogi_engine.game.display import format_game
from shogi_engine.game.notation import format_move, legal_moves_payload, resolve_move
from shogi_engine.game.state import ShogiGame
from shogi_engine.game.types import Player, Square

logger = logging.getLogger(__name__)


def _last_to(game: ShogiGame) -> Square | None:
    last = game.last_move
    return last.to_sq if last is not None else None


def _print_legal_moves(game: ShogiGame) -> None:
    print("Legal moves:")
    for item in legal_moves_payload(game.legal_moves(), _last_to(game)):
        print(f"  {item['id']:>3}: {item['kifu']:<8} ({item['notation']})")
    print()


def _human_turn(game: ShogiGame) -> bool:
    """人間の手を1手指す。中断されたら False。"""
    _print_legal_moves(game)
    moves = game.legal_moves()

    # 入力検証ループ（合法手が指定されるまで繰り返す）
    while True:
        try:
            choice = input("Your move (number / notation, u=undo, q=quit): ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGame aborted.")
            return False

        if choice == "q":
            print("Resigned.")
            return False
        if choice == "u":
            # AI の応手と自分の手の2手分を戻す
            if game.cursor < 1:
                print("Nothing to undo.")
                continue
            game.undo()
            game.undo()
            return True
        if not choice:
            continue

        move = resolve_move(choice, moves, _last_to(game))
        if move is None:
            print(f"Invalid: enter 1-{len(moves)} or a move such as ７六歩.")
            continue
        print(f"You play: {format_move(move, _last_to(game))}")
        game.apply_move(move)
        return True


def main() -> None:
    """Run a Human (SENTE) vs Random AI (GOTE) game.

    人間（先手）対ランダムAI（後手）の対局を実行する。
    """
    configure_logging()
    print("=== 本将棋 ===")
    print("You are SENTE (先手). AI is GOTE (後手, marked with v).")
    print()

    game = ShogiGame()
    logger.info("New CLI game started")

    while not game.is_terminal:
        print(format_game(game))
        print()

        if game.current_player == Player.SENTE:
            if not _human_turn(game):
                return
        else:
            # AI（後手）の番: ランダムに手を選んで指す
            move = random_move(game)
            print(f"AI plays: {format_move(move, _last_to(game))}")
            game.apply_move(move)

        print()

    # 終局: 結果を表示
    print(format_game(game))
    print()
    if game.winner == Player.SENTE:
        print("You win!")
    else:
        print("AI wins!")


if __name__ == "__main__":
    main()
