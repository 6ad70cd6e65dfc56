"""Tests for random player."""

import random

import pytest

from shogi_engine.engine.random_player import random_move
from shogi_engine.game.board import Board, Piece
from shogi_engine.game.state import ShogiGame
from shogi_engine.game.types import PieceType, Player, Square


def test_returns_legal_move() -> None:
    game = ShogiGame()
    move = random_move(game)
    assert move in game.legal_moves()


def test_seeded_rng_is_reproducible() -> None:
    game = ShogiGame()
    first = random_move(game, random.Random(42))
    second = random_move(game, random.Random(42))
    assert first == second


def test_no_legal_moves_raises() -> None:
    # 飛車に支えられた頭金で先手玉は詰んでいる
    board = Board.empty()
    board.set_piece(Square(8, 4), Piece(PieceType.KING, Player.SENTE))
    board.set_piece(Square(0, 0), Piece(PieceType.KING, Player.GOTE))
    board.set_piece(Square(7, 4), Piece(PieceType.GOLD, Player.GOTE))
    board.set_piece(Square(2, 4), Piece(PieceType.ROOK, Player.GOTE))
    game = ShogiGame.from_position(board)
    assert game.legal_moves() == []
    with pytest.raises(ValueError):
        random_move(game)


def test_random_game_progresses() -> None:
    """Random vs random play for 100 plies never gets stuck before the end."""
    rng = random.Random(3)
    game = ShogiGame()
    for _ in range(100):
        if game.is_terminal:
            break
        game.apply_move(random_move(game, rng))
    assert game.is_terminal or len(game.history) == 100
