"""本将棋 (Full Shogi): 9x9 rules engine."""

from shogi_engine.game.board import Board, Piece
from shogi_engine.game.display import format_board
from shogi_engine.game.moves import BoardMove, Drop, Move
from shogi_engine.game.rules import is_in_check, legal_moves
from shogi_engine.game.state import GameResult, HistoryEntry, ShogiGame
from shogi_engine.game.types import COLS, ROWS, PieceType, Player, Square

__all__ = [
    "Board",
    "BoardMove",
    "COLS",
    "Drop",
    "GameResult",
    "HistoryEntry",
    "Move",
    "Piece",
    "PieceType",
    "Player",
    "ROWS",
    "ShogiGame",
    "Square",
    "format_board",
    "is_in_check",
    "legal_moves",
]
