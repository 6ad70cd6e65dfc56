"""Terminal display for 本将棋."""

from __future__ import annotations

from shogi_engine.game.board import Board
from shogi_engine.game.notation import RANK_LABELS, format_hand
from shogi_engine.game.state import ShogiGame
from shogi_engine.game.types import COLS, ROWS, PieceType, Player, Square

# 盤面表示は1マス全角1文字なので、成香・成桂・成銀は略字を使う
_BOARD_CHARS: dict[PieceType, str] = {
    PieceType.PAWN: "歩",
    PieceType.LANCE: "香",
    PieceType.KNIGHT: "桂",
    PieceType.SILVER: "銀",
    PieceType.GOLD: "金",
    PieceType.BISHOP: "角",
    PieceType.ROOK: "飛",
    PieceType.KING: "玉",
    PieceType.PRO_PAWN: "と",
    PieceType.PRO_LANCE: "杏",
    PieceType.PRO_KNIGHT: "圭",
    PieceType.PRO_SILVER: "全",
    PieceType.HORSE: "馬",
    PieceType.DRAGON: "龍",
}

_FILE_HEADER = "  ９ ８ ７ ６ ５ ４ ３ ２ １"
_SEPARATOR = "+--+" + "--+" * (COLS - 1)

_PLAYER_NAMES = {Player.SENTE: "先手", Player.GOTE: "後手"}


def format_board(board: Board) -> str:
    """Format the board for terminal display.

    後手の駒は "v" を前に付ける。上に後手の持ち駒、下に先手の持ち駒を表示する。
    """
    lines: list[str] = [
        f"後手持駒: {format_hand(board.hand(Player.GOTE))}",
        _FILE_HEADER,
        _SEPARATOR,
    ]

    for r in range(ROWS):
        cells = "|"
        for c in range(COLS):
            piece = board.piece_at(Square(r, c))
            if piece is None:
                cells += "  |"
                continue
            mark = "v" if piece.owner == Player.GOTE else " "
            cells += f"{mark}{_BOARD_CHARS[piece.piece_type]}|"
        lines.append(f"{cells} {RANK_LABELS[r]}")
        lines.append(_SEPARATOR)

    lines.append(f"先手持駒: {format_hand(board.hand(Player.SENTE))}")
    return "\n".join(lines)


def format_game(game: ShogiGame) -> str:
    """盤面に手番・王手・終局の表示を加える（CLI 用）。"""
    lines = [format_board(game.board)]
    if game.winner is not None:
        lines.append(f"まで{game.cursor + 1}手で{_PLAYER_NAMES[game.winner]}の勝ち")
        return "\n".join(lines)
    turn = f"手番: {_PLAYER_NAMES[game.current_player]}"
    if game.is_in_check():
        turn += "（王手）"
    lines.append(turn)
    return "\n".join(lines)
