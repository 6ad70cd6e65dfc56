"""Notation and export for 本将棋.

人間向けの棋譜表記と、機械向けの局面表現（SFEN の盤面部分・JSON）を作る。
自動で手を選ぶ側（人間の UI や言語モデルへのプロンプト作成）に渡すための層で、
合法手の判定そのものには関わらない。

表記の例:
  ７六歩      移動先 + 駒名（筋は全角数字 ９〜１、段は漢数字 一〜九）
  ２二角成    成る手は末尾に「成」
  ５五角打    打つ手は末尾に「打」
  同歩        直前の手と同じマスへの手
  ７七歩７六  移動元を含む表記（format_move_long）

SFEN は盤面配置フィールドのみを出力する。手番・持ち駒・手数は含まないので、
必要なら呼び出し側で別途付け加えること。
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Any

from shogi_engine.game.board import Board, Piece
from shogi_engine.game.moves import BoardMove, Drop, Move
from shogi_engine.game.state import HistoryEntry
from shogi_engine.game.types import (
    COLS,
    HAND_PIECE_TYPES,
    PIECE_NAMES,
    ROWS,
    SFEN_LETTERS,
    PieceType,
    Player,
    Square,
    is_promoted,
    promote,
)

FILE_LABELS = "９８７６５４３２１"  # col 0 = ９筋
RANK_LABELS = "一二三四五六七八九"  # row 0 = 一段目

_SENTE_MARK = "▲"
_GOTE_MARK = "△"

# 未成駒の SFEN 文字 → 駒種
_LETTER_TO_TYPE: dict[str, PieceType] = {
    letter: pt for pt, letter in SFEN_LETTERS.items() if not letter.startswith("+")
}

_ZEN_TO_HAN = str.maketrans("０１２３４５６７８９", "0123456789")
_KANJI_TO_DIGIT = str.maketrans("一二三四五六七八九", "123456789")
_ARROWS = re.compile(r"→|↦|⇒|ー|->")
_IGNORED = re.compile(r"[\s　▲△]")


class NotationError(ValueError):
    """SFEN などの表記が解釈できない。"""


def square_label(sq: Square) -> str:
    """マスの表記（例: Square(5, 2) → "７六"）。"""
    return f"{FILE_LABELS[sq.col]}{RANK_LABELS[sq.row]}"


def format_move(move: Move, last_to: Square | None = None) -> str:
    """一般的な棋譜表記（移動元を含まない）。

    直前の手の移動先 last_to と同じマスへの手は「同」で表す。
    """
    name = PIECE_NAMES[move.piece_type]
    promote_mark = "成" if isinstance(move, BoardMove) and move.promote else ""
    if last_to is not None and move.to_sq == last_to:
        return f"同{name}{promote_mark}"
    to = square_label(move.to_sq)
    if isinstance(move, Drop):
        return f"{to}{name}打"
    return f"{to}{name}{promote_mark}"


def format_move_long(move: Move) -> str:
    """移動元を含む表記（例: "７七歩７六", "２八飛２三成", "５五角打"）。"""
    name = PIECE_NAMES[move.piece_type]
    to = square_label(move.to_sq)
    if isinstance(move, Drop):
        return f"{to}{name}打"
    promote_mark = "成" if move.promote else ""
    return f"{square_label(move.from_sq)}{name}{to}{promote_mark}"


def format_history(entries: Iterable[HistoryEntry]) -> list[str]:
    """棋譜を1手1行に整形する（例: "1. ▲７七歩７六", "1. △３三歩３四"）。"""
    lines: list[str] = []
    for index, entry in enumerate(entries):
        mark = _SENTE_MARK if entry.player == Player.SENTE else _GOTE_MARK
        lines.append(f"{index // 2 + 1}. {mark}{format_move_long(entry.move)}")
    return lines


def normalize_notation(text: str) -> str:
    """表記ゆれを吸収する（全角数字・段の漢数字→半角数字、矢印の統一、空白と▲△の除去）。"""
    if not text:
        return ""
    s = text.translate(_ZEN_TO_HAN).translate(_KANJI_TO_DIGIT)
    s = _ARROWS.sub("->", s)
    return _IGNORED.sub("", s)


def resolve_move(
    choice: int | str,
    legal_moves: Sequence[Move],
    last_to: Square | None = None,
) -> Move | None:
    """Resolve a 1-based id or a notation string to one of legal_moves.

    照合の優先順位:
      1. 番号（1始まり、legal_moves_payload の id）
      2. 移動元を含む表記の完全一致
      3. 一般的な表記（「同」を含む）
      4. 打つ手の「打」を省略した表記
    どれにも当たらなければ None。
    """
    if isinstance(choice, int):
        return legal_moves[choice - 1] if 1 <= choice <= len(legal_moves) else None

    norm = normalize_notation(choice)
    if not norm:
        return None
    if norm.isascii() and norm.isdigit():
        return resolve_move(int(norm), legal_moves, last_to)

    for move in legal_moves:
        if normalize_notation(format_move_long(move)) == norm:
            return move
    for move in legal_moves:
        if normalize_notation(format_move(move, last_to)) == norm:
            return move
    for move in legal_moves:
        if isinstance(move, Drop):
            short = format_move(move, last_to).removesuffix("打")
            if normalize_notation(short) == norm:
                return move
    return None


def legal_moves_payload(
    legal_moves: Sequence[Move],
    last_to: Square | None = None,
) -> list[dict[str, Any]]:
    """合法手一覧を番号付きの辞書リストにする（id は 1 始まり）。"""
    payload: list[dict[str, Any]] = []
    for index, move in enumerate(legal_moves):
        payload.append(
            {
                "id": index + 1,
                "type": "drop" if isinstance(move, Drop) else "move",
                "piece": PIECE_NAMES[move.piece_type],
                "from": square_label(move.from_sq) if isinstance(move, BoardMove) else None,
                "to": square_label(move.to_sq),
                "promote": isinstance(move, BoardMove) and move.promote,
                "notation": format_move_long(move),
                "kifu": format_move(move, last_to),
            }
        )
    return payload


def board_to_sfen(board: Board) -> str:
    """SFEN の盤面配置部分（例: 平手なら "lnsgkgsnl/1r5b1/ppppppppp/9/9/9/PPPPPPPPP/1B5R1/LNSGKGSNL"）。"""
    ranks: list[str] = []
    for r in range(ROWS):
        rank = ""
        empty = 0
        for c in range(COLS):
            piece = board.squares[r * COLS + c]
            if piece is None:
                empty += 1
                continue
            if empty > 0:
                rank += str(empty)
                empty = 0
            letter = SFEN_LETTERS[piece.piece_type]
            rank += letter.lower() if piece.owner == Player.GOTE else letter
        if empty > 0:
            rank += str(empty)
        ranks.append(rank)
    return "/".join(ranks)


def board_from_sfen(
    placement: str,
    sente_hand: Iterable[PieceType] = (),
    gote_hand: Iterable[PieceType] = (),
) -> Board:
    """Parse a SFEN placement field into a Board.

    持ち駒は SFEN からではなく引数で渡す。
    """
    ranks = placement.strip().split("/")
    if len(ranks) != ROWS:
        raise NotationError(f"SFEN placement must have {ROWS} ranks: {placement!r}")

    board = Board.empty()
    for r, rank_text in enumerate(ranks):
        c = 0
        promoted = False
        for ch in rank_text:
            if ch in "123456789":
                if promoted:
                    raise NotationError(f"'+' must precede a piece letter: {placement!r}")
                c += int(ch)
                continue
            if ch == "+":
                promoted = True
                continue
            pt = _LETTER_TO_TYPE.get(ch.upper())
            if pt is None:
                raise NotationError(f"Unknown piece letter {ch!r}: {placement!r}")
            if promoted:
                promoted_type = promote(pt)
                if promoted_type is None:
                    raise NotationError(f"Piece {ch!r} cannot be promoted: {placement!r}")
                pt = promoted_type
                promoted = False
            if c >= COLS:
                raise NotationError(f"Rank {r + 1} is too wide: {placement!r}")
            owner = Player.SENTE if ch.isupper() else Player.GOTE
            board.set_piece(Square(r, c), Piece(pt, owner))
            c += 1
        if c != COLS or promoted:
            raise NotationError(f"Rank {r + 1} must cover {COLS} files: {placement!r}")

    for pt in sente_hand:
        board.add_to_hand(Player.SENTE, pt)
    for pt in gote_hand:
        board.add_to_hand(Player.GOTE, pt)
    return board


def board_to_json(board: Board) -> list[dict[str, Any]]:
    """盤面を81マス分の辞書リストにする（行優先、右上の９一から）。"""
    cells: list[dict[str, Any]] = []
    for r in range(ROWS):
        for c in range(COLS):
            piece = board.squares[r * COLS + c]
            cells.append(
                {
                    "square": square_label(Square(r, c)),
                    "owner": piece.owner.name if piece is not None else None,
                    "piece": PIECE_NAMES[piece.piece_type] if piece is not None else None,
                    "promoted": piece is not None and is_promoted(piece.piece_type),
                }
            )
    return cells


def format_hand(hand: Iterable[PieceType]) -> str:
    """持ち駒の表記（例: "歩×2、角"）。持ち駒がなければ "なし"。"""
    hand = list(hand)
    if not hand:
        return "なし"
    parts: list[str] = []
    for pt in HAND_PIECE_TYPES:
        count = hand.count(pt)
        if count == 1:
            parts.append(PIECE_NAMES[pt])
        elif count > 1:
            parts.append(f"{PIECE_NAMES[pt]}×{count}")
    return "、".join(parts)
