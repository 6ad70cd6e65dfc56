"""Pseudo-legal move generation for 本将棋.

駒の動き（方向テーブル）と盤上の駒の配置だけから指し手を生成する。
自玉に王手がかかったまま残る手の除外は rules.py の役目。

手の表現:
  BoardMove(from_sq, to_sq, piece_type, promote)  盤上の駒を動かす手
  Drop(to_sq, piece_type)                         持ち駒を打つ手（常に不成）

生成順は「移動元のマス（行優先）→ 移動先のマス（行優先）→ 成/不成」、
その後に打つ手（駒種順 → マス順）。同じ局面なら常に同じ並びになる。
"""

from __future__ import annotations

from dataclasses import dataclass

from shogi_engine.game.board import Board
from shogi_engine.game.types import (
    COLS,
    HAND_PIECE_TYPES,
    NUM_SQUARES,
    ROWS,
    PieceType,
    Player,
    Square,
    cannot_promote,
    movement_directions,
    oriented,
)


@dataclass(frozen=True)
class BoardMove:
    """盤上の駒の移動。piece_type は動かす前（成る前）の駒種。"""

    from_sq: Square
    to_sq: Square
    piece_type: PieceType
    promote: bool = False


@dataclass(frozen=True)
class Drop:
    """持ち駒を打つ手。"""

    to_sq: Square
    piece_type: PieceType


Move = BoardMove | Drop


def in_promotion_zone(row: int, player: Player) -> bool:
    """Check if a row is in the promotion zone (enemy's 3 ranks)."""
    if player == Player.SENTE:
        return row <= 2
    return row >= 6


def can_promote(board: Board, from_sq: Square, to_sq: Square) -> bool:
    """移動元または移動先が敵陣なら成れる（成れない駒種を除く）。"""
    piece = board.piece_at(from_sq)
    if piece is None or cannot_promote(piece.piece_type):
        return False
    return in_promotion_zone(from_sq.row, piece.owner) or in_promotion_zone(
        to_sq.row, piece.owner
    )


def must_promote(piece_type: PieceType, to_sq: Square, player: Player) -> bool:
    """Check if promotion is mandatory (piece has no further moves).

    行き所のない駒: 歩・香は最奥段、桂は奥の2段に不成で入れない。
    """
    if piece_type == PieceType.PAWN or piece_type == PieceType.LANCE:
        if player == Player.SENTE:
            return to_sq.row == 0
        return to_sq.row == ROWS - 1
    if piece_type == PieceType.KNIGHT:
        if player == Player.SENTE:
            return to_sq.row <= 1
        return to_sq.row >= ROWS - 2
    return False


def is_pseudo_legal_move(board: Board, from_sq: Square, to_sq: Square, player: Player) -> bool:
    """Check a move against piece geometry and occupancy only.

    盤外・移動元に自駒がない・移動先に自駒がある場合は不可。
    それ以外は駒の方向テーブルのどれか1つで届けば可。
    遠距離駒は移動先より手前のマスがすべて空いていなければならない
    （移動先の相手駒は取れる）。成りや自玉の安全は考慮しない。
    """
    if not board.is_on_board(from_sq) or not board.is_on_board(to_sq):
        return False
    piece = board.piece_at(from_sq)
    if piece is None or piece.owner != player:
        return False
    target = board.piece_at(to_sq)
    if target is not None and target.owner == player:
        return False

    for direction in movement_directions(piece.piece_type):
        dr, dc = oriented(direction, player)
        r, c = from_sq.row + dr, from_sq.col + dc
        if not direction.sliding:
            if r == to_sq.row and c == to_sq.col:
                return True
            continue
        while 0 <= r < ROWS and 0 <= c < COLS:
            if r == to_sq.row and c == to_sq.col:
                return True
            if board.squares[r * COLS + c] is not None:
                break  # 途中に駒があればこの方向はここまで
            r, c = r + dr, c + dc
    return False


def destinations(board: Board, from_sq: Square, player: Player) -> list[Square]:
    """Squares the piece on from_sq can reach (pseudo-legal), row-major order.

    is_pseudo_legal_move を81マスすべてに当てるのと同じ結果を、
    方向ごとに盤上をたどって求める。
    """
    piece = board.piece_at(from_sq)
    if piece is None or piece.owner != player:
        return []

    found: set[int] = set()
    for direction in movement_directions(piece.piece_type):
        dr, dc = oriented(direction, player)
        r, c = from_sq.row + dr, from_sq.col + dc
        while 0 <= r < ROWS and 0 <= c < COLS:
            target = board.squares[r * COLS + c]
            if target is not None and target.owner == player:
                break
            found.add(r * COLS + c)
            if target is not None or not direction.sliding:
                break  # 駒を取ったら止まる / 1マス移動
            r, c = r + dr, c + dc
    return [Square.from_index(idx) for idx in sorted(found)]


def is_legal_drop(board: Board, sq: Square, piece_type: PieceType, player: Player) -> bool:
    """Drop rules: empty square, no dead pieces, no nifu (二歩).

    打ち歩詰めはここでは判定しない（rules.is_pawn_drop_mate を参照）。
    """
    if not board.is_on_board(sq) or board.piece_at(sq) is not None:
        return False

    # 行き所のない駒: 歩・香は最奥段、桂は奥の2段に打てない
    if must_promote(piece_type, sq, player):
        return False

    # 二歩: 同じ筋に自分の未成の歩があれば歩は打てない
    if piece_type == PieceType.PAWN:
        if board.has_unpromoted_pawn_in_column(player, sq.col):
            return False

    return True


def drop_squares(board: Board, piece_type: PieceType, player: Player) -> list[Square]:
    """指定の駒を打てるマスの一覧（行優先）。"""
    return [
        Square.from_index(idx)
        for idx in range(NUM_SQUARES)
        if is_legal_drop(board, Square.from_index(idx), piece_type, player)
    ]


def pseudo_legal_moves(board: Board, player: Player) -> list[Move]:
    """Generate pseudo-legal moves (may leave own king in check)."""
    moves: list[Move] = []
    _generate_board_moves(board, player, moves)
    _generate_drop_moves(board, player, moves)
    return moves


def _generate_board_moves(board: Board, player: Player, moves: list[Move]) -> None:
    for idx in range(NUM_SQUARES):
        piece = board.squares[idx]
        if piece is None or piece.owner != player:
            continue
        from_sq = Square.from_index(idx)
        for to_sq in destinations(board, from_sq, player):
            _add_move_with_promotion(moves, board, from_sq, to_sq, piece.piece_type, player)


def _add_move_with_promotion(
    moves: list[Move],
    board: Board,
    from_sq: Square,
    to_sq: Square,
    piece_type: PieceType,
    player: Player,
) -> None:
    """Add a move, possibly with promotion variants."""
    if can_promote(board, from_sq, to_sq):
        moves.append(BoardMove(from_sq, to_sq, piece_type, promote=True))
        if not must_promote(piece_type, to_sq, player):
            moves.append(BoardMove(from_sq, to_sq, piece_type, promote=False))
    elif not must_promote(piece_type, to_sq, player):
        moves.append(BoardMove(from_sq, to_sq, piece_type, promote=False))


def _generate_drop_moves(board: Board, player: Player, moves: list[Move]) -> None:
    """Generate drop moves with nifu (二歩) and dead-piece restrictions."""
    hand = board.hand(player)
    for pt in HAND_PIECE_TYPES:
        if pt not in hand:
            continue  # 同じ駒種を複数持っていても1回だけ生成する
        for to_sq in drop_squares(board, pt, player):
            moves.append(Drop(to_sq, pt))
