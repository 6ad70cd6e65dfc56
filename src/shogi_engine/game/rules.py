"""Legal move filtering and check detection for 本将棋.

合法手 = 疑似合法手（moves.py）のうち、指した後に自玉へ利きが残らない手。
各候補手を作業用コピーの盤面で指してみて、自玉のマスが相手の駒に
攻撃されていないかを調べる。与えられた盤面そのものは一切書き換えない。
"""

from __future__ import annotations

from shogi_engine.config import DEFAULT_CONFIG, EngineConfig
from shogi_engine.game.board import Board, Piece
from shogi_engine.game.moves import (
    BoardMove,
    Drop,
    Move,
    can_promote,
    is_legal_drop,
    is_pseudo_legal_move,
    must_promote,
    pseudo_legal_moves,
)
from shogi_engine.game.types import (
    NUM_SQUARES,
    PieceType,
    Player,
    Square,
    promote,
)


def simulate(board: Board, move: Move, player: Player) -> Board:
    """Return a scratch copy of board with move applied.

    持ち駒は変更しない（王手判定には盤上の配置だけが必要）。
    """
    scratch = board.clone()
    if isinstance(move, Drop):
        scratch.set_piece(move.to_sq, Piece(move.piece_type, player))
        return scratch

    piece = scratch.remove_piece(move.from_sq)
    if piece is None:
        return scratch
    new_type = piece.piece_type
    if move.promote:
        new_type = promote(new_type) or new_type
    scratch.set_piece(move.to_sq, Piece(new_type, player))
    return scratch


def is_square_attacked(board: Board, sq: Square, attacker: Player) -> bool:
    """Check if any piece of attacker can move to sq (ignoring promotion and self-check)."""
    for idx in range(NUM_SQUARES):
        piece = board.squares[idx]
        if piece is None or piece.owner != attacker:
            continue
        if is_pseudo_legal_move(board, Square.from_index(idx), sq, attacker):
            return True
    return False


def is_in_check(board: Board, player: Player) -> bool:
    """Check if player's king is under attack.

    王将がいない異常な局面は王手扱いにする。
    """
    king_sq = board.find_king(player)
    if king_sq is None:
        return True
    return is_square_attacked(board, king_sq, player.opponent)


def leaves_king_in_check(board: Board, move: Move, player: Player) -> bool:
    """手を指したと仮定したとき自玉に利きが残るか。"""
    return is_in_check(simulate(board, move, player), player)


def legal_moves(
    board: Board,
    player: Player,
    config: EngineConfig | None = None,
) -> list[Move]:
    """Generate all legal moves (excluding moves that leave king in check)."""
    config = config or DEFAULT_CONFIG
    return [
        move
        for move in pseudo_legal_moves(board, player)
        if _passes_filter(board, move, player, config)
    ]


def has_legal_move(board: Board, player: Player, config: EngineConfig | None = None) -> bool:
    """合法手が1つでもあれば True（終局判定用、最初の1手で打ち切る）。"""
    config = config or DEFAULT_CONFIG
    return any(
        _passes_filter(board, move, player, config)
        for move in pseudo_legal_moves(board, player)
    )


def _passes_filter(board: Board, move: Move, player: Player, config: EngineConfig) -> bool:
    if leaves_king_in_check(board, move, player):
        return False
    if config.forbid_pawn_drop_mate and is_pawn_drop_mate(board, move, player):
        return False
    return True


def is_well_formed_move(board: Board, move: Move, player: Player) -> bool:
    """王手放置以外の規則を満たすか（盤面を動かさずに判定できる検査だけ）。

    持ち駒の有無、打てないマス・二歩、駒種の一致、駒の利き、
    成れない成り・行き所のない不成を拒否する。
    """
    if isinstance(move, Drop):
        if move.piece_type not in board.hand(player):
            return False
        if not is_legal_drop(board, move.to_sq, move.piece_type, player):
            return False
    elif isinstance(move, BoardMove):
        piece = board.piece_at(move.from_sq)
        if piece is None or piece.piece_type != move.piece_type:
            return False
        if not is_pseudo_legal_move(board, move.from_sq, move.to_sq, player):
            return False
        if move.promote and not can_promote(board, move.from_sq, move.to_sq):
            return False
        if not move.promote and must_promote(move.piece_type, move.to_sq, player):
            return False
    else:
        return False
    return True


def is_legal_move(
    board: Board,
    move: Move,
    player: Player,
    config: EngineConfig | None = None,
) -> bool:
    """Whether move belongs to legal_moves(board, player, config).

    全合法手を生成せずに、その1手だけを同じ規則で検査する。
    """
    config = config or DEFAULT_CONFIG
    return is_well_formed_move(board, move, player) and _passes_filter(
        board, move, player, config
    )


def is_pawn_drop_mate(board: Board, move: Move, player: Player) -> bool:
    """打ち歩詰め: the move is a pawn drop that checkmates the opponent.

    歩を打った局面で相手が王手されていて、かつ相手に合法手がなければ True。
    EngineConfig.forbid_pawn_drop_mate が有効なときだけ使われる。
    """
    if not isinstance(move, Drop) or move.piece_type != PieceType.PAWN:
        return False
    after = simulate(board, move, player)
    after.remove_from_hand(player, PieceType.PAWN)
    opponent = player.opponent
    if not is_in_check(after, opponent):
        return False
    # 相手側の応手では打ち歩詰めを考えないので既定設定で調べる
    return not has_legal_move(after, opponent, DEFAULT_CONFIG)
