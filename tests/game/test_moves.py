"""Tests for 本将棋 pseudo-legal move generation."""

from __future__ import annotations

from shogi_engine.game.board import Board, Piece
from shogi_engine.game.moves import (
    BoardMove,
    Drop,
    can_promote,
    destinations,
    drop_squares,
    in_promotion_zone,
    is_legal_drop,
    is_pseudo_legal_move,
    must_promote,
    pseudo_legal_moves,
)
from shogi_engine.game.types import PieceType, Player, Square


def _make_board(
    pieces: list[tuple[int, int, PieceType, Player]],
    sente_hand: tuple[PieceType, ...] = (),
    gote_hand: tuple[PieceType, ...] = (),
) -> Board:
    board = Board.empty()
    for row, col, pt, owner in pieces:
        board.set_piece(Square(row, col), Piece(pt, owner))
    for pt in sente_hand:
        board.add_to_hand(Player.SENTE, pt)
    for pt in gote_hand:
        board.add_to_hand(Player.GOTE, pt)
    return board


_KINGS = [
    (8, 4, PieceType.KING, Player.SENTE),
    (0, 4, PieceType.KING, Player.GOTE),
]


class TestPromotionZone:
    def test_sente_zone(self) -> None:
        assert in_promotion_zone(2, Player.SENTE)
        assert not in_promotion_zone(3, Player.SENTE)

    def test_gote_zone(self) -> None:
        assert in_promotion_zone(6, Player.GOTE)
        assert not in_promotion_zone(5, Player.GOTE)

    def test_can_promote_leaving_zone(self) -> None:
        board = _make_board([(2, 4, PieceType.SILVER, Player.SENTE)])
        assert can_promote(board, Square(2, 4), Square(3, 3))

    def test_cannot_promote_gold(self) -> None:
        board = _make_board([(3, 4, PieceType.GOLD, Player.SENTE)])
        assert not can_promote(board, Square(3, 4), Square(2, 4))

    def test_must_promote(self) -> None:
        assert must_promote(PieceType.PAWN, Square(0, 4), Player.SENTE)
        assert must_promote(PieceType.LANCE, Square(8, 4), Player.GOTE)
        assert must_promote(PieceType.KNIGHT, Square(1, 4), Player.SENTE)
        assert must_promote(PieceType.KNIGHT, Square(7, 4), Player.GOTE)
        assert not must_promote(PieceType.KNIGHT, Square(2, 4), Player.SENTE)
        assert not must_promote(PieceType.SILVER, Square(0, 4), Player.SENTE)


class TestPseudoLegalMove:
    def test_off_board(self) -> None:
        board = Board.initial()
        assert not is_pseudo_legal_move(board, Square(6, 4), Square(-1, 4), Player.SENTE)
        assert not is_pseudo_legal_move(board, Square(9, 4), Square(8, 4), Player.SENTE)

    def test_empty_origin(self) -> None:
        board = Board.initial()
        assert not is_pseudo_legal_move(board, Square(4, 4), Square(3, 4), Player.SENTE)

    def test_opponent_piece_origin(self) -> None:
        board = Board.initial()
        assert not is_pseudo_legal_move(board, Square(2, 4), Square(3, 4), Player.SENTE)

    def test_own_piece_destination(self) -> None:
        board = Board.initial()
        assert not is_pseudo_legal_move(board, Square(8, 4), Square(8, 3), Player.SENTE)

    def test_slider_blocked(self) -> None:
        board = Board.initial()
        # 飛車の前には自分の歩がある
        assert not is_pseudo_legal_move(board, Square(7, 7), Square(5, 7), Player.SENTE)

    def test_slider_can_capture(self) -> None:
        board = _make_board(
            [
                (8, 0, PieceType.LANCE, Player.SENTE),
                (3, 0, PieceType.PAWN, Player.GOTE),
            ]
        )
        assert is_pseudo_legal_move(board, Square(8, 0), Square(3, 0), Player.SENTE)
        assert not is_pseudo_legal_move(board, Square(8, 0), Square(2, 0), Player.SENTE)

    def test_knight_jumps(self) -> None:
        board = Board.initial()
        board.remove_piece(Square(6, 0))
        assert is_pseudo_legal_move(board, Square(8, 1), Square(6, 0), Player.SENTE)


class TestDestinations:
    def test_gote_pawn_moves_down(self) -> None:
        board = _make_board([(3, 4, PieceType.PAWN, Player.GOTE)])
        assert destinations(board, Square(3, 4), Player.GOTE) == [Square(4, 4)]

    def test_gote_knight(self) -> None:
        board = _make_board([(2, 4, PieceType.KNIGHT, Player.GOTE)])
        assert destinations(board, Square(2, 4), Player.GOTE) == [Square(4, 3), Square(4, 5)]

    def test_row_major_order(self) -> None:
        board = _make_board([(4, 4, PieceType.KING, Player.SENTE)])
        dests = destinations(board, Square(4, 4), Player.SENTE)
        assert dests == sorted(dests, key=lambda sq: sq.index)
        assert len(dests) == 8

    def test_matches_pseudo_legal_check(self) -> None:
        board = Board.initial()
        board.move_piece(Square(6, 2), Square(5, 2))
        for idx, piece in enumerate(board.squares):
            if piece is None or piece.owner != Player.SENTE:
                continue
            from_sq = Square.from_index(idx)
            expected = [
                Square.from_index(t)
                for t in range(81)
                if is_pseudo_legal_move(board, from_sq, Square.from_index(t), Player.SENTE)
            ]
            assert destinations(board, from_sq, Player.SENTE) == expected

    def test_wrong_owner_is_empty(self) -> None:
        board = Board.initial()
        assert destinations(board, Square(2, 4), Player.SENTE) == []


class TestDrops:
    def test_drop_on_occupied_square(self) -> None:
        board = Board.initial()
        assert not is_legal_drop(board, Square(6, 4), PieceType.GOLD, Player.SENTE)

    def test_dead_squares(self) -> None:
        board = _make_board(_KINGS)
        assert not is_legal_drop(board, Square(0, 0), PieceType.PAWN, Player.SENTE)
        assert not is_legal_drop(board, Square(0, 0), PieceType.LANCE, Player.SENTE)
        assert not is_legal_drop(board, Square(1, 0), PieceType.KNIGHT, Player.SENTE)
        assert is_legal_drop(board, Square(0, 0), PieceType.SILVER, Player.SENTE)
        assert not is_legal_drop(board, Square(8, 0), PieceType.PAWN, Player.GOTE)
        assert not is_legal_drop(board, Square(7, 0), PieceType.KNIGHT, Player.GOTE)

    def test_pawn_drop_squares(self) -> None:
        board = _make_board(_KINGS, sente_hand=(PieceType.PAWN,))
        squares = drop_squares(board, PieceType.PAWN, Player.SENTE)
        # 81 - 玉2枚 - 一段目の空き8マス
        assert len(squares) == 71
        assert all(sq.row != 0 for sq in squares)

    def test_knight_drop_squares(self) -> None:
        board = _make_board(_KINGS)
        squares = drop_squares(board, PieceType.KNIGHT, Player.SENTE)
        assert all(sq.row >= 2 for sq in squares)
        assert len(squares) == 63 - 1  # 三段目以下の63マスから先手玉のマスを除く


class TestPseudoLegalMoves:
    def test_initial_position(self) -> None:
        moves = pseudo_legal_moves(Board.initial(), Player.SENTE)
        assert len(moves) == 30
        assert moves[0] == BoardMove(Square(6, 0), Square(5, 0), PieceType.PAWN)

    def test_promotion_variant_first(self) -> None:
        board = _make_board([(3, 4, PieceType.SILVER, Player.SENTE)])
        moves = [
            m for m in pseudo_legal_moves(board, Player.SENTE)
            if m.to_sq == Square(2, 4)
        ]
        assert moves == [
            BoardMove(Square(3, 4), Square(2, 4), PieceType.SILVER, promote=True),
            BoardMove(Square(3, 4), Square(2, 4), PieceType.SILVER, promote=False),
        ]

    def test_knight_forced_promotion(self) -> None:
        board = _make_board([(3, 4, PieceType.KNIGHT, Player.SENTE)])
        moves = pseudo_legal_moves(board, Player.SENTE)
        assert moves == [
            BoardMove(Square(3, 4), Square(1, 3), PieceType.KNIGHT, promote=True),
            BoardMove(Square(3, 4), Square(1, 5), PieceType.KNIGHT, promote=True),
        ]

    def test_drops_follow_board_moves_in_hand_order(self) -> None:
        board = _make_board(_KINGS, sente_hand=(PieceType.GOLD, PieceType.PAWN, PieceType.PAWN))
        moves = pseudo_legal_moves(board, Player.SENTE)
        drops = [m for m in moves if isinstance(m, Drop)]
        first_drop = moves.index(drops[0])
        assert all(isinstance(m, BoardMove) for m in moves[:first_drop])
        assert drops[0].piece_type == PieceType.PAWN
        assert drops[-1].piece_type == PieceType.GOLD
        # 同じ駒を2枚持っていても打つ手は重複しない
        assert len(drops) == len(set(drops))
