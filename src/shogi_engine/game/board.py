"""Board representation for 本将棋 (9x9).

9×9盤の盤面データ構造と、両者の持ち駒。

盤面は対局（ShogiGame）が専有して書き換える。指し手生成や王手判定は
clone() した作業用コピーの上でだけ局面を動かすので、本物の盤面には触れない。
マスの中身（Piece）はイミュータブルなので、clone() はリストの複製だけで済む。
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from shogi_engine.game.types import (
    COLS,
    NUM_SQUARES,
    PROMOTION_MAP,
    ROWS,
    PieceType,
    Player,
    Square,
    base_type,
)


@dataclass(frozen=True)
class Piece:
    """A piece on the board.

    盤面上の駒。種類と所有者を持つ。
    """

    piece_type: PieceType
    owner: Player


# 後段の並び（左=９筋から）: 香桂銀金玉金銀桂香
_BACK_RANK = [
    PieceType.LANCE, PieceType.KNIGHT, PieceType.SILVER,
    PieceType.GOLD, PieceType.KING, PieceType.GOLD,
    PieceType.SILVER, PieceType.KNIGHT, PieceType.LANCE,
]


def _initial_squares() -> list[Piece | None]:
    """Return the standard starting position (平手).

    Row 0 = 後手の後段（上端）、Row 8 = 先手の後段（下端）。
    将棋盤の「9筋」表記と異なり、プログラムでは列0が左（9筋）になる点に注意。
    """
    squares: list[Piece | None] = [None] * NUM_SQUARES

    for c, pt in enumerate(_BACK_RANK):
        squares[0 * COLS + c] = Piece(pt, Player.GOTE)
        squares[8 * COLS + c] = Piece(pt, Player.SENTE)

    # 飛角: 後手は飛車=左(8筋)・角=右(2筋)、先手はその鏡像
    squares[1 * COLS + 1] = Piece(PieceType.ROOK, Player.GOTE)
    squares[1 * COLS + 7] = Piece(PieceType.BISHOP, Player.GOTE)
    squares[7 * COLS + 1] = Piece(PieceType.BISHOP, Player.SENTE)
    squares[7 * COLS + 7] = Piece(PieceType.ROOK, Player.SENTE)

    for c in range(COLS):
        squares[2 * COLS + c] = Piece(PieceType.PAWN, Player.GOTE)
        squares[6 * COLS + c] = Piece(PieceType.PAWN, Player.SENTE)

    return squares


@dataclass
class Board:
    """Mutable board state for 9x9 本将棋.

    squares: 81要素のリスト（行優先）。squares[row * COLS + col] でアクセス。
    hands: 2要素のタプル。hands[0]=先手の持ち駒、hands[1]=後手の持ち駒。
           持ち駒は取った順に並ぶ（順序に意味はなく、同種の駒はどれを使っても同じ）。

    == は盤面と持ち駒の値比較になる（待ったの往復チェックなどで使う）。
    """

    squares: list[Piece | None] = field(default_factory=_initial_squares)
    hands: tuple[list[PieceType], list[PieceType]] = field(
        default_factory=lambda: ([], [])
    )

    @classmethod
    def initial(cls) -> Board:
        """平手の初期局面。"""
        return cls()

    @classmethod
    def empty(cls) -> Board:
        """駒が1枚もない盤面（テストや詰将棋の局面作成用）。"""
        return cls(squares=[None] * NUM_SQUARES)

    def clone(self) -> Board:
        """独立したコピーを返す。コピーを書き換えても元の盤面は変わらない。"""
        return Board(
            squares=list(self.squares),
            hands=(list(self.hands[0]), list(self.hands[1])),
        )

    @staticmethod
    def is_on_board(sq: Square) -> bool:
        return 0 <= sq.row < ROWS and 0 <= sq.col < COLS

    def piece_at(self, sq: Square) -> Piece | None:
        """マスの駒を返す。駒がない、または盤外なら None。"""
        if not self.is_on_board(sq):
            return None
        return self.squares[sq.row * COLS + sq.col]

    def set_piece(self, sq: Square, piece: Piece | None) -> None:
        """マスの駒を置き換える。盤外なら何もしない。"""
        if self.is_on_board(sq):
            self.squares[sq.row * COLS + sq.col] = piece

    def remove_piece(self, sq: Square) -> Piece | None:
        """マスの駒を取り除いて返す。"""
        piece = self.piece_at(sq)
        self.set_piece(sq, None)
        return piece

    def hand(self, player: Player) -> list[PieceType]:
        return self.hands[player.value]

    def add_to_hand(self, player: Player, piece_type: PieceType) -> None:
        """Add piece to hand, reverting promoted pieces to base form.

        取った駒を持ち駒に追加する。成り駒は元の駒種に戻す。
        例: 龍（成り飛）を取ったら、飛車として持ち駒に加える。
        """
        self.hands[player.value].append(base_type(piece_type))

    def remove_from_hand(self, player: Player, piece_type: PieceType) -> bool:
        """持ち駒から1枚取り除く。その駒を持っていなければ False。"""
        hand = self.hands[player.value]
        if piece_type not in hand:
            return False
        hand.remove(piece_type)
        return True

    def move_piece(self, from_sq: Square, to_sq: Square, promote: bool = False) -> Piece | None:
        """Relocate a piece, capturing whatever stands on the destination.

        取った駒は（成り駒なら元に戻して）動かした側の持ち駒に加える。
        取った駒を返す（なければ None）。移動元が空なら何もしない。
        """
        piece = self.piece_at(from_sq)
        if piece is None or not self.is_on_board(to_sq):
            return None

        captured = self.piece_at(to_sq)
        if captured is not None:
            self.add_to_hand(piece.owner, captured.piece_type)

        new_type = piece.piece_type
        if promote and new_type in PROMOTION_MAP:
            new_type = PROMOTION_MAP[new_type]

        self.set_piece(from_sq, None)
        self.set_piece(to_sq, Piece(new_type, piece.owner))
        return captured

    def drop_piece(self, sq: Square, piece_type: PieceType, player: Player) -> bool:
        """持ち駒を空きマスに打つ。打てなければ False（盤面は変わらない）。"""
        if not self.is_on_board(sq) or self.piece_at(sq) is not None:
            return False
        if not self.remove_from_hand(player, piece_type):
            return False
        self.set_piece(sq, Piece(piece_type, player))
        return True

    def find_king(self, player: Player) -> Square | None:
        """プレイヤーの王将のマスを返す。王将がなければ None。

        王手判定や終局判定に使用する。
        """
        for idx, piece in enumerate(self.squares):
            if (
                piece is not None
                and piece.piece_type == PieceType.KING
                and piece.owner == player
            ):
                return Square.from_index(idx)
        return None

    def has_unpromoted_pawn_in_column(self, player: Player, col: int) -> bool:
        """Whether player has an unpromoted pawn anywhere in the column (二歩 check).

        と金（成り歩）は数えない。
        """
        for r in range(ROWS):
            p = self.squares[r * COLS + col]
            if p is not None and p.owner == player and p.piece_type == PieceType.PAWN:
                return True
        return False

    def piece_counts(self) -> Counter[PieceType]:
        """盤上と両者の持ち駒を合わせた駒数（成り駒は元の駒種で数える）。"""
        counts: Counter[PieceType] = Counter()
        for piece in self.squares:
            if piece is not None:
                counts[base_type(piece.piece_type)] += 1
        for hand in self.hands:
            counts.update(hand)
        return counts
