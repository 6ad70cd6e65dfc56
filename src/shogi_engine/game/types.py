"""Types and constants for 本将棋 (Full Shogi, 9x9).

本将棋（9×9盤）の基本型・定数定義。
駒は14種類（未成7種 + 成り6種 + 王将）。盤上の空きマスは None で表す。

駒の動きはすべてデータ（方向テーブル）として定義する。
駒ごとのクラス階層は作らず、PieceType をキーにした表を引くだけにしている。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, unique
from typing import NamedTuple

ROWS = 9
COLS = 9
NUM_SQUARES = ROWS * COLS  # 81マス


@unique
class Player(IntEnum):
    """Player identifiers.

    先手（SENTE）は下側から上に向かって進む（row 8 → row 0）。
    後手（GOTE）は上側から下に向かって進む（row 0 → row 8）。
    """

    SENTE = 0  # 先手
    GOTE = 1   # 後手

    @property
    def opponent(self) -> Player:
        """相手プレイヤーを返す。"""
        return Player(1 - self.value)


@unique
class PieceType(IntEnum):
    """Piece types in 本将棋（14種類）.

    値は to_tensor_planes() でのチャンネルインデックスに対応する。
    0〜6: 未成駒、7: 王将、8〜13: 成り駒
    """

    PAWN = 0         # 歩
    LANCE = 1        # 香
    KNIGHT = 2       # 桂
    SILVER = 3       # 銀
    GOLD = 4         # 金
    BISHOP = 5       # 角
    ROOK = 6         # 飛
    KING = 7         # 玉/王
    PRO_PAWN = 8     # と（成り歩）
    PRO_LANCE = 9    # 成香
    PRO_KNIGHT = 10  # 成桂
    PRO_SILVER = 11  # 成銀
    HORSE = 12       # 馬（成り角）
    DRAGON = 13      # 龍（成り飛）


@dataclass(frozen=True)
class Square:
    """盤上のマス。row 0 が後手側（上端）、col 0 が９筋（左端）。"""

    row: int
    col: int

    @property
    def index(self) -> int:
        """行優先のマスインデックス（0〜80）。"""
        return self.row * COLS + self.col

    @staticmethod
    def from_index(idx: int) -> Square:
        return Square(idx // COLS, idx % COLS)


class Direction(NamedTuple):
    """駒の移動方向（先手視点）。sliding=True なら同方向に何マスでも進める。"""

    d_row: int
    d_col: int
    sliding: bool = False


# 成り変換テーブル: 未成駒 → 成り駒
PROMOTION_MAP: dict[PieceType, PieceType] = {
    PieceType.PAWN: PieceType.PRO_PAWN,
    PieceType.LANCE: PieceType.PRO_LANCE,
    PieceType.KNIGHT: PieceType.PRO_KNIGHT,
    PieceType.SILVER: PieceType.PRO_SILVER,
    PieceType.BISHOP: PieceType.HORSE,
    PieceType.ROOK: PieceType.DRAGON,
}

# 逆変換: 成り駒 → 元の駒種（取られた駒を持ち駒に戻す際に使用）
UNPROMOTION_MAP: dict[PieceType, PieceType] = {v: k for k, v in PROMOTION_MAP.items()}

# 成れない駒（金・玉・成り駒）
CANNOT_PROMOTE: frozenset[PieceType] = frozenset(
    {PieceType.GOLD, PieceType.KING, *UNPROMOTION_MAP}
)

# 持ち駒として使える駒種（未成の非玉駒、7種）
HAND_PIECE_TYPES = [
    PieceType.PAWN, PieceType.LANCE, PieceType.KNIGHT,
    PieceType.SILVER, PieceType.GOLD, PieceType.BISHOP, PieceType.ROOK,
]

# 平手の駒数（成り駒は元の駒種で数える）。合計40枚。
INITIAL_PIECE_COUNTS: dict[PieceType, int] = {
    PieceType.PAWN: 18,
    PieceType.LANCE: 4,
    PieceType.KNIGHT: 4,
    PieceType.SILVER: 4,
    PieceType.GOLD: 4,
    PieceType.BISHOP: 2,
    PieceType.ROOK: 2,
    PieceType.KING: 2,
}

# 棋譜表記用の駒名
PIECE_NAMES: dict[PieceType, str] = {
    PieceType.PAWN: "歩",
    PieceType.LANCE: "香",
    PieceType.KNIGHT: "桂",
    PieceType.SILVER: "銀",
    PieceType.GOLD: "金",
    PieceType.BISHOP: "角",
    PieceType.ROOK: "飛",
    PieceType.KING: "玉",
    PieceType.PRO_PAWN: "と",
    PieceType.PRO_LANCE: "成香",
    PieceType.PRO_KNIGHT: "成桂",
    PieceType.PRO_SILVER: "成銀",
    PieceType.HORSE: "馬",
    PieceType.DRAGON: "龍",
}

# SFEN の駒文字（先手=大文字、後手=小文字、成り駒は "+" を前置）
SFEN_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "P",
    PieceType.LANCE: "L",
    PieceType.KNIGHT: "N",
    PieceType.SILVER: "S",
    PieceType.GOLD: "G",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.KING: "K",
    PieceType.PRO_PAWN: "+P",
    PieceType.PRO_LANCE: "+L",
    PieceType.PRO_KNIGHT: "+N",
    PieceType.PRO_SILVER: "+S",
    PieceType.HORSE: "+B",
    PieceType.DRAGON: "+R",
}

# 金と同じ動き（前3方向 + 左右 + 真後ろ）
_GOLD_STEPS = [
    Direction(-1, -1), Direction(-1, 0), Direction(-1, 1),
    Direction(0, -1), Direction(0, 1),
    Direction(1, 0),
]
_KING_STEPS = [
    Direction(-1, -1), Direction(-1, 0), Direction(-1, 1),
    Direction(0, -1), Direction(0, 1),
    Direction(1, -1), Direction(1, 0), Direction(1, 1),
]
_DIAGONAL_SLIDES = [
    Direction(-1, -1, True), Direction(-1, 1, True),
    Direction(1, -1, True), Direction(1, 1, True),
]
_ORTHOGONAL_SLIDES = [
    Direction(-1, 0, True), Direction(0, -1, True),
    Direction(0, 1, True), Direction(1, 0, True),
]

# 移動方向テーブル（先手視点、前 = 行インデックス減少方向）
# 後手の場合は d_row, d_col の両方を反転して使う
MOVE_DIRECTIONS: dict[PieceType, list[Direction]] = {
    PieceType.PAWN: [Direction(-1, 0)],                 # 歩: 1マス前のみ
    PieceType.LANCE: [Direction(-1, 0, True)],          # 香: 前方向に遠距離
    PieceType.KNIGHT: [Direction(-2, -1), Direction(-2, 1)],  # 桂: 2マス前+左右1マス
    PieceType.SILVER: [
        Direction(-1, -1), Direction(-1, 0), Direction(-1, 1),
        Direction(1, -1), Direction(1, 1),
    ],  # 銀: 前3方向+斜め後
    PieceType.GOLD: _GOLD_STEPS,
    PieceType.BISHOP: _DIAGONAL_SLIDES,
    PieceType.ROOK: _ORTHOGONAL_SLIDES,
    PieceType.KING: _KING_STEPS,
    # 成り駒（と・成香・成桂・成銀）は金と同じ動き
    PieceType.PRO_PAWN: _GOLD_STEPS,
    PieceType.PRO_LANCE: _GOLD_STEPS,
    PieceType.PRO_KNIGHT: _GOLD_STEPS,
    PieceType.PRO_SILVER: _GOLD_STEPS,
    # 馬: 斜め遠距離 + 縦横1マス、龍: 縦横遠距離 + 斜め1マス
    PieceType.HORSE: _DIAGONAL_SLIDES + [
        Direction(-1, 0), Direction(0, -1), Direction(0, 1), Direction(1, 0),
    ],
    PieceType.DRAGON: _ORTHOGONAL_SLIDES + [
        Direction(-1, -1), Direction(-1, 1), Direction(1, -1), Direction(1, 1),
    ],
}


def promote(piece_type: PieceType) -> PieceType | None:
    """成った後の駒種を返す。成れない駒なら None。"""
    return PROMOTION_MAP.get(piece_type)


def demote(piece_type: PieceType) -> PieceType | None:
    """成る前の駒種を返す。成り駒でなければ None。"""
    return UNPROMOTION_MAP.get(piece_type)


def base_type(piece_type: PieceType) -> PieceType:
    """Return the unpromoted form (identity for unpromoted pieces).

    取った駒を持ち駒にする際に使う。例: 龍 → 飛。
    """
    return UNPROMOTION_MAP.get(piece_type, piece_type)


def cannot_promote(piece_type: PieceType) -> bool:
    return piece_type in CANNOT_PROMOTE


def is_promoted(piece_type: PieceType) -> bool:
    return piece_type in UNPROMOTION_MAP


def movement_directions(piece_type: PieceType) -> list[Direction]:
    """駒種の移動方向リスト（先手視点）を返す。"""
    return MOVE_DIRECTIONS[piece_type]


def oriented(direction: Direction, player: Player) -> tuple[int, int]:
    """Return (d_row, d_col) as seen by player.

    盤面は反転せずに保持しているので、後手の駒は両方の成分を反転する。
    """
    if player == Player.GOTE:
        return -direction.d_row, -direction.d_col
    return direction.d_row, direction.d_col
