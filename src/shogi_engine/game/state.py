"""Game state machine for 本将棋 (Full Shogi).

本将棋の対局を管理するクラス。盤面・持ち駒・手番・棋譜を専有し、
公開メソッド（apply_move / undo / replay / reset）経由でのみ書き換える。

状態遷移:
  対局中(手番P) --apply_move--> 対局中(手番Pの相手)
  対局中(手番P) --apply_move--> 終局(勝者=直前に指した側)  ※次の手番に合法手がない
  終局は reset / undo / replay でのみ解除される。

将棋には「手詰まり＝引き分け」の概念がないので、合法手がなければ
王手の有無にかかわらず手番側の負けになる。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

import torch

from shogi_engine.config import DEFAULT_CONFIG, EngineConfig
from shogi_engine.game.board import Board, Piece
from shogi_engine.game.moves import Drop, Move
from shogi_engine.game.rules import (
    has_legal_move,
    is_in_check,
    is_legal_move,
    is_well_formed_move,
)
from shogi_engine.game.rules import legal_moves as _legal_moves
from shogi_engine.game.types import (
    COLS,
    HAND_PIECE_TYPES,
    ROWS,
    PieceType,
    Player,
)

logger = logging.getLogger(__name__)


class GameResult(Enum):
    """終局結果。"""

    SENTE_WIN = "sente_win"
    GOTE_WIN = "gote_win"

    @property
    def winner(self) -> Player:
        return Player.SENTE if self is GameResult.SENTE_WIN else Player.GOTE

    @staticmethod
    def win_for(player: Player) -> GameResult:
        return GameResult.SENTE_WIN if player == Player.SENTE else GameResult.GOTE_WIN


@dataclass(frozen=True)
class HistoryEntry:
    """棋譜の1手分。指した手と、指した「後」の盤面・持ち駒の完全なスナップショット。

    差分ではなく局面全体を持つので、replay() はスナップショットを
    差し替えるだけで済む（O(1)、巻き戻しの不整合が起きない）。
    board は記録後に書き換えない。取り出すときは必ず clone() する。
    """

    move: Move
    player: Player
    board: Board
    result: GameResult | None = None


class ShogiGame:
    """Owns the board, hands, turn and history of one game.

    指し手生成・王手判定（rules.py）には盤面を引数で渡すだけで、
    それらが本物の盤面を書き換えることはない。
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        board: Board | None = None,
        current_player: Player = Player.SENTE,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self._initial_board = board.clone() if board is not None else Board.initial()
        self._initial_player = current_player
        self._history: list[HistoryEntry] = []
        self._cursor = -1  # 現在の局面に対応する棋譜のインデックス（-1 = 初期局面）
        self._board = self._initial_board.clone()
        self._current_player = current_player
        self._initial_result = self._evaluate_result()
        self._result = self._initial_result

    @classmethod
    def from_position(
        cls,
        board: Board,
        current_player: Player = Player.SENTE,
        config: EngineConfig | None = None,
    ) -> ShogiGame:
        """任意の局面から対局を始める（詰将棋・テスト用）。"""
        return cls(config=config, board=board, current_player=current_player)

    # ------------------------------------------------------------------
    # 読み取り専用の問い合わせ
    # ------------------------------------------------------------------

    @property
    def board(self) -> Board:
        """現在の盤面と持ち駒のコピー（書き換えても対局には影響しない）。"""
        return self._board.clone()

    @property
    def current_player(self) -> Player:
        return self._current_player

    @property
    def result(self) -> GameResult | None:
        return self._result

    @property
    def winner(self) -> Player | None:
        """勝者を返す。対局中は None。"""
        return self._result.winner if self._result is not None else None

    @property
    def is_terminal(self) -> bool:
        return self._result is not None

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._history)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def last_move(self) -> Move | None:
        """現在の局面に至った直前の手（「同」表記の判定に使う）。"""
        if self._cursor < 0:
            return None
        return self._history[self._cursor].move

    def legal_moves(self, player: Player | None = None) -> list[Move]:
        """合法手のリストを返す。最も重い処理なので毎手1回に抑えること。"""
        if player is None:
            player = self._current_player
        return _legal_moves(self._board, player, self.config)

    def is_in_check(self, player: Player | None = None) -> bool:
        if player is None:
            player = self._current_player
        return is_in_check(self._board, player)

    def is_legal(self, move: Move) -> bool:
        """手番側の手として move が合法か。"""
        return is_legal_move(self._board, move, self._current_player, self.config)

    # ------------------------------------------------------------------
    # 状態の変更
    # ------------------------------------------------------------------

    def apply_move(self, move: Move) -> Piece | None:
        """Apply move for the side to move and return the captured piece.

        取った駒（盤上にあったときの姿のまま）を返す。取らなければ None。
        終局後の手や不正な手は何もせず None を返す（盤面は変わらない）。
        """
        if self._result is not None:
            logger.warning("Move %s ignored: game is already over (%s)", move, self._result.value)
            return None

        player = self._current_player
        if self.config.validate_moves:
            if not is_legal_move(self._board, move, player, self.config):
                logger.warning("Illegal move for %s rejected: %s", player.name, move)
                return None
        elif not is_well_formed_move(self._board, move, player):
            # 検証なしでも王手放置以外の規則（成り・二歩・打てないマス）は守る
            logger.warning("Malformed move for %s rejected: %s", player.name, move)
            return None

        captured: Piece | None = None
        if isinstance(move, Drop):
            self._board.drop_piece(move.to_sq, move.piece_type, player)
        else:
            captured = self._board.move_piece(move.from_sq, move.to_sq, move.promote)

        self._current_player = player.opponent
        if captured is not None and captured.piece_type == PieceType.KING:
            self._result = GameResult.win_for(player)
        else:
            self._result = self._evaluate_result()
        self._record(move, player)

        logger.debug("%s played %s (capture=%s)", player.name, move, captured)
        if self._result is not None:
            logger.info("Game over after %d moves: %s", self._cursor + 1, self._result.value)
        return captured

    def undo(self) -> bool:
        """一手戻る（待った）。初期局面なら何もせず False。

        終局していても結果をリセットして対局を再開できる状態に戻す。
        """
        if self._cursor < 0:
            return False
        self._install(self._cursor - 1)
        self._result = self._result_at(self._cursor)
        logger.debug("Undo: cursor=%d", self._cursor)
        return True

    def replay(self, index: int) -> bool:
        """棋譜の index 手目の局面を再現する（-1 = 初期局面）。

        棋譜そのものは変更しない。ここから新しい手を指すと、
        index より後の棋譜は切り捨てられる。範囲外なら何もせず False。
        """
        if index < -1 or index >= len(self._history):
            return False
        self._install(index)
        self._result = self._result_at(index)
        logger.debug("Replay: cursor=%d", self._cursor)
        return True

    def reset(self) -> None:
        """開始局面からやり直す（棋譜も消える）。"""
        self._history = []
        self._install(-1)
        self._result = self._initial_result

    def _install(self, index: int) -> None:
        if index == -1:
            self._board = self._initial_board.clone()
            self._current_player = self._initial_player
        else:
            entry = self._history[index]
            self._board = entry.board.clone()
            self._current_player = entry.player.opponent
        self._cursor = index

    def _result_at(self, index: int) -> GameResult | None:
        return self._history[index].result if index >= 0 else self._initial_result

    def _record(self, move: Move, player: Player) -> None:
        # 待ったの後に別の手を指したら、それ以降の棋譜は捨てる
        del self._history[self._cursor + 1:]
        self._history.append(
            HistoryEntry(move=move, player=player, board=self._board.clone(), result=self._result)
        )
        self._cursor = len(self._history) - 1

    def _evaluate_result(self) -> GameResult | None:
        # 王将がいない場合（正常な合法手フィルタなら起きない）
        for player in Player:
            if self._board.find_king(player) is None:
                return GameResult.win_for(player.opponent)
        # 合法手なし = 詰み（または手詰まり）→ 手番側の負け
        if not has_legal_move(self._board, self._current_player, self.config):
            return GameResult.win_for(self._current_player.opponent)
        return None

    def to_tensor_planes(self) -> torch.Tensor:
        """Convert to tensor planes for an automated move-chooser.

        局面をテンソルに変換する（43チャンネル、手番側から見た表現）。

        Planes（チャンネル）の構成:
        ch.0-13:  手番側の駒（14駒種）
        ch.14-27: 相手の駒（14駒種）
        ch.28-34: 手番側の持ち駒数（7種）
        ch.35-41: 相手の持ち駒数（7種）
        ch.42:    手番インジケータ（先手番なら全1）
        """
        planes = torch.zeros(43, ROWS, COLS)
        cp = self._current_player

        for idx, piece in enumerate(self._board.squares):
            if piece is None:
                continue
            r, c = idx // COLS, idx % COLS
            if piece.owner == cp:
                planes[piece.piece_type.value, r, c] = 1.0
            else:
                planes[14 + piece.piece_type.value, r, c] = 1.0

        own_hand = self._board.hand(cp)
        opp_hand = self._board.hand(cp.opponent)
        for i, pt in enumerate(HAND_PIECE_TYPES):
            if own_hand.count(pt) > 0:
                planes[28 + i, :, :] = float(own_hand.count(pt))
            if opp_hand.count(pt) > 0:
                planes[35 + i, :, :] = float(opp_hand.count(pt))

        if cp == Player.SENTE:
            planes[42, :, :] = 1.0

        return planes
