"""FastAPI web application for playing 本将棋.

FastAPI を使った本将棋の REST API。
人間同士、または人間（先手）対ランダムAI（後手）で対局できる。
盤面は SFEN と81マスの JSON、合法手は番号付きの一覧で返すので、
ブラウザの UI や外部の手選択プログラムから同じ形で扱える。

エンドポイント:
  POST /api/new-game   : 新規対局を開始（ゲームIDを返す）
  GET  /api/state/{id} : 現在の局面情報を取得
  POST /api/move       : 手を指す（番号または棋譜表記、AI 相手なら応手も返す）
  POST /api/undo       : 待った（1手戻す）
  POST /api/replay     : 棋譜の指定局面を再現
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Literal

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from shogi_engine.config import configure_logging
from shogi_engine.engine.random_player import random_move
from shogi_engine.game.display import format_board
from shogi_engine.game.notation import (
    board_to_json,
    board_to_sfen,
    format_history,
    format_move,
    legal_moves_payload,
    resolve_move,
)
from shogi_engine.game.state import ShogiGame
from shogi_engine.game.types import Square

logger = logging.getLogger(__name__)

app = FastAPI(title="Shogi Engine")

# 対局情報のインメモリストレージ（サーバ再起動で消える簡易実装）
_games: dict[str, dict[str, Any]] = {}


class NewGameRequest(BaseModel):
    """新規対局リクエストのスキーマ。"""

    gote_type: Literal["human", "random"] = "random"  # 後手: 人間 or ランダムAI


class MoveRequest(BaseModel):
    """指し手リクエストのスキーマ。"""

    game_id: str  # 対局ID（/api/new-game で取得）
    move: int | str  # 合法手一覧の番号（1始まり）または棋譜表記


class UndoRequest(BaseModel):
    game_id: str


class ReplayRequest(BaseModel):
    game_id: str
    index: int  # 棋譜のインデックス（-1 = 初期局面）


def _get_game(game_id: str) -> dict[str, Any]:
    game = _games.get(game_id)
    if game is None:
        raise HTTPException(404, "Game not found")
    return game


def _last_to(game: ShogiGame) -> Square | None:
    last = game.last_move
    return last.to_sq if last is not None else None


def _state_to_dict(game: ShogiGame) -> dict[str, Any]:
    """Convert game state to JSON-serializable dict.

    局面情報を JSON 形式（辞書）に変換する。
    合法手の id はそのまま /api/move の move に渡せる。
    """
    board = game.board
    winner = game.winner
    return {
        "current_player": game.current_player.name,  # 手番（"SENTE" / "GOTE"）
        "is_terminal": game.is_terminal,
        "winner": winner.name if winner is not None else None,  # None=対局中
        "in_check": game.is_in_check(),
        "sfen": board_to_sfen(board),
        "squares": board_to_json(board),  # 81マス、行優先
        "hands": {
            "SENTE": [pt.name for pt in board.hands[0]],
            "GOTE": [pt.name for pt in board.hands[1]],
        },
        "legal_moves": legal_moves_payload(game.legal_moves(), _last_to(game)),
        "history": format_history(game.history),
        "cursor": game.cursor,
        "board_display": format_board(board),  # テキスト形式の盤面表示
    }


@app.post("/api/new-game")
async def new_game(req: NewGameRequest) -> dict[str, Any]:
    """新規対局を開始する。

    対局IDと初期局面情報を返す。
    対局IDはその後の手番送信（/api/move）で使用する。
    """
    game_id = str(uuid.uuid4())[:8]  # 短いIDを生成
    game = ShogiGame()
    _games[game_id] = {"game": game, "gote_type": req.gote_type}
    logger.info("New game %s (gote=%s)", game_id, req.gote_type)
    return {"game_id": game_id, "state": _state_to_dict(game)}


@app.get("/api/state/{game_id}")
async def get_state(game_id: str) -> dict[str, Any]:
    """現在の局面情報を取得する（ページ再読み込み時などに使用）。"""
    return _state_to_dict(_get_game(game_id)["game"])


@app.post("/api/move")
async def make_move(req: MoveRequest) -> dict[str, Any]:
    """手を受け取り、AI 相手なら応手まで指して次の局面を返す。

    処理フロー:
    1. 番号または棋譜表記を合法手に解決して適用
    2. 後手がランダムAIで、対局が続いていれば AI が1手指す
    """
    entry = _get_game(req.game_id)
    game: ShogiGame = entry["game"]

    if game.is_terminal:
        raise HTTPException(400, "Game is already over")

    move = resolve_move(req.move, game.legal_moves(), _last_to(game))
    if move is None:
        raise HTTPException(400, f"Illegal move: {req.move}")

    player_move = format_move(move, _last_to(game))
    game.apply_move(move)

    ai_move = None
    if entry["gote_type"] == "random" and not game.is_terminal:
        reply = random_move(game)
        ai_move = format_move(reply, _last_to(game))
        game.apply_move(reply)

    return {
        "state": _state_to_dict(game),
        "player_move": player_move,
        "ai_move": ai_move,
    }


@app.post("/api/undo")
async def undo(req: UndoRequest) -> dict[str, Any]:
    """待った: 1手戻す。初期局面なら 400。"""
    game: ShogiGame = _get_game(req.game_id)["game"]
    if not game.undo():
        raise HTTPException(400, "Nothing to undo")
    return {"state": _state_to_dict(game)}


@app.post("/api/replay")
async def replay(req: ReplayRequest) -> dict[str, Any]:
    """棋譜の index 手目の局面を再現する。範囲外なら 400。"""
    game: ShogiGame = _get_game(req.game_id)["game"]
    if not game.replay(req.index):
        raise HTTPException(400, f"Replay index out of range: {req.index}")
    return {"state": _state_to_dict(game)}


def main() -> None:
    """Run the web server.

    `shogi-web` または `python -m shogi_engine.web.app` で起動する。
    """
    import uvicorn

    configure_logging()
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
