"""FastAPI-powered web UI for playing tic-tac-toe against the computer."""

from __future__ import annotations

import logging
import random
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import threading

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from .ai import MoveSelector
from .game import Mark, Outcome, TicTacToeGame
from .score import ScoreTracker

logger = logging.getLogger(__name__)


HUMAN: Mark = Mark.X
COMPUTER: Mark = Mark.O
AI_THINK_DELAY: Tuple[float, float] = (0.3, 0.6)


@dataclass
class GameSession:
    """One player's game, their computer opponent and their running score."""

    game: TicTacToeGame = field(default_factory=TicTacToeGame)
    ai: MoveSelector = field(default_factory=MoveSelector)
    score: ScoreTracker = field(
        default_factory=lambda: ScoreTracker(human=HUMAN, computer=COMPUTER)
    )
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    ai_pending: bool = False
    # Bumped on every new game so a queued AI turn for the old one is dropped.
    generation: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="Tic Tac Toe", description="Tic-tac-toe against a beatable AI")


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    row: int = Field(ge=0, le=2)
    col: int = Field(ge=0, le=2)


def _create_session() -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    session = GameSession()
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created game session %s", session_id)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _play(session: GameSession, row: int, col: int) -> bool:
    """Apply a move and bump the score when it ends the game.

    Must be called with the session lock held.
    """
    game = session.game
    player = game.current_player
    before: Outcome = game.winner
    if not game.make_move(row, col):
        return False

    session.move_log.append({"player": player.value, "row": row, "col": col})
    after: Outcome = game.winner
    if before is None and after is not None:
        session.score.record_result(after)
        logger.info("Game finished: %s", getattr(after, "value", after))
    return True


def _run_ai_turn(game_id: str, generation: int) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, random.uniform(*AI_THINK_DELAY)))

    with session.lock:
        if session.generation != generation:
            return
        try:
            game = session.game
            if game.is_game_over() or game.current_player != COMPUTER:
                return
            row, col = session.ai.calculate_move(game)
            _play(session, row, col)
        finally:
            session.ai_pending = False


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        game = session.game
        winner = game.winner
        winning_cells = game.winning_cells
        stats = session.score.get_stats()

        state: Dict[str, object] = {
            "id": game_id,
            "board": [
                [cell.value if cell is not None else "" for cell in row]
                for row in game.get_board()
            ],
            "currentPlayer": game.current_player.value,
            "winner": getattr(winner, "value", winner),
            "winningCells": (
                [list(coord) for coord in winning_cells] if winning_cells else None
            ),
            "gameOver": game.is_game_over(),
            "availableMoves": [list(move) for move in game.available_moves()],
            "moveLog": list(session.move_log),
            "aiPending": session.ai_pending,
            "humanPlayer": HUMAN.value,
            "computerPlayer": COMPUTER.value,
            "score": {
                "humanWins": stats.human_wins,
                "computerWins": stats.computer_wins,
                "draws": stats.draws,
            },
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _apply_player_move(
    game_id: str,
    session: GameSession,
    row: int,
    col: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    should_schedule_ai = False
    with session.lock:
        game = session.game
        if game.is_game_over():
            raise HTTPException(status_code=400, detail="Game already finished")

        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")

        if game.current_player != HUMAN:
            raise HTTPException(status_code=400, detail="It is not your turn")

        if not _play(session, row, col):
            logger.debug("Rejected move (%d, %d) in game %s", row, col, game_id)
            raise HTTPException(
                status_code=400, detail="Move is not allowed on this turn"
            )

        should_schedule_ai = not game.is_game_over()
        if should_schedule_ai:
            session.ai_pending = True
        generation = session.generation

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id, generation)


@app.post("/api/game")
def create_game() -> Dict[str, object]:
    game_id, session = _create_session()
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(game_id, session, request.row, request.col, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/new")
def new_game(game_id: str) -> Dict[str, object]:
    """Start the next game in the same session; the score carries over."""
    session = _get_session(game_id)
    with session.lock:
        session.game.reset()
        session.move_log.clear()
        session.ai_pending = False
        session.generation += 1
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/score/reset")
def reset_score(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.score.reset()
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic Tac Toe</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
      }
      * {
        box-sizing: border-box;
      }
      body {
        margin: 0;
        background: radial-gradient(circle at top, #f2f5ff, #dbe0ff 40%, #cfd8ff 70%);
        min-height: 100vh;
        display: flex;
        justify-content: center;
        padding: 2rem 1rem 3rem;
        color: #13203a;
      }
      main {
        background: rgba(255, 255, 255, 0.92);
        border-radius: 18px;
        box-shadow: 0 20px 40px rgba(34, 47, 79, 0.16);
        padding: clamp(1.5rem, 4vw, 2.5rem);
        width: min(460px, 100%);
        text-align: center;
      }
      h1 {
        margin: 0 0 1rem;
        letter-spacing: 0.06em;
      }
      .scoreboard {
        display: flex;
        justify-content: space-around;
        margin-bottom: 1.25rem;
      }
      .score {
        display: flex;
        flex-direction: column;
        gap: 0.2rem;
      }
      .score .label {
        font-size: 0.8rem;
        letter-spacing: 0.12em;
        color: rgba(19, 32, 58, 0.65);
      }
      .score .value {
        font-size: 1.6rem;
        font-weight: 600;
      }
      .board {
        display: grid;
        grid-template-columns: repeat(3, 1fr);
        gap: 8px;
        margin: 0 auto 1rem;
        width: min(320px, 100%);
      }
      .board.thinking {
        opacity: 0.75;
      }
      .cell {
        aspect-ratio: 1;
        font-size: 2.4rem;
        font-weight: 700;
        border: none;
        border-radius: 12px;
        background: #eef1ff;
        cursor: pointer;
      }
      .cell.x {
        color: #2f6fed;
      }
      .cell.o {
        color: #e8505b;
      }
      .cell.winning {
        background: #ffe28a;
      }
      .cell:disabled {
        cursor: default;
      }
      #status {
        min-height: 1.5rem;
        font-weight: 500;
      }
      #message {
        min-height: 1.2rem;
        color: #c0392b;
      }
      .actions button {
        margin: 0.5rem 0.25rem 0;
        padding: 0.55rem 1.1rem;
        border-radius: 999px;
        border: none;
        background: #13203a;
        color: white;
        cursor: pointer;
      }
    </style>
  </head>
  <body>
    <main>
      <h1>Tic Tac Toe</h1>
      <div class=\"scoreboard\">
        <div class=\"score\"><span class=\"label\">PLAYER</span><span class=\"value\" id=\"human-wins\">0</span></div>
        <div class=\"score\"><span class=\"label\">DRAWS</span><span class=\"value\" id=\"draws\">0</span></div>
        <div class=\"score\"><span class=\"label\">AI</span><span class=\"value\" id=\"computer-wins\">0</span></div>
      </div>
      <div class=\"board\" id=\"board\"></div>
      <p id=\"status\"></p>
      <p id=\"message\"></p>
      <div class=\"actions\">
        <button id=\"new-game\">New Game</button>
        <button id=\"reset-score\">Reset Score</button>
      </div>
    </main>
    <script>
      const boardEl = document.getElementById('board');
      const statusEl = document.getElementById('status');
      const messageEl = document.getElementById('message');
      const humanWinsEl = document.getElementById('human-wins');
      const computerWinsEl = document.getElementById('computer-wins');
      const drawsEl = document.getElementById('draws');
      let gameId = null;
      let gameState = null;
      let isRequestPending = false;
      let aiPollHandle = null;

      function stopAiPolling() {
        if (aiPollHandle !== null) {
          clearTimeout(aiPollHandle);
          aiPollHandle = null;
        }
      }

      function ensureAiPolling() {
        if (aiPollHandle !== null) return;
        aiPollHandle = window.setTimeout(pollAiState, 250);
      }

      async function request(url, options = {}) {
        const response = await fetch(url, options);
        const payload = await response.json().catch(() => ({}));
        if (!response.ok) {
          throw new Error(payload?.detail || 'Request failed');
        }
        return payload;
      }

      async function startSession() {
        try {
          setState(await request('/api/game', { method: 'POST' }));
        } catch (error) {
          messageEl.textContent = error.message || 'Network error. Please try again.';
        }
      }

      async function pollAiState() {
        aiPollHandle = null;
        if (!gameId) return;
        try {
          setState(await request(`/api/game/${gameId}`));
        } catch (error) {
          console.error('Polling failed', error);
          ensureAiPolling();
        }
      }

      async function sendMove(row, col) {
        if (!gameState || gameState.gameOver || gameState.aiPending || isRequestPending) {
          return;
        }
        isRequestPending = true;
        messageEl.textContent = '';
        try {
          setState(
            await request(`/api/game/${gameId}/move`, {
              method: 'POST',
              headers: { 'Content-Type': 'application/json' },
              body: JSON.stringify({ row, col }),
            })
          );
        } catch (error) {
          messageEl.textContent = error.message;
        } finally {
          isRequestPending = false;
        }
      }

      async function postAction(path) {
        if (!gameId) return;
        stopAiPolling();
        messageEl.textContent = '';
        try {
          setState(await request(`/api/game/${gameId}/${path}`, { method: 'POST' }));
        } catch (error) {
          messageEl.textContent = error.message;
        }
      }

      function setState(data) {
        gameId = data.id;
        gameState = data;
        renderBoard();
        updateStatus();
        if (gameState.aiPending && !gameState.gameOver) {
          ensureAiPolling();
        } else {
          stopAiPolling();
        }
      }

      function isWinning(row, col) {
        return (gameState.winningCells || []).some(([r, c]) => r === row && c === col);
      }

      function renderBoard() {
        boardEl.innerHTML = '';
        boardEl.classList.toggle('thinking', Boolean(gameState?.aiPending));
        for (let row = 0; row < 3; row += 1) {
          for (let col = 0; col < 3; col += 1) {
            const value = gameState ? gameState.board[row][col] : '';
            const cell = document.createElement('button');
            cell.className = 'cell';
            cell.textContent = value;
            cell.setAttribute('aria-label', value || 'empty cell');
            if (value) cell.classList.add(value.toLowerCase());
            if (gameState && isWinning(row, col)) cell.classList.add('winning');
            cell.disabled = Boolean(value) || !gameState || gameState.gameOver;
            cell.addEventListener('click', () => sendMove(row, col));
            boardEl.appendChild(cell);
          }
        }
      }

      function updateStatus() {
        humanWinsEl.textContent = gameState.score.humanWins;
        computerWinsEl.textContent = gameState.score.computerWins;
        drawsEl.textContent = gameState.score.draws;
        if (gameState.winner === 'Draw') {
          statusEl.textContent = "It's a draw!";
        } else if (gameState.winner) {
          statusEl.textContent = gameState.winner === gameState.humanPlayer ? 'You win!' : 'AI wins!';
        } else if (gameState.aiPending) {
          statusEl.textContent = 'AI is thinking…';
        } else {
          statusEl.textContent = `Current player: ${gameState.currentPlayer}`;
        }
      }

      document.getElementById('new-game').addEventListener('click', () => postAction('new'));
      document.getElementById('reset-score').addEventListener('click', () => postAction('score/reset'));
      renderBoard();
      startSession();
    </script>
  </body>
</html>
"""
