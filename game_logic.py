#!/usr/bin/env python3
"""
game_logic.py

Tic-Tac-Toe game state with move history and time travel.

Contents:
- Board: immutable 9-cell snapshot and utilities.
- calculate_winner / calculate_turns / calculate_status: derived state of a snapshot.
- GameState + initial_state / play / jump_to / reset / click: pure history reducer.
- TicTacToeGame: controller owning one GameState, consumed by the web layer.

Run this file to try a two-player game on the command line.
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

X = "X"
O = "O"
EMPTY = ""
MARKS = (X, O)

# rows, columns, diagonals; scanned in this order
WIN_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)


# -------------------------
# Board: one snapshot
# -------------------------
class Board:
    def __init__(self, cells: Optional[Iterable[str]] = None):
        # Use 'X', 'O', or '' for empty
        cells = tuple(cells) if cells is not None else (EMPTY,) * 9
        if len(cells) != 9:
            raise ValueError(f"board must have 9 cells, got {len(cells)}")
        for v in cells:
            if v not in (X, O, EMPTY):
                raise ValueError(f"invalid cell value: {v!r}")
        self.cells: Tuple[str, ...] = cells

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, index: int) -> str:
        return self.cells[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self.cells)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.cells == other.cells

    def __hash__(self) -> int:
        return hash(self.cells)

    def __repr__(self) -> str:
        return f"Board({list(self.cells)!r})"

    def available_moves(self) -> List[int]:
        return [i for i, v in enumerate(self.cells) if v == EMPTY]

    def is_full(self) -> bool:
        return EMPTY not in self.cells

    def place(self, index: int, player: str) -> "Board":
        """Return a new board with player's mark at index. This board is left untouched."""
        if player not in MARKS:
            raise ValueError(f"player must be 'X' or 'O', got {player!r}")
        cells = list(self.cells)
        cells[index] = player
        return Board(cells)

    def __str__(self) -> str:
        def cell(i):
            v = self.cells[i]
            return v if v != EMPTY else str(i+1)
        rows = [
            f" {cell(0)} | {cell(1)} | {cell(2)} ",
            "---+---+---",
            f" {cell(3)} | {cell(4)} | {cell(5)} ",
            "---+---+---",
            f" {cell(6)} | {cell(7)} | {cell(8)} ",
        ]
        return "\n".join(rows)

    def to_list(self) -> List[str]:
        return list(self.cells)


EMPTY_BOARD = Board()


# -------------------------
# Derived state of a snapshot
# -------------------------
def calculate_winner(board: Board) -> Optional[str]:
    """Return the mark on the first complete line in WIN_LINES, or None."""
    for a, b, c in WIN_LINES:
        if board[a] != EMPTY and board[a] == board[b] == board[c]:
            return board[a]
    return None


def calculate_turns(board: Board) -> int:
    return len(board.available_moves())


def calculate_status(winner: Optional[str], turns: int, player: str) -> str:
    # a full board with a winner still reports the winner
    if not winner and not turns:
        return "Draw"
    if winner:
        return f"Winner is {winner}"
    return f"Next player: {player}"


def apply_move(board: Board, index: int, player: str) -> Optional[Board]:
    """Place player at index. Returns None (no-op) if the cell is taken or the game is won."""
    if board[index] != EMPTY or calculate_winner(board) is not None:
        return None
    return board.place(index, player)


def describe_move(move: int) -> str:
    return f"Go to move #{move}" if move > 0 else "Go to game start"


# -------------------------
# GameState: history reducer
# -------------------------
@dataclass(frozen=True)
class GameState:
    history: Tuple[Board, ...]
    current_move: int = 0

    def __post_init__(self):
        # history is sliced and concatenated as a tuple by play()
        object.__setattr__(self, "history", tuple(self.history))

    @property
    def current_board(self) -> Board:
        return self.history[self.current_move]

    @property
    def x_is_next(self) -> bool:
        return self.current_move % 2 == 0

    @property
    def current_player(self) -> str:
        return X if self.x_is_next else O

    @property
    def winner(self) -> Optional[str]:
        return calculate_winner(self.current_board)

    @property
    def turns(self) -> int:
        return calculate_turns(self.current_board)

    @property
    def status(self) -> str:
        return calculate_status(self.winner, self.turns, self.current_player)

    @property
    def is_over(self) -> bool:
        return self.winner is not None or self.current_board.is_full()

    @property
    def moves(self) -> List[Tuple[int, str]]:
        """(index, description) for each history entry, oldest first."""
        return [(i, describe_move(i)) for i in range(len(self.history))]


def initial_state() -> GameState:
    return GameState(history=(EMPTY_BOARD,), current_move=0)


def play(state: GameState, next_board: Board) -> GameState:
    """Append next_board after the cursor, dropping any snapshots beyond it."""
    history = state.history[:state.current_move + 1] + (next_board,)
    dropped = len(state.history) - state.current_move - 1
    if dropped:
        logger.debug("discarding %d future snapshot(s) after move %d", dropped, state.current_move)
    return GameState(history=history, current_move=len(history) - 1)


def jump_to(state: GameState, move: int) -> GameState:
    if not 0 <= move < len(state.history):
        raise IndexError(f"move {move} outside history of length {len(state.history)}")
    return GameState(history=state.history, current_move=move)


def reset(state: GameState) -> GameState:
    return initial_state()


def click(state: GameState, index: int) -> GameState:
    """Handle a click on cell index. Returns state itself when the click is ignored."""
    next_board = apply_move(state.current_board, index, state.current_player)
    if next_board is None:
        logger.debug("ignored click on cell %d at move %d", index, state.current_move)
        return state
    return play(state, next_board)


def _check_step(prev: Board, board: Board, move: int) -> None:
    """Raise ValueError unless board is prev plus one legal move by the player due at move."""
    changed = [i for i in range(9) if prev[i] != board[i]]
    player = X if move % 2 else O
    if len(changed) != 1 or apply_move(prev, changed[0], player) != board:
        raise ValueError(f"history entry {move} is not a legal move by {player}")


# -------------------------
# TicTacToeGame: controller
# -------------------------
class TicTacToeGame:
    def __init__(self, state: Optional[GameState] = None):
        self.state = state if state is not None else initial_state()

    def handle_click(self, index: int) -> bool:
        """Attempt a move for the current player at index. Returns True if a move was played."""
        if not 0 <= index < 9:
            raise IndexError(f"cell index must be 0-8, got {index}")
        next_state = click(self.state, index)
        if next_state is self.state:
            return False
        self.state = next_state
        logger.debug("move %d:\n%s", self.state.current_move, self.state.current_board)
        return True

    def jump_to(self, move: int) -> None:
        self.state = jump_to(self.state, move)

    def reset(self) -> None:
        self.state = reset(self.state)

    @property
    def history(self) -> Tuple[Board, ...]:
        return self.state.history

    @property
    def current_move(self) -> int:
        return self.state.current_move

    @property
    def board(self) -> Board:
        return self.state.current_board

    @property
    def x_is_next(self) -> bool:
        return self.state.x_is_next

    @property
    def current_player(self) -> str:
        return self.state.current_player

    @property
    def winner(self) -> Optional[str]:
        return self.state.winner

    @property
    def turns(self) -> int:
        return self.state.turns

    @property
    def status(self) -> str:
        return self.state.status

    def is_over(self) -> bool:
        return self.state.is_over

    def moves(self) -> List[Tuple[int, str]]:
        return self.state.moves

    def serialize(self) -> str:
        """Return JSON string capturing the history and cursor."""
        return json.dumps({
            "history": [b.to_list() for b in self.state.history],
            "current_move": self.state.current_move,
        })

    @classmethod
    def deserialize(cls, s: str) -> "TicTacToeGame":
        data = json.loads(s)
        if not isinstance(data, dict):
            raise ValueError("game JSON must be an object")
        raw_history = data.get("history")
        if not isinstance(raw_history, list) or not all(isinstance(c, list) for c in raw_history):
            raise ValueError("history must be a list of boards")
        history = tuple(Board(cells) for cells in raw_history)
        if not history or history[0] != EMPTY_BOARD:
            raise ValueError("history must start with the empty board")
        for move in range(1, len(history)):
            _check_step(history[move - 1], history[move], move)
        current_move = data.get("current_move", len(history) - 1)
        if isinstance(current_move, bool):
            current_move = None
        if not isinstance(current_move, int) or not 0 <= current_move < len(history):
            raise ValueError(f"current_move out of range: {current_move!r}")
        return cls(GameState(history=history, current_move=current_move))


# -------------------------
# Simple CLI demo / usage
# -------------------------
def two_player_cli():
    print("Tic-Tac-Toe CLI: enter 1-9 to play, 'j N' to jump to move N, 'r' to reset, 'q' to quit.")
    game = TicTacToeGame()

    while True:
        print(game.board)
        print(game.status)
        raw = input("> ").strip().lower()
        if raw == "q":
            break
        if raw == "r":
            game.reset()
            continue
        try:
            if raw.startswith("j"):
                game.jump_to(int(raw[1:]))
                continue
            idx = int(raw) - 1
            if idx not in range(9):
                print("Choose 1-9")
                continue
            if not game.handle_click(idx):
                print("Ignored (occupied or game over).")
        except (ValueError, IndexError):
            print("Invalid input.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    try:
        two_player_cli()
    except KeyboardInterrupt:
        print("\nExiting demo.")
