"""Interactive two-player game: move input, turn order, game end and save files."""

from __future__ import annotations

import argparse
import enum
import sys
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import TextIO

from termchess.board import Board
from termchess.pieces import Color, piece_from_letter

SAVE_FILE = "save.txt"
MAX_HISTORY = 100
CLEAR_SCREEN = "\033[2J\033[1;1H"
PROMOTION_PROMPT = "Promote pawn to (q)ueen, (r)ook, (b)ishop, or (k)night: "

_FILES = "abcdefgh"
_RANKS = "12345678"


class MoveResult(enum.Enum):
    """Result of trying a move; the value is the message shown to the player."""

    OK = "Move played."
    INVALID_INPUT = "Invalid input format. Use format like e2 e4."
    NO_PIECE = "No piece at source square."
    WRONG_COLOR = "Not your turn."
    FRIENDLY_CAPTURE = "You can't capture your own piece."
    ILLEGAL_MOVE = "Illegal move for that piece."
    KING_IN_CHECK = "You're in check! You must make a move that gets you out of check."


class Outcome(enum.Enum):
    """How a game ended; the value is the message announcing it."""

    WHITE_WINS = "White wins by checkmate!"
    BLACK_WINS = "Black wins by checkmate!"
    STALEMATE = "Stalemate! It's a draw."
    THREEFOLD_REPETITION = "Draw by threefold repetition."
    INSUFFICIENT_MATERIAL = "Draw by insufficient material!"


@dataclass(frozen=True)
class _Snapshot:
    cells: str
    turn: Color


def parse_move(text: str) -> tuple[int, int, int, int]:
    """Parse "e2 e4" into (from_row, from_col, to_row, to_col).

    The third character is a free separator and anything after the fifth is
    ignored. Raises ValueError if either square is not on the board.
    """
    if (
        len(text) < 5
        or text[0] not in _FILES
        or text[1] not in _RANKS
        or text[3] not in _FILES
        or text[4] not in _RANKS
    ):
        raise ValueError(f"not a move: {text!r}")
    fc = _FILES.index(text[0])
    fr = 8 - int(text[1])
    tc = _FILES.index(text[3])
    tr = 8 - int(text[4])
    return fr, fc, tr, tc


class _Tokens:
    """Whitespace-separated tokens of a save file."""

    def __init__(self, text: str) -> None:
        self._it: Iterator[str] = iter(text.split())

    def next(self) -> str:
        try:
            return next(self._it)
        except StopIteration:
            raise ValueError("save file ends too early") from None

    def next_int(self) -> int:
        token = self.next()
        try:
            return int(token)
        except ValueError:
            raise ValueError(f"expected a number in save file, got {token!r}") from None


class Game:
    """A game between two players sharing one terminal."""

    def __init__(
        self,
        save_path: str | PathLike[str] = SAVE_FILE,
        promote: Callable[[], str] | None = None,
    ) -> None:
        self.board = Board()
        self.board.initialize()
        self.current_turn = Color.WHITE
        self.history: list[_Snapshot] = []
        self.save_path = Path(save_path)
        self.promote = promote
        self.record_board_state()

    def _cells(self) -> str:
        return "".join(
            "." if (piece := self.board[r, c]) is None else piece.letter()
            for r in range(8)
            for c in range(8)
        )

    def attempt_move(self, text: str) -> MoveResult:
        """Try the move in text for the side to move; on success pass the turn."""
        try:
            fr, fc, tr, tc = parse_move(text)
        except ValueError:
            return MoveResult.INVALID_INPUT

        selected = self.board[fr, fc]
        target = self.board[tr, tc]
        if selected is None:
            return MoveResult.NO_PIECE
        if selected.color is not self.current_turn:
            return MoveResult.WRONG_COLOR
        if target is not None and target.color is self.current_turn:
            return MoveResult.FRIENDLY_CAPTURE
        if not selected.is_move_valid(fr, fc, tr, tc, self.board):
            return MoveResult.ILLEGAL_MOVE
        if not self.board.move_piece(fr, fc, tr, tc, self.current_turn, self.promote):
            return MoveResult.KING_IN_CHECK

        self.record_board_state()
        self.current_turn = self.current_turn.opponent()
        return MoveResult.OK

    def outcome(self) -> Outcome | None:
        """How the game has ended for the side to move, or None if it goes on."""
        if self.is_threefold_repetition():
            return Outcome.THREEFOLD_REPETITION
        side = self.current_turn
        if not self.board.has_legal_moves(side):
            if self.board.is_in_check(side):
                return Outcome.WHITE_WINS if side is Color.BLACK else Outcome.BLACK_WINS
            return Outcome.STALEMATE
        if self.board.is_insufficient_material():
            return Outcome.INSUFFICIENT_MATERIAL
        return None

    def record_board_state(self) -> None:
        """Add the current position to the history, up to MAX_HISTORY entries."""
        if len(self.history) >= MAX_HISTORY:
            return
        self.history.append(_Snapshot(self._cells(), self.current_turn))

    def is_threefold_repetition(self) -> bool:
        """Whether the latest recorded position has occurred three times."""
        if not self.history:
            return False
        last = self.history[-1].cells
        return sum(snap.cells == last for snap in self.history) >= 3

    def save(self, path: str | PathLike[str] | None = None) -> None:
        """Write the game to path (the game's save file by default)."""
        target = self.save_path if path is None else Path(path)
        lines = [self.current_turn.name]
        ep_row, ep_col = self.board.en_passant or (-1, -1)
        lines.append(f"{ep_row} {ep_col}")
        for r in range(8):
            for c in range(8):
                piece = self.board[r, c]
                if piece is None:
                    lines.append(".")
                else:
                    lines.append(f"{piece.letter()} {int(piece.has_moved)}")
        lines.append(str(len(self.history)))
        for snap in self.history:
            lines.append("W" if snap.turn is Color.WHITE else "B")
            lines.append(snap.cells)
        target.write_text("\n".join(lines) + "\n", encoding="utf-8")

    def load(self, path: str | PathLike[str] | None = None) -> None:
        """Replace the game with the one saved at path.

        Raises OSError if the file cannot be read and ValueError if it is malformed.
        """
        source = self.save_path if path is None else Path(path)
        tokens = _Tokens(source.read_text(encoding="utf-8"))

        turn = Color.WHITE if tokens.next().startswith("W") else Color.BLACK
        ep_row = tokens.next_int()
        ep_col = tokens.next_int()

        board = Board()
        if ep_row >= 0 and ep_col >= 0:
            board.en_passant = (ep_row, ep_col)
        for r in range(8):
            for c in range(8):
                token = tokens.next()
                if token.startswith("."):
                    continue
                piece = piece_from_letter(token[0])
                piece.has_moved = tokens.next_int() == 1
                board[r, c] = piece

        count = tokens.next_int()
        if count < 0:
            raise ValueError(f"negative history length: {count}")
        history = []
        for _ in range(count):
            snap_turn = Color.WHITE if tokens.next().startswith("W") else Color.BLACK
            cells = tokens.next()
            if len(cells) != 64:
                raise ValueError(f"history entry must have 64 squares, got {len(cells)}")
            history.append(_Snapshot(cells, snap_turn))

        self.board = board
        self.current_turn = turn
        self.history = history

    def run(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> Outcome | None:
        """Play until the game ends or a player quits; return the outcome if any."""
        stdin = sys.stdin if stdin is None else stdin
        stdout = sys.stdout if stdout is None else stdout
        out = stdout.write

        def ask_promotion() -> str:
            out(PROMOTION_PROMPT)
            stdout.flush()
            return stdin.readline() or "q"

        own_promote = self.promote is None
        if own_promote:
            self.promote = ask_promotion
        try:
            return self._loop(stdin, stdout)
        finally:
            if own_promote:
                self.promote = None

    def _loop(self, stdin: TextIO, stdout: TextIO) -> Outcome | None:
        out = stdout.write
        out(self.board.render(self.current_turn))
        while True:
            out(f"{self.current_turn.name.title()} to move: ")
            stdout.flush()
            line = stdin.readline()
            if not line:
                break
            text = line.rstrip("\r\n")

            if text.startswith("q"):
                break
            if text == "s":
                try:
                    self.save()
                except OSError as exc:
                    out(f"Could not save game: {exc}\n")
                else:
                    out("Game saved.\n")
                continue
            if text == "l":
                try:
                    self.load()
                except (OSError, ValueError) as exc:
                    out(f"Could not load game: {exc}\n")
                else:
                    out(self.board.render(self.current_turn))
                    out("Game loaded.\n")
                continue

            result = self.attempt_move(text)
            if result is not MoveResult.OK:
                out(result.value + "\n")
                continue

            mover = self.current_turn.opponent()
            out(CLEAR_SCREEN)
            out(self.board.render(mover))
            out(self.board.render(self.current_turn))
            outcome = self.outcome()
            if outcome is not None:
                out(outcome.value + "\n")
                return outcome

        out("Game ended.\n")
        return None


def main(argv: list[str] | None = None) -> int:
    """Start a game on the terminal."""
    parser = argparse.ArgumentParser(
        prog="termchess",
        description=(
            "Two-player chess in the terminal. Enter moves like 'e2 e4'; "
            "'s' saves, 'l' loads, 'q' quits."
        ),
    )
    parser.parse_args(argv)
    Game().run()
    return 0


if __name__ == "__main__":
    sys.exit(main())