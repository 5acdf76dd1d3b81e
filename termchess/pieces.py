"""Chess pieces and the rules for how each of them moves."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from termchess.board import Board


class Color(enum.Enum):
    """Side a piece belongs to."""

    WHITE = "white"
    BLACK = "black"

    def opponent(self) -> Color:
        """Return the other side."""
        return Color.BLACK if self is Color.WHITE else Color.WHITE


class PieceType(enum.Enum):
    """Kind of piece; the value is its upper-case letter."""

    PAWN = "P"
    ROOK = "R"
    KNIGHT = "N"
    BISHOP = "B"
    QUEEN = "Q"
    KING = "K"


class ChessPiece(ABC):
    """A piece of one colour that knows how it may move."""

    kind: ClassVar[PieceType]
    _symbols: ClassVar[tuple[str, str]]

    def __init__(self, color: Color, has_moved: bool = False) -> None:
        self.color = color
        self.has_moved = has_moved

    def symbol(self) -> str:
        """Unicode glyph used to draw the piece."""
        white, black = self._symbols
        return white if self.color is Color.WHITE else black

    def letter(self) -> str:
        """Letter for the piece: upper case for white, lower case for black."""
        letter = self.kind.value
        return letter if self.color is Color.WHITE else letter.lower()

    def _is_friendly(self, board: Board, row: int, col: int) -> bool:
        dest = board[row, col]
        return dest is not None and dest.color is self.color

    @abstractmethod
    def is_move_valid(self, fr: int, fc: int, tr: int, tc: int, board: Board) -> bool:
        """Whether the piece may move from (fr, fc) to (tr, tc) on the board."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.color.name}, has_moved={self.has_moved})"


class Pawn(ChessPiece):
    kind = PieceType.PAWN
    _symbols = ("♙", "♟")

    def is_move_valid(self, fr, fc, tr, tc, board):
        direction = -1 if self.color is Color.WHITE else 1
        start_row = 6 if self.color is Color.WHITE else 1

        if fc == tc:
            if tr == fr + direction and board[tr, tc] is None:
                return True
            return (
                fr == start_row
                and tr == fr + 2 * direction
                and board[fr + direction, fc] is None
                and board[tr, tc] is None
            )
        if abs(fc - tc) == 1 and tr == fr + direction:
            target = board[tr, tc]
            if target is not None and target.color is not self.color:
                return True
            return (tr, tc) == board.en_passant
        return False


class Rook(ChessPiece):
    kind = PieceType.ROOK
    _symbols = ("♖", "♜")

    def is_move_valid(self, fr, fc, tr, tc, board):
        if fr != tr and fc != tc:
            return False
        if not board.is_path_clear(fr, fc, tr, tc):
            return False
        return not self._is_friendly(board, tr, tc)


class Knight(ChessPiece):
    kind = PieceType.KNIGHT
    _symbols = ("♘", "♞")

    def is_move_valid(self, fr, fc, tr, tc, board):
        if sorted((abs(tr - fr), abs(tc - fc))) != [1, 2]:
            return False
        return not self._is_friendly(board, tr, tc)


class Bishop(ChessPiece):
    kind = PieceType.BISHOP
    _symbols = ("♗", "♝")

    def is_move_valid(self, fr, fc, tr, tc, board):
        if abs(fr - tr) != abs(fc - tc):
            return False
        if not board.is_path_clear(fr, fc, tr, tc):
            return False
        return not self._is_friendly(board, tr, tc)


class Queen(ChessPiece):
    kind = PieceType.QUEEN
    _symbols = ("♕", "♛")

    def is_move_valid(self, fr, fc, tr, tc, board):
        if not (fr == tr or fc == tc or abs(fr - tr) == abs(fc - tc)):
            return False
        if not board.is_path_clear(fr, fc, tr, tc):
            return False
        return not self._is_friendly(board, tr, tc)


class King(ChessPiece):
    kind = PieceType.KING
    _symbols = ("♔", "♚")

    def is_move_valid(self, fr, fc, tr, tc, board):
        dr = tr - fr
        dc = tc - fc
        if abs(dr) <= 1 and abs(dc) <= 1:
            return not self._is_friendly(board, tr, tc)
        if self.has_moved or dr != 0 or abs(dc) != 2:
            return False

        rook_col = 7 if dc == 2 else 0
        rook = board[fr, rook_col]
        if (
            rook is None
            or rook.kind is not PieceType.ROOK
            or rook.color is not self.color
            or rook.has_moved
        ):
            return False

        step = 1 if dc > 0 else -1
        if any(board[fr, c] is not None for c in range(fc + step, rook_col, step)):
            return False

        enemy = self.color.opponent()
        return not any(
            board.is_square_attacked(fr, c, enemy) for c in range(fc, tc + step, step)
        )


_BY_LETTER: dict[str, type[ChessPiece]] = {
    cls.kind.value: cls for cls in (Pawn, Rook, Knight, Bishop, Queen, King)
}


def piece_from_letter(letter: str) -> ChessPiece:
    """Build an unmoved piece from its letter; lower case means black."""
    if len(letter) != 1 or letter.upper() not in _BY_LETTER:
        raise ValueError(f"unknown piece letter: {letter!r}")
    color = Color.WHITE if letter.isupper() else Color.BLACK
    return _BY_LETTER[letter.upper()](color)