"""The 8x8 board: piece placement, move execution and position checks."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from termchess.pieces import (
    Bishop,
    ChessPiece,
    Color,
    King,
    Knight,
    Pawn,
    PieceType,
    Queen,
    Rook,
)

_BACK_RANK = (Rook, Knight, Bishop, Queen, King, Bishop, Knight, Rook)
_PROMOTIONS: dict[str, type[ChessPiece]] = {
    "q": Queen,
    "r": Rook,
    "b": Bishop,
    "k": Knight,
}


class Board:
    """Squares indexed by (row, col); row 0 is rank 8, col 0 is file a."""

    def __init__(self) -> None:
        self._squares: list[list[ChessPiece | None]] = [[None] * 8 for _ in range(8)]
        self.en_passant: tuple[int, int] | None = None

    @staticmethod
    def _check(row: int, col: int) -> None:
        if not (0 <= row < 8 and 0 <= col < 8):
            raise IndexError(f"square out of range: ({row}, {col})")

    def __getitem__(self, square: tuple[int, int]) -> ChessPiece | None:
        row, col = square
        self._check(row, col)
        return self._squares[row][col]

    def __setitem__(self, square: tuple[int, int], piece: ChessPiece | None) -> None:
        row, col = square
        self._check(row, col)
        self._squares[row][col] = piece

    def _occupied(self) -> Iterator[tuple[int, int, ChessPiece]]:
        for r, row in enumerate(self._squares):
            for c, piece in enumerate(row):
                if piece is not None:
                    yield r, c, piece

    def initialize(self) -> None:
        """Set up the standard starting position."""
        self._squares = [[None] * 8 for _ in range(8)]
        for c, cls in enumerate(_BACK_RANK):
            self._squares[0][c] = cls(Color.BLACK)
            self._squares[1][c] = Pawn(Color.BLACK)
            self._squares[6][c] = Pawn(Color.WHITE)
            self._squares[7][c] = cls(Color.WHITE)
        self.en_passant = None

    def render(self, turn: Color) -> str:
        """Draw the board from the point of view of the side to move."""
        flip = turn is Color.BLACK
        order = range(7, -1, -1) if flip else range(8)
        lines = [""]
        for row in order:
            cells = "".join(
                f"{p.symbol() if p is not None else '.'} "
                for p in (self._squares[row][col] for col in order)
            )
            lines.append(f"{8 - row}   {cells} ")
        files = "".join(f"{'abcdefgh'[col]} " for col in order)
        return "\n".join(lines) + "\n\n    " + files + "\n\n"

    def is_path_clear(self, fr: int, fc: int, tr: int, tc: int) -> bool:
        """Whether every square strictly between the two squares is empty."""
        dr = (tr > fr) - (tr < fr)
        dc = (tc > fc) - (tc < fc)
        r, c = fr + dr, fc + dc
        while (r, c) != (tr, tc):
            if self._squares[r][c] is not None:
                return False
            r += dr
            c += dc
        return True

    def is_square_attacked(self, row: int, col: int, by_color: Color) -> bool:
        """Whether any piece of by_color could move to the square."""
        return any(
            piece.is_move_valid(r, c, row, col, self)
            for r, c, piece in list(self._occupied())
            if piece.color is by_color
        )

    def is_in_check(self, color: Color) -> bool:
        """Whether the king of color is attacked; False if it has no king."""
        king_square = None
        for r, c, piece in self._occupied():
            if piece.kind is PieceType.KING and piece.color is color:
                king_square = (r, c)
        if king_square is None:
            return False
        return self.is_square_attacked(*king_square, color.opponent())

    def has_legal_moves(self, color: Color) -> bool:
        """Whether color has any move that does not leave its king in check."""
        for r, c, piece in list(self._occupied()):
            if piece.color is not color:
                continue
            for tr in range(8):
                for tc in range(8):
                    dest = self._squares[tr][tc]
                    if (r, c) == (tr, tc) or (dest is not None and dest.color is color):
                        continue
                    if not piece.is_move_valid(r, c, tr, tc, self):
                        continue
                    self._squares[tr][tc] = piece
                    self._squares[r][c] = None
                    in_check = self.is_in_check(color)
                    self._squares[r][c] = piece
                    self._squares[tr][tc] = dest
                    if not in_check:
                        return True
        return False

    def move_piece(
        self,
        fr: int,
        fc: int,
        tr: int,
        tc: int,
        color: Color,
        promote: Callable[[], str] | None = None,
    ) -> bool:
        """Play a move for color; return False and leave the pieces if it is illegal.

        promote is asked for a letter (q, r, b or k) until it gives a valid one
        when a pawn reaches the last rank; without it the pawn becomes a queen.
        """
        piece = self[fr, fc]
        if piece is None or piece.color is not color:
            return False
        if not piece.is_move_valid(fr, fc, tr, tc, self):
            return False

        if piece.kind is PieceType.PAWN and (tr, tc) == self.en_passant:
            capture_row = tr + 1 if color is Color.WHITE else tr - 1
            self._squares[capture_row][tc] = None

        captured = self[tr, tc]
        self._squares[tr][tc] = piece
        self._squares[fr][fc] = None

        if piece.kind is PieceType.KING and abs(tc - fc) == 2:
            rook_from = 7 if tc > fc else 0
            rook_to = tc - 1 if tc > fc else tc + 1
            rook = self._squares[tr][rook_from]
            self._squares[tr][rook_to] = rook
            self._squares[tr][rook_from] = None
            rook.has_moved = True

        self.en_passant = None
        if piece.kind is PieceType.PAWN and abs(tr - fr) == 2:
            self.en_passant = ((fr + tr) // 2, fc)

        if self.is_in_check(color):
            self._squares[fr][fc] = piece
            self._squares[tr][tc] = captured
            return False

        piece.has_moved = True

        last_row = 0 if color is Color.WHITE else 7
        if piece.kind is PieceType.PAWN and tr == last_row:
            choice = "q" if promote is None else ""
            while choice not in _PROMOTIONS:
                choice = promote().strip()[:1].lower()
            self._squares[tr][tc] = _PROMOTIONS[choice](color)

        return True

    def is_insufficient_material(self) -> bool:
        """Whether neither side has enough material left to mate."""
        others = []
        for r, c, piece in self._occupied():
            if piece.kind is PieceType.KING:
                continue
            if piece.kind in (PieceType.ROOK, PieceType.QUEEN, PieceType.PAWN):
                return False
            others.append((r, c, piece))

        if not others:
            return True
        if len(others) == 1:
            return others[0][2].kind in (PieceType.BISHOP, PieceType.KNIGHT)
        if len(others) == 2:
            (r1, c1, p1), (r2, c2, p2) = others
            if (
                p1.kind is PieceType.BISHOP
                and p2.kind is PieceType.BISHOP
                and p1.color is not p2.color
            ):
                return (r1 + c1) % 2 == (r2 + c2) % 2
        return False