import pytest

from termchess.board import Board
from termchess.pieces import (
    Bishop,
    Color,
    King,
    Knight,
    Pawn,
    PieceType,
    Queen,
    Rook,
    piece_from_letter,
)

W = Color.WHITE
B = Color.BLACK


def make_board(*placements):
    board = Board()
    for row, col, piece in placements:
        board[row, col] = piece
    return board


def test_opponent():
    assert W.opponent() is B
    assert B.opponent() is W


@pytest.mark.parametrize(
    "cls, white, black",
    [
        (Pawn, "♙", "♟"),
        (Rook, "♖", "♜"),
        (Knight, "♘", "♞"),
        (Bishop, "♗", "♝"),
        (Queen, "♕", "♛"),
        (King, "♔", "♚"),
    ],
)
def test_symbols(cls, white, black):
    assert cls(W).symbol() == white
    assert cls(B).symbol() == black


@pytest.mark.parametrize("letter", list("PRNBQKprnbqk"))
def test_letter_round_trip(letter):
    piece = piece_from_letter(letter)
    assert piece.letter() == letter
    assert piece.color is (W if letter.isupper() else B)
    assert piece.has_moved is False


def test_letter_kinds():
    assert piece_from_letter("N").kind is PieceType.KNIGHT
    assert piece_from_letter("k").kind is PieceType.KING


@pytest.mark.parametrize("bad", ["x", "", "PP", "1"])
def test_piece_from_letter_rejects(bad):
    with pytest.raises(ValueError):
        piece_from_letter(bad)


def test_pawn_single_and_double_step():
    pawn = Pawn(W)
    board = make_board((6, 4, pawn))
    assert pawn.is_move_valid(6, 4, 5, 4, board)
    assert pawn.is_move_valid(6, 4, 4, 4, board)
    assert not pawn.is_move_valid(6, 4, 3, 4, board)
    assert not pawn.is_move_valid(6, 4, 7, 4, board)


def test_pawn_double_step_only_from_start():
    pawn = Pawn(W)
    board = make_board((5, 4, pawn))
    assert not pawn.is_move_valid(5, 4, 3, 4, board)


def test_pawn_blocked():
    pawn = Pawn(W)
    board = make_board((6, 4, pawn), (5, 4, Pawn(B)))
    assert not pawn.is_move_valid(6, 4, 5, 4, board)
    assert not pawn.is_move_valid(6, 4, 4, 4, board)


def test_pawn_captures_diagonally():
    pawn = Pawn(W)
    board = make_board((6, 4, pawn), (5, 3, Knight(B)), (5, 5, Knight(W)))
    assert pawn.is_move_valid(6, 4, 5, 3, board)
    assert not pawn.is_move_valid(6, 4, 5, 5, board)


def test_pawn_en_passant_square():
    pawn = Pawn(W)
    board = make_board((3, 4, pawn), (3, 3, Pawn(B)))
    assert not pawn.is_move_valid(3, 4, 2, 3, board)
    board.en_passant = (2, 3)
    assert pawn.is_move_valid(3, 4, 2, 3, board)


def test_black_pawn_moves_down():
    pawn = Pawn(B)
    board = make_board((1, 2, pawn))
    assert pawn.is_move_valid(1, 2, 2, 2, board)
    assert pawn.is_move_valid(1, 2, 3, 2, board)
    assert not pawn.is_move_valid(1, 2, 0, 2, board)


@pytest.mark.parametrize(
    "tr, tc", [(2, 3), (2, 5), (6, 3), (6, 5), (3, 2), (3, 6), (5, 2), (5, 6)]
)
def test_knight_l_moves(tr, tc):
    knight = Knight(W)
    board = make_board((4, 4, knight))
    assert knight.is_move_valid(4, 4, tr, tc, board)


@pytest.mark.parametrize("tr, tc", [(4, 6), (6, 6), (5, 4), (4, 4)])
def test_knight_rejects_other_moves(tr, tc):
    knight = Knight(W)
    board = make_board((4, 4, knight))
    assert not knight.is_move_valid(4, 4, tr, tc, board)


def test_knight_jumps_but_not_onto_friend():
    knight = Knight(W)
    board = make_board((7, 1, knight), (6, 1, Pawn(W)), (5, 2, Pawn(W)), (5, 0, Pawn(B)))
    assert knight.is_move_valid(7, 1, 5, 0, board)
    assert not knight.is_move_valid(7, 1, 5, 2, board)


def test_bishop():
    bishop = Bishop(W)
    board = make_board((7, 2, bishop), (5, 0, Pawn(B)))
    assert bishop.is_move_valid(7, 2, 4, 5, board)
    assert bishop.is_move_valid(7, 2, 5, 0, board)
    assert not bishop.is_move_valid(7, 2, 5, 2, board)
    board[5, 4] = Pawn(W)
    assert not bishop.is_move_valid(7, 2, 4, 5, board)


def test_rook():
    rook = Rook(B)
    board = make_board((0, 0, rook), (0, 5, Pawn(W)))
    assert rook.is_move_valid(0, 0, 7, 0, board)
    assert rook.is_move_valid(0, 0, 0, 5, board)
    assert not rook.is_move_valid(0, 0, 0, 6, board)
    assert not rook.is_move_valid(0, 0, 1, 1, board)


def test_queen():
    queen = Queen(W)
    board = make_board((4, 4, queen), (4, 6, Pawn(W)))
    assert queen.is_move_valid(4, 4, 0, 4, board)
    assert queen.is_move_valid(4, 4, 1, 7, board)
    assert not queen.is_move_valid(4, 4, 4, 6, board)
    assert not queen.is_move_valid(4, 4, 4, 7, board)
    assert not queen.is_move_valid(4, 4, 2, 5, board)


def test_king_single_steps():
    king = King(W)
    board = make_board((4, 4, king), (3, 3, Pawn(W)))
    assert king.is_move_valid(4, 4, 5, 5, board)
    assert king.is_move_valid(4, 4, 3, 4, board)
    assert not king.is_move_valid(4, 4, 3, 3, board)
    assert not king.is_move_valid(4, 4, 2, 4, board)


def test_king_castling_both_sides():
    king = King(W)
    board = make_board((7, 4, king), (7, 7, Rook(W)), (7, 0, Rook(W)))
    assert king.is_move_valid(7, 4, 7, 6, board)
    assert king.is_move_valid(7, 4, 7, 2, board)


def test_king_castling_needs_unmoved_pieces():
    king = King(W)
    rook = Rook(W, has_moved=True)
    board = make_board((7, 4, king), (7, 7, rook))
    assert not king.is_move_valid(7, 4, 7, 6, board)
    rook.has_moved = False
    king.has_moved = True
    assert not king.is_move_valid(7, 4, 7, 6, board)


def test_king_castling_blocked_path():
    king = King(W)
    board = make_board((7, 4, king), (7, 0, Rook(W)), (7, 1, Knight(W)))
    assert not king.is_move_valid(7, 4, 7, 2, board)


def test_king_castling_through_attacked_square():
    king = King(W)
    board = make_board((7, 4, king), (7, 7, Rook(W)), (0, 5, Rook(B)))
    assert not king.is_move_valid(7, 4, 7, 6, board)


def test_king_cannot_castle_out_of_check():
    king = King(W)
    board = make_board((7, 4, king), (7, 7, Rook(W)), (0, 4, Rook(B)))
    assert not king.is_move_valid(7, 4, 7, 6, board)