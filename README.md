# termchess

Two-player chess in the terminal. Both players share the keyboard and take turns
entering moves. The board is drawn with Unicode chess symbols. After each move it
is shown twice: once from the side of the player who moved and once from the side
of the player about to move.

## Rules

- Every piece moves by the standard rules, including castling, en passant and pawn
  promotion. When a pawn promotes you are asked for `q`, `r`, `b` or `k` (queen,
  rook, bishop or knight), and asked again until you give one of them.
- A move that leaves your own king in check is refused.
- The game ends on checkmate, stalemate, threefold repetition or insufficient
  material, and the result is printed.

## Installing and starting

```
pip install .
termchess
```

## Playing

Enter a move as the square the piece starts on, a space, then the square it goes
to:

```
White to move: e2 e4
```

Other commands:

| Input | Effect                                      |
|-------|---------------------------------------------|
| `s`   | save the game to `save.txt` in the current directory |
| `l`   | load the game from `save.txt`               |
| `q`   | quit                                        |

The game also stops when input ends. If a move is rejected, the game tells you
why: the input may be malformed, the start square may be empty, the piece may
belong to the other player, the move may capture one of your own pieces, the
piece may not be able to move that way, or the move may leave your king in check.
If saving or loading fails, the error is printed and play goes on.

## Using it as a library

```python
from termchess.game import Game, MoveResult

game = Game()
assert game.attempt_move("e2 e4") is MoveResult.OK
print(game.outcome())  # None while the game goes on
```

- `termchess.game` has `Game` (with `attempt_move`, `outcome`, `save`, `load`
  and `run`), `parse_move`, the `MoveResult` and `Outcome` enums, and `main`, the
  entry point of the `termchess` command.
- `termchess.board.Board` holds the position, indexed as `board[row, col]` with
  row 0 being rank 8, and the rules checks: `move_piece`, `is_in_check`,
  `has_legal_moves`, `is_insufficient_material` and others.
- `termchess.pieces` defines `Color`, `PieceType`, the pieces and
  `piece_from_letter`.

A `Game` can be given a `promote` callable that returns the promotion letter;
`Board.move_piece` without one promotes to a queen.

## What it does not do

There is no computer opponent, no clock, no move list in algebraic notation and
no import or export of standard chess formats; saved games use the package's own
plain-text layout. The fifty-move rule is not applied.