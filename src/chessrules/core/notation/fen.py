"""FEN parsing and serialization."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessrules.core.enums import CastlingRights, Color
from chessrules.core.piece import Piece
from chessrules.core.state import BoardState
from chessrules.core.types import Square, make_square, parse_square, rank_of, square_name
from chessrules.errors import InvalidPosition, InvalidSquare

if TYPE_CHECKING:
    from chessrules.core.position import Position

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_CHARS: tuple[tuple[str, CastlingRights], ...] = (
    ("K", CastlingRights.WHITE_KINGSIDE),
    ("Q", CastlingRights.WHITE_QUEENSIDE),
    ("k", CastlingRights.BLACK_KINGSIDE),
    ("q", CastlingRights.BLACK_QUEENSIDE),
)


def _parse_placement(fen: str, placement: str) -> list[Piece | None]:
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise InvalidPosition(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    squares: list[Piece | None] = [None] * 64
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise InvalidPosition(f"Invalid FEN digit {ch!r}: {fen!r}")
                file += step
            else:
                if file >= 8:
                    raise InvalidPosition(f"Invalid FEN rank width: {fen!r}")
                try:
                    squares[make_square(file, rank)] = Piece.from_char(ch)
                except ValueError:
                    raise InvalidPosition(
                        f"Invalid FEN piece {ch!r}: {fen!r}"
                    ) from None
                file += 1
            if file > 8:
                raise InvalidPosition(f"Invalid FEN rank width: {fen!r}")
        if file != 8:
            raise InvalidPosition(f"Invalid FEN rank width: {fen!r}")
    return squares


def _parse_counter(text: str, minimum: int, label: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise InvalidPosition(f"Invalid FEN {label}: {text!r}") from None
    if value < minimum:
        raise InvalidPosition(f"Invalid FEN {label}: {text!r}")
    return value


def state_from_fen(fen: str) -> BoardState:
    """Parse a FEN string into a :class:`BoardState`.

    The last two fields (clocks) are optional and default to ``0 1``.
    """
    parts = fen.split()
    if not (4 <= len(parts) <= 6):
        raise InvalidPosition(f"Invalid FEN (need 4-6 fields): {fen!r}")

    placement_part, side_part, castling_part, ep_part = parts[:4]
    squares = _parse_placement(fen, placement_part)

    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise InvalidPosition(f"Invalid FEN side-to-move field: {side_part!r}")

    castling = CastlingRights.NONE
    if castling_part != "-":
        rights = dict(_CASTLING_CHARS)
        seen: set[str] = set()
        for ch in castling_part:
            right = rights.get(ch)
            if right is None or ch in seen:
                raise InvalidPosition(f"Invalid FEN castling field: {castling_part!r}")
            seen.add(ch)
            castling |= right

    ep: Square | None = None
    if ep_part != "-":
        try:
            ep = parse_square(ep_part)
        except InvalidSquare:
            raise InvalidPosition(f"Invalid FEN en-passant square: {ep_part!r}") from None
        expected_ep_rank = 5 if side == Color.WHITE else 2
        if rank_of(ep) != expected_ep_rank:
            raise InvalidPosition(
                f"Invalid FEN en-passant square for side-to-move: {ep_part!r}"
            )

    halfmove = _parse_counter(parts[4], 0, "halfmove clock") if len(parts) > 4 else 0
    fullmove = _parse_counter(parts[5], 1, "fullmove number") if len(parts) > 5 else 1

    return BoardState(tuple(squares), side, castling, ep, halfmove, fullmove)


def state_to_fen(state: BoardState) -> str:
    """Serialise a :class:`BoardState` to FEN."""
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = state.placement[make_square(file, rank)]
            if piece is None:
                empty += 1
                continue
            if empty:
                row += str(empty)
                empty = 0
            row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)

    side_str = "w" if state.side_to_move == Color.WHITE else "b"
    castling_str = "".join(ch for ch, right in _CASTLING_CHARS if state.castling & right)
    ep_str = square_name(state.en_passant) if state.en_passant is not None else "-"

    return (
        f"{'/'.join(rows)} {side_str} {castling_str or '-'} {ep_str} "
        f"{state.halfmove_clock} {state.fullmove_number}"
    )


def position_from_fen(fen: str) -> Position:
    """Parse a FEN string straight into a working :class:`Position`."""
    from chessrules.core.position import Position

    return Position.from_state(state_from_fen(fen))


def position_to_fen(pos: Position) -> str:
    return state_to_fen(pos.snapshot())
