"""Zobrist keys used as repetition-detection position keys.

A key covers piece placement, side to move, castling rights and the en
passant target. Move counters are not part of the key, so the same
position reached at different clock values compares equal.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

from chessrules.core.enums import CastlingRights, Color
from chessrules.core.piece import Piece
from chessrules.core.types import Square

_SEED: Final = 0x3C6EF372FE94F82B
_MASK_64: Final = 0xFFFFFFFFFFFFFFFF

# Key table layout: 768 piece keys, 1 side key, 16 castling keys, 64 ep keys.
_PIECE_BLOCK: Final = 2 * 6 * 64
_SIDE_INDEX: Final = _PIECE_BLOCK
_CASTLING_BASE: Final = _SIDE_INDEX + 1
_EN_PASSANT_BASE: Final = _CASTLING_BASE + 16


def _splitmix64(state: int) -> int:
    z = (state + 0x9E3779B97F4A7C15) & _MASK_64
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _MASK_64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _MASK_64
    return z ^ (z >> 31)


_KEYS: Final = tuple(_splitmix64(_SEED + i) for i in range(_EN_PASSANT_BASE + 64))


def piece_key(piece: Piece, sq: Square) -> int:
    """Hash key for a specific piece on a square."""
    return _KEYS[(int(piece.color) * 384) + ((int(piece.piece_type) - 1) * 64) + sq]


def side_to_move_key() -> int:
    """Toggled in when Black is to move."""
    return _KEYS[_SIDE_INDEX]


def castling_key(castling: CastlingRights) -> int:
    return _KEYS[_CASTLING_BASE + (int(castling) & 0xF)]


def en_passant_key(ep_square: Square) -> int:
    return _KEYS[_EN_PASSANT_BASE + ep_square]


def compute_key(
    placement: Sequence[Piece | None],
    side_to_move: Color,
    castling: CastlingRights,
    en_passant: Square | None,
) -> int:
    """Full (non-incremental) key for a position."""
    key = castling_key(castling)
    if side_to_move == Color.BLACK:
        key ^= side_to_move_key()
    if en_passant is not None:
        key ^= en_passant_key(en_passant)
    for sq, piece in enumerate(placement):
        if piece is not None:
            key ^= piece_key(piece, sq)
    return key
