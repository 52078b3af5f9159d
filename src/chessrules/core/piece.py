"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.enums import Color, PieceType

_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "p",
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
    PieceType.KING: "k",
}
_LETTER_TYPES: dict[str, PieceType] = {v: k for k, v in _LETTERS.items()}

_UNICODE_BASE: dict[Color, int] = {Color.WHITE: 0x2654, Color.BLACK: 0x265A}
# Unicode chess glyphs run king, queen, rook, bishop, knight, pawn.
_UNICODE_ORDER: tuple[PieceType, ...] = (
    PieceType.KING,
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.PAWN,
)


def piece_letter(piece_type: PieceType) -> str:
    """Lower-case letter for *piece_type* ('p', 'n', ..., 'k')."""
    return _LETTERS[piece_type]


def piece_type_from_letter(letter: str) -> PieceType | None:
    """Inverse of :func:`piece_letter`, case-insensitive; None when unknown."""
    return _LETTER_TYPES.get(letter.lower())


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable value object representing a chess piece."""

    color: Color
    piece_type: PieceType

    # ── Serialisation ────────────────────────────────────────────────────

    def __str__(self) -> str:
        """FEN character (uppercase = white, lowercase = black)."""
        letter = _LETTERS[self.piece_type]
        return letter.upper() if self.color == Color.WHITE else letter

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Create piece from FEN character, e.g. 'N' → white knight."""
        ptype = _LETTER_TYPES.get(char.lower()) if len(char) == 1 else None
        if ptype is None:
            raise ValueError(f"Invalid piece character: {char!r}")
        return cls(Color.WHITE if char.isupper() else Color.BLACK, ptype)

    @property
    def letter(self) -> str:
        """Colour-less lower-case letter, as UI layers key piece images."""
        return _LETTERS[self.piece_type]

    @property
    def symbol(self) -> str:
        """Unicode chess symbol, e.g. ♞."""
        return chr(_UNICODE_BASE[self.color] + _UNICODE_ORDER.index(self.piece_type))

    @property
    def description(self) -> str:
        """Readable name, e.g. 'black knight'."""
        return f"{self.color} {self.piece_type}"
