"""Move value object (UCI-style representation)."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.enums import MoveFlag, PieceType
from chessrules.core.piece import piece_letter, piece_type_from_letter
from chessrules.core.types import Square, square_name
from chessrules.errors import InvalidPromotionChoice

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object representing a single chess move.

    ``flags`` are derived by the move generator; callers ask for moves by
    squares and promotion only and receive fully-flagged instances back.
    """

    from_sq: Square
    to_sq: Square
    flags: MoveFlag = MoveFlag.NONE
    promotion: PieceType | None = None

    # ── Flag queries ─────────────────────────────────────────────────────

    @property
    def is_capture(self) -> bool:
        return bool(self.flags & MoveFlag.CAPTURE)

    @property
    def is_en_passant(self) -> bool:
        return bool(self.flags & MoveFlag.EN_PASSANT)

    @property
    def is_castling(self) -> bool:
        return bool(self.flags & MoveFlag.CASTLE)

    @property
    def is_double_pawn_push(self) -> bool:
        return bool(self.flags & MoveFlag.DOUBLE_PAWN)

    @property
    def is_promotion(self) -> bool:
        return bool(self.flags & MoveFlag.PROMOTION)

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += piece_letter(self.promotion)
        return base

    @property
    def uci(self) -> str:
        """UCI long-algebraic notation."""
        return str(self)


def parse_promotion(choice: PieceType | str | None) -> PieceType | None:
    """Normalise a caller's promotion choice.

    Accepts a :class:`PieceType`, a letter (``"q"``, ``"N"``) or a name
    (``"knight"``).  ``None`` means "no choice given".  Pawns, kings and
    unknown values raise :class:`InvalidPromotionChoice`.
    """
    if choice is None:
        return None
    ptype: PieceType | None
    if isinstance(choice, PieceType):
        ptype = choice
    elif isinstance(choice, str):
        text = choice.strip().lower()
        if len(text) == 1:
            ptype = piece_type_from_letter(text)
        else:
            ptype = PieceType.__members__.get(text.upper())
    else:
        ptype = None

    if ptype is None:
        raise InvalidPromotionChoice(choice, "unknown piece kind")
    if ptype not in PROMOTION_TYPES:
        raise InvalidPromotionChoice(choice, "pawns may only promote to Q, R, B or N")
    return ptype
