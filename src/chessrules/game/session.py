"""GameSession: the single mutable owner of a game's state and history."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Literal, overload

from chessrules.config import SessionSettings
from chessrules.core.enums import Color, GameEndReason, GameResult, PieceType
from chessrules.core.move import Move, parse_promotion
from chessrules.core.notation.san import move_to_san
from chessrules.core.piece import piece_letter
from chessrules.core.position import Position
from chessrules.core.rules import RulesEngine
from chessrules.core.state import BoardState, Grid
from chessrules.core.status import GameStatus
from chessrules.core.types import Square, coerce_square, square_name
from chessrules.errors import IllegalMove

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """A single ply of the game: the move and the position it produced."""

    move: Move
    san: str
    state_after: BoardState

    @property
    def fen_after(self) -> str:
        return self.state_after.fen


@dataclass(frozen=True, slots=True)
class MoveResult:
    """What a successful :meth:`GameSession.attempt_move` hands back."""

    move: Move
    san: str
    state: BoardState
    status: GameStatus


class GameSession:
    """Owns the current :class:`BoardState` and the move history.

    ``attempt_move`` is the only way moves enter the game; a rejected
    request raises and leaves state and history exactly as they were.
    Sessions are plain objects; create as many as needed.  No locking is
    done, so a caller sharing one session between threads must serialise
    access itself.
    """

    __slots__ = (
        "settings",
        "_start",
        "_position",
        "_state",
        "_history",
        "_status",
        "_claimed",
    )

    def __init__(
        self,
        starting_state: BoardState | str | None = None,
        settings: SessionSettings | None = None,
    ) -> None:
        self.settings = settings or SessionSettings()
        self._history: list[HistoryEntry] = []
        self.reset(starting_state)

    # ── Lifecycle ────────────────────────────────────────────────────────

    def reset(self, starting_state: BoardState | str | None = None) -> None:
        """Start over from the initial position, a given state, or a FEN.

        Raises :class:`~chessrules.errors.InvalidPosition` (leaving the
        session untouched) when the starting position is malformed.
        """
        if starting_state is None:
            start = BoardState.initial()
        elif isinstance(starting_state, str):
            start = BoardState.from_fen(starting_state)
        else:
            start = starting_state
        if self.settings.strict_starting_position:
            RulesEngine.validate_start(start)
        else:
            start.check_invariants()

        self._start = start
        self._position = Position.from_state(start)
        self._state = start
        self._history.clear()
        self._status: GameStatus | None = None
        self._claimed: GameEndReason | None = None
        _LOGGER.info("Session reset to %s", start.fen)

    # ── Snapshots ────────────────────────────────────────────────────────

    @property
    def state(self) -> BoardState:
        return self._state

    @property
    def start_state(self) -> BoardState:
        return self._start

    @property
    def fen(self) -> str:
        return self._state.fen

    def board(self, white_at_bottom: bool = True) -> Grid:
        """8x8 read-only grid for rendering (see :meth:`BoardState.grid`)."""
        return self._state.grid(white_at_bottom)

    @property
    def side_to_move(self) -> Color:
        return self._state.side_to_move

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self._history)

    @property
    def is_game_over(self) -> bool:
        return self.status().is_game_over

    # ── Move queries ─────────────────────────────────────────────────────

    def legal_moves(self, square: str | Square | None = None) -> list[Move]:
        """Legal moves, optionally only those starting on *square*.

        Empty once the game is over.
        """
        origin = None if square is None else coerce_square(square)
        if self.is_game_over:
            return []
        return RulesEngine.legal_moves(self._position, origin)

    def is_promotion(self, from_sq: str | Square, to_sq: str | Square) -> bool:
        """Whether a request between these squares is a legal promotion.

        Lets a caller open its promotion picker before calling
        :meth:`attempt_move` with the chosen piece.
        """
        dst = coerce_square(to_sq)
        return any(
            m.to_sq == dst and m.is_promotion for m in self.legal_moves(from_sq)
        )

    # ── Mutation ─────────────────────────────────────────────────────────

    def attempt_move(
        self,
        from_sq: str | Square,
        to_sq: str | Square,
        promotion: PieceType | str | None = None,
    ) -> MoveResult:
        """Validate and play a move.

        A promoting move without *promotion* becomes
        ``settings.default_promotion`` (a queen unless configured).

        Raises:
            InvalidSquare: malformed square.
            InvalidPromotionChoice: bad piece kind, or a choice for a move
                that does not promote.
            IllegalMove: anything else the rules reject, including any
                move once the game is over.
        """
        try:
            if self.is_game_over:
                src, dst = coerce_square(from_sq), coerce_square(to_sq)
                choice = parse_promotion(promotion)
                raise IllegalMove(
                    square_name(src),
                    square_name(dst),
                    piece_letter(choice) if choice is not None else None,
                    "the game is over",
                )
            move = RulesEngine.resolve_move(
                self._position,
                from_sq,
                to_sq,
                promotion,
                self.settings.default_promotion,
            )
        except ValueError as exc:
            _LOGGER.debug("Rejected %s-%s (%s): %s", from_sq, to_sq, promotion, exc)
            raise

        san = move_to_san(self._position, move)
        self._position.make_move(move)
        self._state = self._position.snapshot()
        self._history.append(HistoryEntry(move, san, self._state))
        self._status = None

        status = self.status()
        _LOGGER.debug("Ply %d: %s (%s)", self.ply_count, san, move.uci)
        if status.is_game_over:
            _LOGGER.info("Game over after %s: %s", san, status.message)
        return MoveResult(move, san, self._state, status)

    def claim_draw(self) -> bool:
        """Claim a threefold-repetition or fifty-move draw for the side to move.

        Returns False, changing nothing, when no draw is claimable.
        """
        status = self.status()
        if not status.can_claim_draw:
            return False
        self._claimed = (
            GameEndReason.THREEFOLD_REPETITION
            if status.can_claim_threefold
            else GameEndReason.FIFTY_MOVE_RULE
        )
        self._status = None
        _LOGGER.info("Draw claimed by %s: %s", self.side_to_move, self._claimed.name)
        return True

    # ── Status / history ─────────────────────────────────────────────────

    def status(self) -> GameStatus:
        """Current classification; recomputed after every mutation."""
        if self._status is None:
            status = RulesEngine.evaluate(
                self._position, automatic_draws=self.settings.automatic_draws
            )
            if self._claimed is not None:
                status = dataclasses.replace(
                    status, result=GameResult.DRAW, reason=self._claimed
                )
            self._status = status
        return self._status

    @overload
    def history(self, verbose: Literal[False] = ...) -> list[Move]: ...

    @overload
    def history(self, verbose: Literal[True]) -> list[HistoryEntry]: ...

    def history(self, verbose: bool = False) -> list[Move] | list[HistoryEntry]:
        """Moves played so far; with *verbose*, full :class:`HistoryEntry`
        records carrying SAN and the resulting position."""
        if verbose:
            return list(self._history)
        return [entry.move for entry in self._history]

    def san_history(self) -> list[str]:
        return [entry.san for entry in self._history]

    def __repr__(self) -> str:
        return f"GameSession({self.fen!r}, plies={self.ply_count})"
