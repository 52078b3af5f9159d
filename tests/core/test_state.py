"""Tests for the immutable BoardState snapshot."""

import dataclasses

import pytest

from chessrules.core.enums import CastlingRights, Color, PieceType
from chessrules.core.notation import STARTING_FEN
from chessrules.core.piece import Piece
from chessrules.core.state import BoardState
from chessrules.errors import InvalidPosition, InvalidSquare


class TestConstruction:
    def test_initial_matches_starting_fen(self) -> None:
        assert BoardState.initial().fen == STARTING_FEN
        assert BoardState.initial() == BoardState.from_fen(STARTING_FEN)

    def test_placement_length_checked(self) -> None:
        with pytest.raises(InvalidPosition):
            BoardState(placement=(None,) * 63)

    def test_frozen(self) -> None:
        state = BoardState.initial()
        with pytest.raises(dataclasses.FrozenInstanceError):
            state.halfmove_clock = 3  # type: ignore[misc]


class TestQueries:
    def test_piece_at(self) -> None:
        state = BoardState.initial()
        assert state.piece_at("d1") == Piece(Color.WHITE, PieceType.QUEEN)
        assert state.piece_at(60) == Piece(Color.BLACK, PieceType.KING)
        assert state.piece_at("e4") is None

    def test_piece_at_rejects_bad_square(self) -> None:
        with pytest.raises(InvalidSquare):
            BoardState.initial().piece_at("j9")

    def test_castling_booleans(self) -> None:
        state = BoardState.from_fen("r3k2r/8/8/8/8/8/8/R3K2R w Kq - 0 1")
        assert state.white_can_castle_kingside
        assert not state.white_can_castle_queenside
        assert not state.black_can_castle_kingside
        assert state.black_can_castle_queenside
        assert state.castling == CastlingRights.WHITE_KINGSIDE | CastlingRights.BLACK_QUEENSIDE

    def test_grid_white_at_bottom(self) -> None:
        grid = BoardState.initial().grid()
        assert len(grid) == 8 and all(len(row) == 8 for row in grid)
        assert grid[0][0] == Piece(Color.BLACK, PieceType.ROOK)  # a8
        assert grid[0][4] == Piece(Color.BLACK, PieceType.KING)  # e8
        assert grid[7][3] == Piece(Color.WHITE, PieceType.QUEEN)  # d1

    def test_grid_black_at_bottom(self) -> None:
        grid = BoardState.initial().grid(white_at_bottom=False)
        assert grid[0][0] == Piece(Color.WHITE, PieceType.ROOK)  # h1
        assert grid[0][3] == Piece(Color.WHITE, PieceType.KING)  # e1
        assert grid[7][4] == Piece(Color.BLACK, PieceType.QUEEN)  # d8


class TestPositionKey:
    def test_ignores_move_counters(self) -> None:
        a = BoardState.from_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 1")
        b = BoardState.from_fen("4k3/8/8/8/8/8/8/4K3 w - - 31 77")
        assert a.position_key == b.position_key

    @pytest.mark.parametrize(
        "other",
        [
            "4k3/8/8/8/8/8/8/4K3 b - - 0 1",
            "r3k3/8/8/8/8/8/8/4K3 w - - 0 1",
        ],
    )
    def test_distinguishes_positions(self, other: str) -> None:
        base = BoardState.from_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 1")
        assert base.position_key != BoardState.from_fen(other).position_key

    def test_castling_and_en_passant_count(self) -> None:
        with_rights = BoardState.from_fen("r3k3/8/8/8/8/8/8/4K3 w q - 0 1")
        without = BoardState.from_fen("r3k3/8/8/8/8/8/8/4K3 w - - 0 1")
        assert with_rights.position_key != without.position_key

        with_ep = BoardState.from_fen("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1")
        no_ep = BoardState.from_fen("4k3/8/8/3pP3/8/8/8/4K3 w - - 0 1")
        assert with_ep.position_key != no_ep.position_key


class TestInvariants:
    def test_initial_is_valid(self) -> None:
        BoardState.initial().check_invariants()

    @pytest.mark.parametrize(
        ("fen", "match"),
        [
            ("8/8/8/8/8/8/8/4K3 w - - 0 1", "black king"),
            ("4k3/8/8/8/8/8/8/4K2K w - - 0 1", "white king"),
            ("4k2P/8/8/8/8/8/8/4K3 w - - 0 1", "Pawn on back rank"),
            ("4k3/8/8/8/8/8/8/p3K3 w - - 0 1", "Pawn on back rank"),
        ],
    )
    def test_violations(self, fen: str, match: str) -> None:
        with pytest.raises(InvalidPosition, match=match):
            BoardState.from_fen(fen).check_invariants()
