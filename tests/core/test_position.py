"""Tests for Position make/unmake and snapshots."""

from chessrules.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessrules.core.move import Move
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.notation import STARTING_FEN, position_from_fen, position_to_fen
from chessrules.core.piece import Piece
from chessrules.core.position import Position
from chessrules.core.state import BoardState
from chessrules.core.types import D5, D7, E1, E2, E4, parse_square

CASTLE_FEN = "r3k2r/pppppppp/8/8/8/8/PPPPPPPP/R3K2R w KQkq - 0 1"


class TestMakeUnmake:
    def test_side_switches(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        pos.make_move(Move(E2, E4, MoveFlag.DOUBLE_PAWN))
        assert pos.side_to_move == Color.BLACK

    def test_unmake_restores_fen_for_every_move(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        fen_before = position_to_fen(pos)
        key_before = pos.position_key
        for move in MoveGenerator(pos).generate_legal_moves():
            pos.make_move(move)
            pos.unmake_move(move)
            assert position_to_fen(pos) == fen_before, f"Failed for {move}"
            assert pos.position_key == key_before

    def test_en_passant_set_and_replaced(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        pos.make_move(Move(E2, E4, MoveFlag.DOUBLE_PAWN))
        assert pos.en_passant == parse_square("e3")
        pos.make_move(Move(D7, D5, MoveFlag.DOUBLE_PAWN))
        assert pos.en_passant == parse_square("d6")

    def test_capture_restores_piece(self) -> None:
        fen = "rnbqkbnr/ppp1pppp/8/3p4/4P3/8/PPPP1PPP/RNBQKBNR w KQkq d6 0 2"
        pos = position_from_fen(fen)
        capture = Move(E4, D5, MoveFlag.CAPTURE)
        pos.make_move(capture)
        assert pos.board[D5] == Piece(Color.WHITE, PieceType.PAWN)
        assert pos.halfmove_clock == 0
        pos.unmake_move(capture)
        assert position_to_fen(pos) == fen

    def test_en_passant_removes_pawn_behind(self) -> None:
        fen = "4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1"
        pos = position_from_fen(fen)
        ep = Move(parse_square("e5"), parse_square("d6"), MoveFlag.CAPTURE | MoveFlag.EN_PASSANT)
        pos.make_move(ep)
        assert pos.board[parse_square("d6")] == Piece(Color.WHITE, PieceType.PAWN)
        assert pos.board[D5] is None
        pos.unmake_move(ep)
        assert position_to_fen(pos) == fen

    def test_clocks(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/4K1N1 b - - 7 12")
        pos.make_move(Move(parse_square("e8"), parse_square("e7")))
        assert pos.halfmove_clock == 8
        assert pos.fullmove_number == 13
        pos.make_move(Move(parse_square("g1"), parse_square("f3")))
        assert pos.fullmove_number == 13


class TestCastlingRightsUpdate:
    def test_king_move_removes_rights(self) -> None:
        pos = position_from_fen(CASTLE_FEN)
        pos.make_move(Move(E1, parse_square("f1")))
        assert not (pos.castling & CastlingRights.WHITE_BOTH)
        assert pos.castling & CastlingRights.BLACK_BOTH == CastlingRights.BLACK_BOTH

    def test_rook_move_removes_one_right(self) -> None:
        pos = position_from_fen(CASTLE_FEN)
        pos.make_move(Move(parse_square("a1"), parse_square("b1")))
        assert not (pos.castling & CastlingRights.WHITE_QUEENSIDE)
        assert pos.castling & CastlingRights.WHITE_KINGSIDE

    def test_capture_on_rook_corner_removes_right(self) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        pos.make_move(Move(parse_square("h1"), parse_square("h8"), MoveFlag.CAPTURE))
        assert not (pos.castling & CastlingRights.BLACK_KINGSIDE)
        assert not (pos.castling & CastlingRights.WHITE_KINGSIDE)
        assert pos.castling & CastlingRights.BLACK_QUEENSIDE

    def test_castling_kingside_moves_rook(self) -> None:
        pos = position_from_fen(CASTLE_FEN)
        pos.make_move(Move(E1, parse_square("g1"), MoveFlag.CASTLE_KINGSIDE))
        assert pos.board[parse_square("g1")] == Piece(Color.WHITE, PieceType.KING)
        assert pos.board[parse_square("f1")] == Piece(Color.WHITE, PieceType.ROOK)
        assert pos.board[parse_square("h1")] is None

    def test_castling_queenside_unmake(self) -> None:
        pos = position_from_fen(CASTLE_FEN)
        move = Move(E1, parse_square("c1"), MoveFlag.CASTLE_QUEENSIDE)
        pos.make_move(move)
        assert pos.board[parse_square("d1")] == Piece(Color.WHITE, PieceType.ROOK)
        assert pos.board[parse_square("a1")] is None
        pos.unmake_move(move)
        assert position_to_fen(pos) == CASTLE_FEN


class TestPromotion:
    def test_promote_and_unmake(self) -> None:
        fen = "8/4P3/8/8/8/8/4k3/4K3 w - - 0 1"
        pos = position_from_fen(fen)
        move = Move(
            parse_square("e7"), parse_square("e8"), MoveFlag.PROMOTION, PieceType.QUEEN
        )
        pos.make_move(move)
        assert pos.board[parse_square("e8")] == Piece(Color.WHITE, PieceType.QUEEN)
        pos.unmake_move(move)
        assert position_to_fen(pos) == fen


class TestKeysAndSnapshots:
    def test_incremental_key_matches_state_key(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        for move in (
            Move(E2, E4, MoveFlag.DOUBLE_PAWN),
            Move(D7, D5, MoveFlag.DOUBLE_PAWN),
            Move(E4, D5, MoveFlag.CAPTURE),
        ):
            pos.make_move(move)
            assert pos.position_key == pos.snapshot().position_key

    def test_repetition_count(self) -> None:
        pos = position_from_fen("4k2n/8/8/8/8/8/8/4K2N w - - 0 1")
        shuffle = [("h1", "g3"), ("h8", "g6"), ("g3", "h1"), ("g6", "h8")]
        for _ in range(2):
            for src, dst in shuffle:
                pos.make_move(Move(parse_square(src), parse_square(dst)))
        assert pos.repetition_count() == 3
        assert len(pos.ply_keys) == 9

    def test_snapshot_round_trip(self) -> None:
        state = BoardState.from_fen(CASTLE_FEN)
        assert Position.from_state(state).snapshot() == state

    def test_copy_is_independent(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        clone = pos.copy()
        clone.make_move(Move(E2, E4, MoveFlag.DOUBLE_PAWN))
        assert position_to_fen(pos) == STARTING_FEN
        assert clone.side_to_move == Color.BLACK
