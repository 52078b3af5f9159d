"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

from collections.abc import Callable, Sequence

import pytest

from chessrules.game.session import GameSession


@pytest.fixture
def session() -> GameSession:
    """A fresh game from the standard starting position."""
    return GameSession()


@pytest.fixture
def play() -> Callable[[GameSession, Sequence[str]], None]:
    """Play a sequence of UCI-style requests (``"e2e4"``, ``"e7e8n"``)."""

    def _play(game: GameSession, moves: Sequence[str]) -> None:
        for uci in moves:
            game.attempt_move(uci[:2], uci[2:4], uci[4:] or None)

    return _play
