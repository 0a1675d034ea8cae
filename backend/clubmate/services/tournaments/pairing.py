"""Pairing strategies.

A strategy turns an active roster into the pairs of one round. Strategies are
pure: they read ``id``, ``score`` and ``active`` from the players they are
given and never touch the database, so the round lifecycle can swap them via
configuration without any other change.

To add a new strategy:
  1. Subclass PairingStrategy and implement pair()
  2. Register it in STRATEGIES
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from clubmate.errors import DuplicatePlayer, InactivePlayer, InsufficientPlayers, UnknownPairingStrategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pairing:
    """Pairs for one round plus whoever was left without an opponent."""

    pairs: Tuple[tuple, ...]
    unpaired: Tuple[object, ...] = ()

    @property
    def bye(self):
        return self.unpaired[0] if self.unpaired else None

    def player_ids(self) -> list:
        ids = [p.id for pair in self.pairs for p in pair]
        ids.extend(p.id for p in self.unpaired)
        return ids


class PairingStrategy(ABC):
    name = ''
    min_players = 2

    def can_pair(self, player_count: int) -> bool:
        return player_count >= self.min_players

    def pair(self, players: Sequence, round_number: int = 1) -> Pairing:
        """Validate the roster and delegate to the concrete algorithm."""
        self._check_roster(players)
        pairing = self._pair(list(players), round_number)
        logger.info(
            f"[pairing] strategy={self.name} round={round_number} players={len(players)} "
            f"pairs={len(pairing.pairs)} bye={pairing.bye.id if pairing.bye else None}"
        )
        return pairing

    @abstractmethod
    def _pair(self, players: list, round_number: int) -> Pairing:
        ...  # pragma: no cover

    def _check_roster(self, players: Sequence) -> None:
        if not self.can_pair(len(players)):
            raise InsufficientPlayers(len(players), self.min_players)
        seen = set()
        for player in players:
            if player.id in seen:
                raise DuplicatePlayer(player.id)
            if not getattr(player, 'active', True):
                raise InactivePlayer(player.id)
            seen.add(player.id)


def bracket_size(player_count: int) -> int:
    return max(2, math.ceil(math.sqrt(player_count)))


def ranking_key(player):
    """Score descending, then id ascending so equal scores order the same way every time."""
    return (-(player.score or 0.0), player.id)


class SwissPairingStrategy(PairingStrategy):
    """Bracket pairing over the score-sorted roster.

    Players are split into consecutive brackets of ceil(sqrt(n)) and paired
    first-with-next inside each bracket. A player left over at the end of a
    bracket floats down to the head of the next one, so only the lowest
    ranked leftover ever sits out, and only when n is odd.
    """

    name = 'SWISS'

    def _pair(self, players: list, round_number: int) -> Pairing:
        ranked = sorted(players, key=ranking_key)
        size = bracket_size(len(ranked))
        pairs = []
        floater: list = []
        for start in range(0, len(ranked), size):
            bracket = floater + ranked[start:start + size]
            for i in range(0, len(bracket) - 1, 2):
                pairs.append((bracket[i], bracket[i + 1]))
            floater = [bracket[-1]] if len(bracket) % 2 else []
        return Pairing(pairs=tuple(pairs), unpaired=tuple(floater))


class RoundRobinPairingStrategy(PairingStrategy):
    """Circle-method schedule: round r uses the (r - 1)th rotation.

    The first seat (lowest id) stays fixed while the others rotate. With an
    odd roster an empty seat is added and whoever faces it has the bye.
    Past n - 1 rounds (n for odd rosters) the schedule starts over.
    """

    name = 'ROUND_ROBIN'

    def _pair(self, players: list, round_number: int) -> Pairing:
        seats: list = sorted(players, key=lambda p: p.id)
        if len(seats) % 2:
            seats.append(None)
        fixed, rest = seats[0], seats[1:]
        shift = (round_number - 1) % len(rest)
        rotated = [fixed] + rest[-shift:] + rest[:-shift] if shift else seats

        pairs = []
        unpaired = []
        half = len(rotated) // 2
        for i in range(half):
            a, b = rotated[i], rotated[-(i + 1)]
            if a is None or b is None:
                unpaired.append(a if b is None else b)
                continue
            pairs.append((a, b))
        return Pairing(pairs=tuple(pairs), unpaired=tuple(unpaired))


STRATEGIES = {
    'swiss': SwissPairingStrategy,
    'round_robin': RoundRobinPairingStrategy,
}


def get_strategy(name: Optional[str]) -> PairingStrategy:
    """Instantiate the strategy registered under ``name`` (case-insensitive)."""
    key = (name or 'swiss').strip().lower()
    try:
        return STRATEGIES[key]()
    except KeyError:
        raise UnknownPairingStrategy(name, sorted(STRATEGIES)) from None
