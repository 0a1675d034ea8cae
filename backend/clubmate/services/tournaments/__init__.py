"""Tournament domain services: pairing, round lifecycle, results and standings.

This package contains the tournament engine imported by HTTP routes and the
CLI, keeping transport concerns separated from the tournament rules.
"""

from .pairing import Pairing, PairingStrategy, RoundRobinPairingStrategy, SwissPairingStrategy, get_strategy
from .results import Outcome, match_details, submit_result
from .rounds import (
    RoundStatusInfo,
    can_pair,
    create_round,
    current_round,
    is_round_locked,
    list_rounds,
    lock_round,
    round_status,
    start_round,
    strategy_name,
)
from .scope import tournament_scope
from .standings import StandingEntry, player_rank, player_score, tournament_standings

__all__ = [
    "Pairing",
    "PairingStrategy",
    "SwissPairingStrategy",
    "RoundRobinPairingStrategy",
    "get_strategy",
    "Outcome",
    "submit_result",
    "match_details",
    "RoundStatusInfo",
    "can_pair",
    "strategy_name",
    "create_round",
    "start_round",
    "lock_round",
    "round_status",
    "is_round_locked",
    "list_rounds",
    "current_round",
    "tournament_scope",
    "StandingEntry",
    "tournament_standings",
    "player_score",
    "player_rank",
]
