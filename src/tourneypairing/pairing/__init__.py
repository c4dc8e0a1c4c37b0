"""Pairing strategies and the registry that selects them by name."""

# Tourney Pairing
# Copyright (C) 2025  Tourney Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from typing import Dict, Type

from tourneypairing.exceptions import InvalidConfigurationException
from tourneypairing.pairing.base import PairingContext, PairingStrategy
from tourneypairing.pairing.enhanced_swiss import EnhancedSwissPairer
from tourneypairing.pairing.king_of_the_hill import KingOfTheHillPairer
from tourneypairing.pairing.random_pairer import RandomPairer
from tourneypairing.pairing.round_robin import (
    RoundRobinScheduler,
    generate_round_robin_schedule,
)
from tourneypairing.pairing.swiss import SwissPairer, pair_by_rank, select_bye
from tourneypairing.pairing.team_swiss import TeamSwissPairer

PAIRING_STRATEGIES: Dict[str, Type[PairingStrategy]] = {
    strategy.name: strategy
    for strategy in (
        SwissPairer,
        EnhancedSwissPairer,
        KingOfTheHillPairer,
        RoundRobinScheduler,
        TeamSwissPairer,
        RandomPairer,
    )
}


def create_pairing_strategy(algorithm: str) -> PairingStrategy:
    """Instantiate the strategy registered under ``algorithm``."""
    try:
        return PAIRING_STRATEGIES[algorithm]()
    except KeyError:
        raise InvalidConfigurationException(
            f"Unknown pairing algorithm '{algorithm}', expected one of "
            + ", ".join(sorted(PAIRING_STRATEGIES))
        ) from None


__all__ = [
    "PAIRING_STRATEGIES",
    "PairingContext",
    "PairingStrategy",
    "SwissPairer",
    "EnhancedSwissPairer",
    "KingOfTheHillPairer",
    "RoundRobinScheduler",
    "TeamSwissPairer",
    "RandomPairer",
    "create_pairing_strategy",
    "generate_round_robin_schedule",
    "pair_by_rank",
    "select_bye",
]
