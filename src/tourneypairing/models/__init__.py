"""Data models for Tourney Pairing."""

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

from tourneypairing.models.competitor import Competitor
from tourneypairing.models.config import PairingConfiguration, TournamentConfig
from tourneypairing.models.game_result import GameResult, Match, match_key
from tourneypairing.models.pairing import Pairing, bye_pairing
from tourneypairing.models.snapshot import TournamentSnapshot
from tourneypairing.models.team import Team

__all__ = [
    "Competitor",
    "GameResult",
    "Match",
    "match_key",
    "Pairing",
    "bye_pairing",
    "PairingConfiguration",
    "TournamentConfig",
    "TournamentSnapshot",
    "Team",
]
