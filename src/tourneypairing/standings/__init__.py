"""Standings, matchup history and Gibson detection."""

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

from tourneypairing.standings.calculator import (
    RankedRoster,
    StandingsCalculator,
    compute_standings,
    compute_team_standings,
    standings_sort_key,
    team_lookup,
)
from tourneypairing.standings.gibson import GibsonDetector
from tourneypairing.standings.matchup_history import MatchupHistory

__all__ = [
    "RankedRoster",
    "StandingsCalculator",
    "compute_standings",
    "compute_team_standings",
    "team_lookup",
    "standings_sort_key",
    "GibsonDetector",
    "MatchupHistory",
]
