"""Testing helpers for Tourney Pairing.

This module provides the seeded event simulator used by the test-suite
and the ``simulate`` CLI command.
"""

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

from tourneypairing.testing.simulator import (
    EventSimulator,
    RatingDistribution,
    ResultPattern,
    SimulationConfig,
    SimulationReport,
    check_round_invariants,
    create_league_event,
    create_small_event,
)

__all__ = [
    "EventSimulator",
    "SimulationConfig",
    "SimulationReport",
    "RatingDistribution",
    "ResultPattern",
    "check_round_invariants",
    "create_league_event",
    "create_small_event",
]
