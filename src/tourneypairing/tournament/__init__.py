"""Round life cycle: orchestration, results, starts, forfeits and storage."""

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

from tourneypairing.tournament.forfeit_resolver import ForfeitResolver
from tourneypairing.tournament.orchestrator import (
    PairingOrchestrator,
    RoundOutcome,
    RoundState,
    assign_tables,
)
from tourneypairing.tournament.result_recorder import ResultRecorder
from tourneypairing.tournament.start_assigner import StartAssigner
from tourneypairing.tournament.store import (
    InMemoryScheduleStore,
    JsonFileScheduleStore,
    ScheduleStore,
)

__all__ = [
    "ForfeitResolver",
    "InMemoryScheduleStore",
    "JsonFileScheduleStore",
    "PairingOrchestrator",
    "ResultRecorder",
    "RoundOutcome",
    "RoundState",
    "ScheduleStore",
    "StartAssigner",
    "assign_tables",
]
