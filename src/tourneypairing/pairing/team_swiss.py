"""Team Swiss pairing."""

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

from typing import Dict, List

from tourneypairing.constants import ALGO_TEAM_SWISS
from tourneypairing.exceptions import InvalidConfigurationException
from tourneypairing.models.pairing import Pairing, bye_pairing
from tourneypairing.pairing.base import PairingContext, PairingStrategy
from tourneypairing.pairing.swiss import pair_by_rank, select_bye
from tourneypairing.standings.matchup_history import MatchupHistory
from tourneypairing.utils import setup_logger

logger = setup_logger(__name__)


class TeamSwissPairer(PairingStrategy):
    """Swiss pairing of teams, then board-by-board pairing of members.

    Teams are ranked by their team standings and paired with the Swiss core
    against the team matchup history. Within a team match the members play
    board against board in the team's board order. Only active members take
    a board; a board without an opponent is a bye, and a team bye gives
    every active member a bye.
    """

    name = ALGO_TEAM_SWISS

    def pair(self, context: PairingContext) -> List[Pairing]:
        boards = self._active_boards(context)
        team_ids = [t.id for t in context.teams if boards.get(t.id)]
        self.require_two(context, len(team_ids))

        history = context.team_history or MatchupHistory()
        bye_team = None
        if len(team_ids) % 2:
            bye_team = select_bye(team_ids, history, context.round_number)
            team_ids.remove(bye_team)
            logger.info(
                "Round %d (%s): team bye to %s",
                context.round_number,
                context.division,
                bye_team,
            )

        team_pairs, rematches = pair_by_rank(
            team_ids, history, context.config.allow_rematches
        )

        games: List[Pairing] = []
        byes: List[Pairing] = []
        for team_a, team_b in team_pairs:
            note = "rematch" if frozenset({team_a, team_b}) in rematches else None
            members_a, members_b = boards[team_a], boards[team_b]
            for board in range(max(len(members_a), len(members_b))):
                if board < len(members_a) and board < len(members_b):
                    games.append(
                        Pairing(
                            round=context.round_number,
                            player1=members_a[board],
                            player2=members_b[board],
                            division=context.division,
                            note=note,
                        )
                    )
                    continue
                lone = members_a[board] if board < len(members_a) else members_b[board]
                byes.append(bye_pairing(context.round_number, lone, context.division))

        if bye_team is not None:
            for member_id in boards[bye_team]:
                byes.append(
                    bye_pairing(context.round_number, member_id, context.division)
                )
        return games + byes

    @staticmethod
    def _active_boards(context: PairingContext) -> Dict[str, List[str]]:
        """Active member ids of each team, in board order."""
        active = {c.id: c for c in context.eligible()}
        boards = {}
        for team in context.teams:
            listed = [m for m in team.member_ids if m in active]
            # Members registered only through team_id play the last boards
            extra = sorted(
                (
                    c
                    for c in active.values()
                    if c.team_id == team.id and c.id not in listed
                ),
                key=lambda c: (c.seed, c.id),
            )
            boards[team.id] = listed + [c.id for c in extra]
        seated = {m for members in boards.values() for m in members}
        teamless = sorted(set(active) - seated)
        if teamless:
            raise InvalidConfigurationException(
                "Competitors without a team in a team event: " + ", ".join(teamless)
            )
        return boards
