"""Tournament and pairing configuration data classes."""

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

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional

from tourneypairing.constants import (
    ALGO_TEAM_SWISS,
    BYE_SPREAD,
    DEFAULT_ALGORITHM,
    DEFAULT_DIVISION,
    DEFAULT_GAMES_PER_MATCH,
    FORFEIT_SPREAD,
    MODE_INDIVIDUAL,
    MODE_LEAGUE,
    PAIRING_ALGORITHMS,
    TOURNAMENT_TYPES,
    TYPE_INDIVIDUAL,
    TYPE_LEAGUE,
    TYPE_TEAM,
)
from tourneypairing.exceptions import InvalidConfigurationException
from tourneypairing.type_hints import StandingsMode, TournamentType


@dataclass(frozen=True)
class PairingConfiguration:
    """Settings that drive the pairing of a single round.

    Attributes
    ----------
    algorithm : str
        Pairing algorithm name, see ``PAIRING_ALGORITHMS``.
    allow_rematches : bool
        Ignore matchup history when pairing.
    base_round : int or None
        Rank competitors on results up to and including this round. None
        means the round before the one being paired.
    gibson_rule_enabled : bool
        Lock competitors whose prize place is clinched (enhanced Swiss).
    prize_count : int or None
        Number of prize positions, required by the Gibson rule.
    games_per_match : int
        Best-of-N for league matches.
    random_seed : int or None
        Seed for the random pairer, None for a fresh shuffle.
    """

    algorithm: str = DEFAULT_ALGORITHM
    allow_rematches: bool = False
    base_round: Optional[int] = None
    gibson_rule_enabled: bool = False
    prize_count: Optional[int] = None
    games_per_match: int = DEFAULT_GAMES_PER_MATCH
    random_seed: Optional[int] = None

    def validate(self) -> None:
        """Check the settings are consistent.

        Raises:
            InvalidConfigurationException: On an unknown algorithm, a Gibson
                request without prize positions, or a bad match length.
        """
        if self.algorithm not in PAIRING_ALGORITHMS:
            raise InvalidConfigurationException(
                f"Unknown pairing algorithm '{self.algorithm}'"
            )
        if self.gibson_rule_enabled and (
            self.prize_count is None or self.prize_count < 1
        ):
            raise InvalidConfigurationException(
                "Gibson rule requires a prize_count of at least 1"
            )
        if self.games_per_match < 1:
            raise InvalidConfigurationException(
                f"games_per_match must be positive, got {self.games_per_match}"
            )
        if self.base_round is not None and self.base_round < 0:
            raise InvalidConfigurationException(
                f"base_round cannot be negative, got {self.base_round}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PairingConfiguration":
        """Deserialize configuration from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class TournamentConfig:
    """Tournament configuration settings.

    Attributes
    ----------
    name : str
        Tournament name.
    total_rounds : int
        Number of rounds in the tournament.
    tournament_type : str
        ``individual``, ``team`` or ``league``.
    pairing_system : str
        Default pairing algorithm for every round.
    round_settings : dict of int to dict
        Per-round overrides of any ``PairingConfiguration`` field.
    games_per_match : int
        Best-of-N for league matches.
    gibson_rule_enabled : bool
        Default for the Gibson rule.
    prize_count : int or None
        Number of prize positions.
    divisions : list of str
        Independently paired sub-brackets. Empty means a single open division.
    bye_spread : int
        Winning margin awarded for a bye.
    forfeit_spread : int
        Margin of generated forfeit wins and absence penalties.
    max_spread : int or None
        Cap applied to the margin of recorded results.
    reserved_tables : dict of str to int
        Competitor id to fixed table number.
    round_robin_cycles : int
        Times each pair meets in a round robin.
    """

    name: str
    total_rounds: int
    tournament_type: TournamentType = TYPE_INDIVIDUAL
    pairing_system: str = DEFAULT_ALGORITHM
    round_settings: Dict[int, Dict[str, Any]] = field(default_factory=dict)
    games_per_match: int = DEFAULT_GAMES_PER_MATCH
    gibson_rule_enabled: bool = False
    prize_count: Optional[int] = None
    divisions: List[str] = field(default_factory=list)
    bye_spread: int = BYE_SPREAD
    forfeit_spread: int = FORFEIT_SPREAD
    max_spread: Optional[int] = None
    reserved_tables: Dict[str, int] = field(default_factory=dict)
    round_robin_cycles: int = 1

    @property
    def standings_mode(self) -> StandingsMode:
        return MODE_LEAGUE if self.tournament_type == TYPE_LEAGUE else MODE_INDIVIDUAL

    @property
    def is_team_event(self) -> bool:
        return self.tournament_type == TYPE_TEAM

    def division_names(self) -> List[str]:
        return list(self.divisions) if self.divisions else [DEFAULT_DIVISION]

    def pairing_config_for(self, round_number: int) -> PairingConfiguration:
        """Merge tournament defaults with the overrides of one round."""
        base = PairingConfiguration(
            algorithm=self.pairing_system,
            gibson_rule_enabled=self.gibson_rule_enabled,
            prize_count=self.prize_count,
            games_per_match=self.games_per_match,
        )
        overrides = self.round_settings.get(round_number, {})
        known = {f.name for f in fields(PairingConfiguration)}
        config = replace(base, **{k: v for k, v in overrides.items() if k in known})
        config.validate()
        if config.algorithm == ALGO_TEAM_SWISS and not self.is_team_event:
            raise InvalidConfigurationException(
                f"Round {round_number}: team_swiss requires a team tournament"
            )
        return config

    def validate(self) -> None:
        """Validate the tournament-wide settings.

        Raises:
            InvalidConfigurationException: If any setting is out of range.
        """
        if self.total_rounds < 1:
            raise InvalidConfigurationException(
                f"total_rounds must be positive, got {self.total_rounds}"
            )
        if self.tournament_type not in TOURNAMENT_TYPES:
            raise InvalidConfigurationException(
                f"Unknown tournament type '{self.tournament_type}'"
            )
        if self.round_robin_cycles < 1:
            raise InvalidConfigurationException("round_robin_cycles must be positive")
        if self.max_spread is not None and self.max_spread < 1:
            raise InvalidConfigurationException("max_spread must be positive")
        for round_number in self.round_settings:
            if not 1 <= round_number <= self.total_rounds:
                raise InvalidConfigurationException(
                    f"Settings given for round {round_number}, outside "
                    f"1-{self.total_rounds}"
                )
        PairingConfiguration(
            algorithm=self.pairing_system,
            gibson_rule_enabled=self.gibson_rule_enabled,
            prize_count=self.prize_count,
            games_per_match=self.games_per_match,
        ).validate()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {
            "name": self.name,
            "total_rounds": self.total_rounds,
            "tournament_type": self.tournament_type,
            "pairing_system": self.pairing_system,
            "round_settings": {str(k): v for k, v in self.round_settings.items()},
            "games_per_match": self.games_per_match,
            "gibson_rule_enabled": self.gibson_rule_enabled,
            "prize_count": self.prize_count,
            "divisions": list(self.divisions),
            "bye_spread": self.bye_spread,
            "forfeit_spread": self.forfeit_spread,
            "max_spread": self.max_spread,
            "reserved_tables": dict(self.reserved_tables),
            "round_robin_cycles": self.round_robin_cycles,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TournamentConfig":
        """Deserialize configuration from dictionary."""
        tournament_type = data.get("tournament_type", TYPE_INDIVIDUAL)
        default_system = (
            ALGO_TEAM_SWISS if tournament_type == TYPE_TEAM else DEFAULT_ALGORITHM
        )
        return cls(
            name=data.get("name", "Untitled Tournament"),
            total_rounds=data["total_rounds"],
            tournament_type=tournament_type,
            pairing_system=data.get("pairing_system", default_system),
            round_settings={
                int(k): v for k, v in data.get("round_settings", {}).items()
            },
            games_per_match=data.get("games_per_match", DEFAULT_GAMES_PER_MATCH),
            gibson_rule_enabled=data.get("gibson_rule_enabled", False),
            prize_count=data.get("prize_count"),
            divisions=list(data.get("divisions", [])),
            bye_spread=data.get("bye_spread", BYE_SPREAD),
            forfeit_spread=data.get("forfeit_spread", FORFEIT_SPREAD),
            max_spread=data.get("max_spread"),
            reserved_tables={
                str(k): int(v) for k, v in data.get("reserved_tables", {}).items()
            },
            round_robin_cycles=data.get("round_robin_cycles", 1),
        )
