"""Type hints used in Tourney Pairing."""

from typing import Dict, List, Literal, Tuple

# Competitor status literals (for type hints)
Status = Literal["active", "paused", "withdrawn"]

# Tournament format literals
TournamentType = Literal["individual", "team", "league"]
StandingsMode = Literal["individual", "league"]

# Which side of a pairing moves first: 1 for player1, 2 for player2
StartSide = Literal[1, 2]

# Competitor or team ids, in ranked order
RankedIds = List[str]
# Pair of ids produced by the pairing core
IdPair = Tuple[str, str]
# Full schedule keyed by round number
Schedule = Dict[int, List["Pairing"]]

#  LocalWords:  IdPair
