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

# --- Constants ---
SAVE_FILE_EXTENSION = ".json"

# Sentinel opponent for a pairing without a real opponent
BYE = "BYE"

# Competitor statuses
STATUS_ACTIVE = "active"
STATUS_PAUSED = "paused"
STATUS_WITHDRAWN = "withdrawn"
COMPETITOR_STATUSES = (STATUS_ACTIVE, STATUS_PAUSED, STATUS_WITHDRAWN)

# Tournament types
TYPE_INDIVIDUAL = "individual"
TYPE_TEAM = "team"
TYPE_LEAGUE = "league"
TOURNAMENT_TYPES = (TYPE_INDIVIDUAL, TYPE_TEAM, TYPE_LEAGUE)

# Standings modes
MODE_INDIVIDUAL = "individual"
MODE_LEAGUE = "league"

# Pairing algorithms
ALGO_SWISS = "swiss"
ALGO_ENHANCED_SWISS = "enhanced_swiss"
ALGO_KING_OF_THE_HILL = "king_of_the_hill"
ALGO_ROUND_ROBIN = "round_robin"
ALGO_TEAM_SWISS = "team_swiss"
ALGO_RANDOM = "random"
PAIRING_ALGORITHMS = (
    ALGO_SWISS,
    ALGO_ENHANCED_SWISS,
    ALGO_KING_OF_THE_HILL,
    ALGO_ROUND_ROBIN,
    ALGO_TEAM_SWISS,
    ALGO_RANDOM,
)
DEFAULT_ALGORITHM = ALGO_SWISS

# Default division when a tournament declares none
DEFAULT_DIVISION = "Open"

# Standard scores for generated results
BYE_SPREAD = 50
FORFEIT_SPREAD = 50

# Games in a league match (best of N)
DEFAULT_GAMES_PER_MATCH = 15

# Supported round robin field sizes
ROUND_ROBIN_MIN_FIELD = 2
ROUND_ROBIN_MAX_FIELD = 15

# Upper bound on search steps spent looking for a rematch-free pairing
MAX_BACKTRACK_STEPS = 20000

# Seed used for competitors registered without one
UNSEEDED = 10**6

# Environment variable naming a folder for log files
LOG_DIR_ENV = "TOURNEY_PAIRING_LOG_DIR"
