# Bracket Engine
# Copyright (C) 2025  Bracket Engine developers
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

# Opponent marker recorded in Swiss standings for a bye round
BYE = "BYE"

# Standing points
WIN_POINTS = 1.0
DRAW_POINTS = 0.5

# A bye counts as an opponent of average strength, scaled down
BYE_BUCHHOLZ_FACTOR = 0.5

# Player count limits
MIN_PLAYERS = 2
MIN_GROUP_ROUND_ROBIN_PLAYERS = 4

# Finals sizes accepted for multi-stage and group tournaments
VALID_FINALS_SIZES = (2, 4, 8, 16, 32)
DEFAULT_FINALS_SIZE = 8

# Room codes are six numeric digits
ROOM_CODE_LENGTH = 6

# Scoreboards not heard from within this window are dropped
DEVICE_TIMEOUT_SECONDS = 30.0

# Placeholder shown for an empty match slot
TBD_PLAYER = "TBD"
