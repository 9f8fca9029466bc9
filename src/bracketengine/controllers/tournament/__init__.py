"""Tournament controllers: results, round progression and tiebreaks."""

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

from bracketengine.controllers.tournament.result_recorder import ResultRecorder
from bracketengine.controllers.tournament.round_manager import RoundManager
from bracketengine.controllers.tournament.tiebreak_calculator import (
    TiebreakCalculator,
)

__all__ = ["ResultRecorder", "RoundManager", "TiebreakCalculator"]
