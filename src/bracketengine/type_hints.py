"""Type hints used in Bracket Engine."""

from typing import Any, Dict, List, Optional

# A player slot may be empty until an upstream match resolves
MaybePlayer = Optional[str]
# Player names in seed order
PlayerList = List[str]
# Bracket positions after seeding; None marks a bye slot
SeededSlots = List[MaybePlayer]
# JSON-compatible serialized form of a model
Snapshot = Dict[str, Any]
