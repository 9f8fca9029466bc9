from bracketengine.models.tournament.match import HistoryEntry, Match
from bracketengine.models.tournament.standings import (
    RoundRobinStanding,
    SwissStanding,
)
from bracketengine.models.tournament.submission import (
    ConnectedScoreboard,
    PendingScoreSubmission,
)
from bracketengine.models.tournament.tournament_config import (
    MatchConfiguration,
    StageConfig,
    TournamentConfig,
)

__all__ = [
    "Match",
    "HistoryEntry",
    "SwissStanding",
    "RoundRobinStanding",
    "PendingScoreSubmission",
    "ConnectedScoreboard",
    "TournamentConfig",
    "StageConfig",
    "MatchConfiguration",
]
