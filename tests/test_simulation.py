import pytest

from bracketengine.exceptions import InvalidConfigurationException
from bracketengine.models.enums import MatchStatus, TournamentStage, TournamentType
from bracketengine.models.tournament.tournament_config import StageConfig
from bracketengine.simulation import SimulationConfig, TournamentSimulator


@pytest.mark.parametrize("tournament_type", list(TournamentType))
@pytest.mark.parametrize("num_players", [4, 7, 12])
def test_every_format_runs_to_completion(tournament_type, num_players):
    simulator = TournamentSimulator(
        SimulationConfig(
            tournament_type,
            num_players,
            seed=num_players,
            stage_config=StageConfig(finals_size=4),
        )
    )
    manager = simulator.run()
    tournament = manager.tournament

    assert tournament.is_complete
    assert tournament.winner in tournament.players
    assert all(m.status is MatchStatus.COMPLETE for m in tournament.matches)
    assert not manager.has_pending_submissions
    assert all(d.is_available for d in manager.devices.values())


@pytest.mark.parametrize(
    "tournament_type", [TournamentType.SWISS, TournamentType.ROUND_ROBIN]
)
@pytest.mark.parametrize(
    "finals_type",
    [TournamentType.SINGLE_ELIMINATION, TournamentType.DOUBLE_ELIMINATION],
)
def test_multi_stage_runs_through_finals(tournament_type, finals_type):
    config = SimulationConfig(
        tournament_type,
        num_players=10,
        seed=5,
        stage_config=StageConfig(
            is_multi_stage=True, finals_type=finals_type, finals_size=4
        ),
    )
    tournament = TournamentSimulator(config).run().tournament

    finalists = tournament.roster_for_stage(TournamentStage.FINALS)
    assert len(finalists) == 4
    assert tournament.winner in finalists


def test_rejections_are_resubmitted():
    simulator = TournamentSimulator(
        SimulationConfig(num_players=16, seed=3, reject_rate=0.5)
    )
    manager = simulator.run()

    assert manager.tournament.is_complete
    assert simulator.rejections > 0
    assert simulator.submissions == 15 + simulator.rejections


def test_same_seed_same_tournament():
    def champion():
        config = SimulationConfig(TournamentType.SWISS, num_players=9, seed=42)
        return TournamentSimulator(config).run().tournament.winner

    assert champion() == champion()


@pytest.mark.parametrize(
    "kwargs", [{"reject_rate": 1.0}, {"num_devices": 0}, {"max_score": 0}]
)
def test_invalid_simulation_config(kwargs):
    with pytest.raises(InvalidConfigurationException):
        SimulationConfig(**kwargs)
