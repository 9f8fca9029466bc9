import random

import pytest

from bracketengine.exceptions import (
    InvalidConfigurationException,
    InvalidPlayerListException,
    InvalidRoomCodeException,
)
from bracketengine.models.enums import Generation, MatchType, TournamentType
from bracketengine.models.tournament.tournament_config import (
    StageConfig,
    TournamentConfig,
)
from bracketengine.utils.validation import (
    format_room_code,
    generate_room_code,
    validate_player_names,
    validate_room_code,
    validate_room_code_strict,
    validate_scoring_config,
    validate_stage_config,
)


@pytest.mark.parametrize("code", ["847291", " 847291 ", "847-291", "000000"])
def test_valid_room_codes(code):
    result = validate_room_code(code)
    assert result
    assert result.sanitized_value == code.strip().replace("-", "")


@pytest.mark.parametrize("code", [None, "", "12345", "1234567", "84a291", "84-72-91x"])
def test_invalid_room_codes(code):
    result = validate_room_code(code)
    assert not result
    assert result.error_message


def test_strict_room_code_raises():
    assert validate_room_code_strict("123-456") == "123456"
    with pytest.raises(InvalidRoomCodeException):
        validate_room_code_strict("abc")


def test_generated_room_codes_are_zero_padded():
    codes = {generate_room_code(random.Random(seed)) for seed in range(50)}
    assert all(len(code) == 6 and code.isdigit() for code in codes)


@pytest.mark.parametrize(
    "raw,formatted",
    [("847291", "847-291"), ("84", "84"), ("8472", "847-2"), ("847-291", "847-291")],
)
def test_format_room_code(raw, formatted):
    assert format_room_code(raw) == formatted


def test_player_names_are_stripped():
    assert validate_player_names([" Ana ", "Ben"]) == ["Ana", "Ben"]


@pytest.mark.parametrize(
    "players,minimum",
    [(["Ana"], 2), (["Ana", "Ana"], 2), (["Ana", ""], 2), (["A", "B", "C"], 4)],
)
def test_bad_player_lists(players, minimum):
    with pytest.raises(InvalidPlayerListException):
        validate_player_names(players, minimum)


def test_stage_config_is_ignored_without_finals():
    validate_stage_config(
        TournamentType.SWISS, StageConfig(finals_size=32), player_count=4
    )


def test_group_round_robin_always_checks_finals():
    with pytest.raises(InvalidConfigurationException):
        validate_stage_config(
            TournamentType.GROUP_ROUND_ROBIN, StageConfig(finals_size=3), 8
        )


def test_scoring_config_checks_finals_override():
    validate_scoring_config(
        TournamentConfig(Generation.BURST, MatchType.POINTS_3), StageConfig()
    )
    with pytest.raises(InvalidConfigurationException):
        validate_scoring_config(
            TournamentConfig(Generation.BURST, MatchType.POINTS_3),
            StageConfig(finals_match_type=MatchType.POINTS_7),
        )
