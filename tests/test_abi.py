import json

import pytest

from futchain_abi import (
    FUTCHAIN_ABI,
    League,
    Match,
    Team,
    function_names,
    input_types,
    load_abi,
    output_names,
    snake_case,
)
from conftest import match_values


def test_abi_exposes_the_four_view_functions():
    assert function_names(FUTCHAIN_ABI) == ["getMatch", "getLeague", "getTeam", "getUnfinishedMatches"]
    assert input_types(FUTCHAIN_ABI, "getMatch") == ["uint256"]
    assert input_types(FUTCHAIN_ABI, "getUnfinishedMatches") == []


def test_output_names_follow_tuple_components():
    assert output_names(FUTCHAIN_ABI, "getLeague") == ["id", "name", "groupName"]
    assert output_names(FUTCHAIN_ABI, "getUnfinishedMatches") == ["ids"]


def test_unknown_function_raises_key_error():
    with pytest.raises(KeyError):
        input_types(FUTCHAIN_ABI, "getPlayer")


def test_snake_case():
    assert snake_case("leagueId") == "league_id"
    assert snake_case("groupName") == "group_name"
    assert snake_case("id") == "id"


def test_match_from_values_maps_camel_case_fields():
    values = match_values(42, league_id=5, home_id=9, away_id=11, home_name="Arsenal",
                          away_name="Chelsea", home_score=2, away_score=1, started=True)
    match = Match.from_values(output_names(FUTCHAIN_ABI, "getMatch"), values)

    assert match.id == 42
    assert match.league_id == 5
    assert match.home_id == 9
    assert match.away_id == 11
    assert match.name == "Arsenal - Chelsea"
    assert match.home_score == 2
    assert match.started is True
    assert match.finished is False


def test_extra_components_are_ignored():
    team = Team.from_values(["id", "name", "shortName"], (9, "Arsenal", "ARS"))
    assert team == Team(id=9, name="Arsenal")


def test_missing_component_raises():
    with pytest.raises(KeyError):
        League.from_values(["id", "name"], (5, "Premier League"))


def test_load_abi_plain_list(tmp_path):
    path = tmp_path / "abi.json"
    path.write_text(json.dumps(FUTCHAIN_ABI))
    assert load_abi(path) == FUTCHAIN_ABI


def test_load_abi_from_artifact(tmp_path):
    path = tmp_path / "Futchain.json"
    path.write_text(json.dumps({"contractName": "Futchain", "abi": FUTCHAIN_ABI}))
    assert function_names(load_abi(path))[0] == "getMatch"
