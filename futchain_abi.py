"""Interface description and record types for the Futchain sports-data precompile."""

import json
import re
from dataclasses import dataclass, fields
from pathlib import Path

# Fixed precompile address
PRECOMPILE_ADDRESS = "0x0000000000000000000000000000000000000807"

FUTCHAIN_ABI = [
    {
        "type": "function",
        "name": "getMatch",
        "inputs": [{"name": "matchId", "type": "uint256", "internalType": "uint256"}],
        "outputs": [{
            "components": [
                {"name": "id", "type": "uint256", "internalType": "uint256"},
                {"name": "leagueId", "type": "uint256", "internalType": "uint256"},
                {"name": "name", "type": "string", "internalType": "string"},
                {"name": "time", "type": "string", "internalType": "string"},
                {"name": "homeId", "type": "uint256", "internalType": "uint256"},
                {"name": "awayId", "type": "uint256", "internalType": "uint256"},
                {"name": "homeScore", "type": "uint256", "internalType": "uint256"},
                {"name": "awayScore", "type": "uint256", "internalType": "uint256"},
                {"name": "homeName", "type": "string", "internalType": "string"},
                {"name": "awayName", "type": "string", "internalType": "string"},
                {"name": "started", "type": "bool", "internalType": "bool"},
                {"name": "finished", "type": "bool", "internalType": "bool"},
                {"name": "cancelled", "type": "bool", "internalType": "bool"}
            ],
            "internalType": "struct MatchData",
            "name": "",
            "type": "tuple"
        }],
        "stateMutability": "view"
    },
    {
        "type": "function",
        "name": "getLeague",
        "inputs": [{"name": "leagueId", "type": "uint256", "internalType": "uint256"}],
        "outputs": [{
            "components": [
                {"name": "id", "type": "uint256", "internalType": "uint256"},
                {"name": "name", "type": "string", "internalType": "string"},
                {"name": "groupName", "type": "string", "internalType": "string"}
            ],
            "internalType": "struct LeagueData",
            "name": "",
            "type": "tuple"
        }],
        "stateMutability": "view"
    },
    {
        "type": "function",
        "name": "getTeam",
        "inputs": [{"name": "teamId", "type": "uint256", "internalType": "uint256"}],
        "outputs": [{
            "components": [
                {"name": "id", "type": "uint256", "internalType": "uint256"},
                {"name": "name", "type": "string", "internalType": "string"}
            ],
            "internalType": "struct TeamData",
            "name": "",
            "type": "tuple"
        }],
        "stateMutability": "view"
    },
    {
        "type": "function",
        "name": "getUnfinishedMatches",
        "inputs": [],
        "outputs": [{"name": "ids", "type": "uint256[]", "internalType": "uint256[]"}],
        "stateMutability": "view"
    },
]

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def load_abi(path) -> list:
    """Load an interface description from a JSON file."""
    with open(Path(path)) as f:
        data = json.load(f)
    # Hardhat/foundry artifacts wrap the ABI
    if isinstance(data, dict) and "abi" in data:
        return data["abi"]
    return data


def function_names(abi: list) -> list[str]:
    return [entry["name"] for entry in abi if entry.get("type", "function") == "function"]


def _function_entry(abi: list, fn_name: str) -> dict:
    for entry in abi:
        if entry.get("type", "function") == "function" and entry.get("name") == fn_name:
            return entry
    raise KeyError(f"function {fn_name} not found in ABI")


def input_types(abi: list, fn_name: str) -> list[str]:
    return [arg["type"] for arg in _function_entry(abi, fn_name)["inputs"]]


def output_names(abi: list, fn_name: str) -> list[str]:
    """Component names of a function's single tuple output, in ABI order."""
    outputs = _function_entry(abi, fn_name)["outputs"]
    if len(outputs) == 1 and outputs[0].get("components"):
        return [c["name"] for c in outputs[0]["components"]]
    return [o["name"] for o in outputs]


def snake_case(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


class _Record:
    @classmethod
    def from_values(cls, names, values):
        """Build a record from decoded call values keyed by ABI component names.

        Unknown components are ignored so a newer interface description with
        extra fields still decodes. A missing field raises ``KeyError``.
        """
        by_field = {snake_case(name): value for name, value in zip(names, values)}
        return cls(**{f.name: by_field[f.name] for f in fields(cls)})


@dataclass(frozen=True)
class Match(_Record):
    id: int
    league_id: int
    name: str
    time: str
    home_id: int
    away_id: int
    home_score: int
    away_score: int
    home_name: str
    away_name: str
    started: bool
    finished: bool
    cancelled: bool


@dataclass(frozen=True)
class League(_Record):
    id: int
    name: str
    group_name: str


@dataclass(frozen=True)
class Team(_Record):
    id: int
    name: str
