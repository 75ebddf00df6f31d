"""Read calls against the Futchain precompile.

Covers the connectivity probe, single-entity reads (match, league, team), the
unfinished-match discovery call and the cross-reference pass that follows a
match to its league and teams.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from web3 import Web3

from futchain_abi import League, Match, Team, output_names

DEFAULT_ENTITY_ID = 1
FALLBACK_MATCH_IDS = (1, 2, 3)
WORKING_SET_SIZE = 5


class FutchainError(Exception):
    """Base error for precompile checks."""


class ConnectivityError(FutchainError):
    """The RPC endpoint is unreachable or the chain cannot be identified."""


class EntityLookupError(FutchainError):
    """A single contract read failed."""

    def __init__(self, operation: str, args: tuple, cause: Exception):
        self.operation = operation
        self.call_args = args
        self.cause = cause
        call = f"{operation}({', '.join(str(a) for a in args)})"
        super().__init__(f"{call} failed: {cause}")


@dataclass(frozen=True)
class ChainInfo:
    chain_id: int
    block_number: int


@dataclass(frozen=True)
class AddressInfo:
    code: bytes
    balance: int


@dataclass(frozen=True)
class StepResult:
    """Outcome of one read in the cross-reference pass."""
    operation: str
    argument: int
    value: Any = None
    error: Optional[EntityLookupError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def connect(rpc_url: str, timeout: float = 30) -> Web3:
    return Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))


def precompile_contract(w3: Web3, address: str, abi: list):
    return w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)


def probe(w3) -> ChainInfo:
    """Check the endpoint answers and report chain id and head block."""
    try:
        if not w3.is_connected():
            raise ConnectivityError("RPC endpoint is not reachable")
        return ChainInfo(chain_id=w3.eth.chain_id, block_number=w3.eth.block_number)
    except ConnectivityError:
        raise
    except Exception as e:
        raise ConnectivityError(str(e)) from e


def inspect_address(w3, address: str) -> AddressInfo:
    checksum = Web3.to_checksum_address(address)
    try:
        code = w3.eth.get_code(checksum)
        balance = w3.eth.get_balance(checksum)
    except Exception as e:
        raise EntityLookupError("inspectAddress", (address,), e) from e
    return AddressInfo(code=bytes(code), balance=balance)


def _call(contract, fn_name: str, *args):
    try:
        return getattr(contract.functions, fn_name)(*args).call()
    except Exception as e:
        raise EntityLookupError(fn_name, args, e) from e


def _read_record(contract, fn_name: str, record_type, entity_id):
    values = _call(contract, fn_name, entity_id)
    try:
        return record_type.from_values(output_names(contract.abi, fn_name), values)
    except (KeyError, TypeError) as e:
        raise EntityLookupError(fn_name, (entity_id,), e) from e


def read_match(contract, match_id) -> Match:
    return _read_record(contract, "getMatch", Match, match_id)


def read_league(contract, league_id) -> League:
    return _read_record(contract, "getLeague", League, league_id)


def read_team(contract, team_id) -> Team:
    return _read_record(contract, "getTeam", Team, team_id)


def read_unfinished_matches(contract) -> list[int]:
    return [int(match_id) for match_id in _call(contract, "getUnfinishedMatches")]


def select_working_set(match_ids, limit: int = WORKING_SET_SIZE, fallback=FALLBACK_MATCH_IDS) -> list[int]:
    """Pick the match ids the cross-reference pass should walk.

    An empty discovery result falls back to a fixed placeholder set so the
    entity reads still get exercised on a chain with no live matches.
    """
    if not match_ids:
        return list(fallback)
    return list(match_ids[:limit])


def defaults_from_match(match: Optional[Match], league_id: int = DEFAULT_ENTITY_ID,
                        team_id: int = DEFAULT_ENTITY_ID) -> tuple[int, int]:
    """League and team ids to use for standalone reads after reading ``match``."""
    if match is None:
        return league_id, team_id
    if match.league_id > 0:
        league_id = match.league_id
    if match.home_id > 0:
        team_id = match.home_id
    return league_id, team_id


def _step(operation: str, argument: int, read: Callable[[], Any]) -> StepResult:
    try:
        return StepResult(operation, argument, value=read())
    except EntityLookupError as e:
        return StepResult(operation, argument, error=e)


def cross_reference(contract, match_ids, on_step: Optional[Callable[[StepResult], None]] = None) -> list[StepResult]:
    """Read each match, then its league and both teams.

    A zero id means "absent" and is never looked up. When home and away ids
    coincide the team is read once. A failed read only skips the steps that
    depend on its value.
    """
    steps = []

    def record(step: StepResult) -> StepResult:
        steps.append(step)
        if on_step is not None:
            on_step(step)
        return step

    for match_id in match_ids:
        match_step = record(_step("getMatch", match_id, lambda: read_match(contract, match_id)))
        if not match_step.ok:
            continue
        match = match_step.value

        if match.league_id > 0:
            record(_step("getLeague", match.league_id, lambda: read_league(contract, match.league_id)))
        if match.home_id > 0:
            record(_step("getTeam", match.home_id, lambda: read_team(contract, match.home_id)))
        if match.away_id > 0 and match.away_id != match.home_id:
            record(_step("getTeam", match.away_id, lambda: read_team(contract, match.away_id)))

    return steps
