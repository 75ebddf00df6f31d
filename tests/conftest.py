import pytest
from web3.exceptions import ContractLogicError

from futchain_abi import FUTCHAIN_ABI, PRECOMPILE_ADDRESS


def match_values(match_id, league_id=0, home_id=0, away_id=0, home_name="Home", away_name="Away",
                 home_score=0, away_score=0, started=False, finished=False, cancelled=False):
    """Decoded getMatch output in ABI component order."""
    return (
        match_id,
        league_id,
        f"{home_name} - {away_name}",
        "09.09.2025 20:45",
        home_id,
        away_id,
        home_score,
        away_score,
        home_name,
        away_name,
        started,
        finished,
        cancelled,
    )


class FakeCall:
    def __init__(self, contract, name, args):
        self.contract = contract
        self.name = name
        self.args = args

    def call(self):
        self.contract.calls.append((self.name, *self.args))
        return self.contract.respond(self.name, self.args)

    def estimate_gas(self):
        self.contract.estimates.append((self.name, *self.args))
        gas = self.contract.gas.get(self.name, 21000)
        if isinstance(gas, Exception):
            raise gas
        return gas


class FakeFunctions:
    def __init__(self, contract):
        self._contract = contract

    def getMatch(self, match_id):
        return FakeCall(self._contract, "getMatch", (match_id,))

    def getLeague(self, league_id):
        return FakeCall(self._contract, "getLeague", (league_id,))

    def getTeam(self, team_id):
        return FakeCall(self._contract, "getTeam", (team_id,))

    def getUnfinishedMatches(self):
        return FakeCall(self._contract, "getUnfinishedMatches", ())


class FakeContract:
    """Stands in for a web3 contract bound to the precompile.

    Unknown ids revert the way the precompile does when the keeper has no
    record for them.
    """

    def __init__(self, matches=None, leagues=None, teams=None, unfinished=(), gas=None):
        self.address = PRECOMPILE_ADDRESS
        self.abi = FUTCHAIN_ABI
        self.matches = matches or {}
        self.leagues = leagues or {}
        self.teams = teams or {}
        self.unfinished = unfinished
        self.gas = gas or {}
        self.calls = []
        self.estimates = []
        self.functions = FakeFunctions(self)

    def respond(self, name, args):
        if name == "getUnfinishedMatches":
            if isinstance(self.unfinished, Exception):
                raise self.unfinished
            return list(self.unfinished)
        table = {"getMatch": self.matches, "getLeague": self.leagues, "getTeam": self.teams}[name]
        (entity_id,) = args
        if entity_id not in table:
            raise ContractLogicError(f"execution reverted: failed to get {name[3:].lower()}")
        return table[entity_id]

    def calls_to(self, name):
        return [call for call in self.calls if call[0] == name]


class FakeEth:
    def __init__(self, chain_id=9000, block_number=1234, raw_results=None, fail=False):
        self._chain_id = chain_id
        self._block_number = block_number
        self.raw_results = raw_results or {}
        self.fail = fail
        self.raw_calls = []

    @property
    def chain_id(self):
        if self.fail:
            raise ConnectionError("connection refused")
        return self._chain_id

    @property
    def block_number(self):
        if self.fail:
            raise ConnectionError("connection refused")
        return self._block_number

    def get_code(self, address):
        return b""

    def get_balance(self, address):
        return 0

    def contract(self, address, abi):
        return FakeContract()

    def call(self, tx):
        self.raw_calls.append(tx)
        # keyed by 4-byte selector
        selector = tx["data"][:10]
        if selector not in self.raw_results:
            raise ContractLogicError("execution reverted")
        return self.raw_results[selector]


class FakeWeb3:
    def __init__(self, connected=True, **eth_kwargs):
        self.connected = connected
        self.eth = FakeEth(**eth_kwargs)

    def is_connected(self):
        return self.connected


@pytest.fixture
def league_table():
    return {5: (5, "Premier League", "England")}


@pytest.fixture
def team_table():
    return {9: (9, "Arsenal"), 11: (11, "Chelsea")}
