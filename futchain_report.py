#!/usr/bin/env -S uv run --quiet --script
# /// script
# dependencies = [
#   "web3>=7.0.0",
#   "eth-abi>=5.0.0",
# ]
# ///
"""
Diagnostic run against the Futchain sports-data precompile.

Usage:
  # Full run against a local node
  ./futchain_report.py

  # Single phases (connectivity is always checked first)
  ./futchain_report.py --phase match --match-id 42
  ./futchain_report.py --phase gas --phase raw

  # Another endpoint / interface description
  FUTCHAIN_RPC_URL=http://node:8545 ./futchain_report.py --abi abi.json
"""

import argparse
import os
import sys
from decimal import Decimal

from futchain_abi import FUTCHAIN_ABI, PRECOMPILE_ADDRESS, function_names, load_abi
from futchain_reader import (
    DEFAULT_ENTITY_ID,
    ConnectivityError,
    FutchainError,
    connect,
    cross_reference,
    defaults_from_match,
    inspect_address,
    precompile_contract,
    probe,
    read_league,
    read_match,
    read_team,
    read_unfinished_matches,
    select_working_set,
)
from futchain_sampling import DEFAULT_ITERATIONS, estimate_gas, raw_call, sample_latency

# Configuration
RPC_URL = os.getenv("FUTCHAIN_RPC_URL", "http://localhost:8545")
CONTRACT_ADDRESS = os.getenv("FUTCHAIN_PRECOMPILE_ADDRESS", PRECOMPILE_ADDRESS)
ABI_PATH = os.getenv("FUTCHAIN_ABI_PATH")
# Seconds, converted by argparse
RPC_TIMEOUT = os.getenv("FUTCHAIN_RPC_TIMEOUT", "30")

DISCOVERY_PREVIEW = 10

PHASES = ["debug", "discovery", "match", "league", "team", "gas", "raw", "perf", "cross"]


def wei_to_eth(wei_amount: int) -> str:
    """Convert wei to ETH with 4 decimal places."""
    eth = Decimal(wei_amount) / Decimal(10**18)
    return f"{eth:.4f}"


def print_header(text: str):
    """Print a section header."""
    print(f"\n{text}")
    print("=" * 60)


def print_subheader(text: str):
    """Print a subsection header."""
    print(f"\n{text}")
    print("-" * 60)


def check_connection(w3) -> bool:
    """Probe the endpoint; False means nothing else may run."""
    print("🔗 Testing connection...")
    try:
        info = probe(w3)
    except ConnectivityError as e:
        print(f"❌ Connection failed, cannot proceed: {e}")
        return False
    print(f"✅ Connected to chain {info.chain_id}, block {info.block_number}")
    return True


def show_debug_info(w3, abi: list, address: str = CONTRACT_ADDRESS, rpc_url: str = RPC_URL):
    """Print configuration plus code and balance at the precompile address."""
    print_subheader("🔍 Debug Information")
    print(f"  Precompile Address: {address}")
    print(f"  RPC URL: {rpc_url}")
    print(f"  ABI Functions: {', '.join(function_names(abi))}")
    try:
        info = inspect_address(w3, address)
    except FutchainError as e:
        print(f"  Address check failed: {e}")
        return None
    # Precompiles carry no bytecode
    print(f"  Code at address: 0x{info.code.hex()}")
    print(f"  Balance: {wei_to_eth(info.balance)} ETH")
    return info


def print_match(match):
    """Print a match record."""
    print("✅ Match data received:")
    print("  📊 Match Details:")
    print(f"    {'ID:':<12} {match.id}")
    print(f"    {'League ID:':<12} {match.league_id}")
    print(f"    {'Name:':<12} {match.name}")
    print(f"    {'Time:':<12} {match.time}")
    print("  🏠 Home Team:")
    print(f"    {'ID:':<12} {match.home_id}")
    print(f"    {'Name:':<12} {match.home_name}")
    print(f"    {'Score:':<12} {match.home_score}")
    print("  🚗 Away Team:")
    print(f"    {'ID:':<12} {match.away_id}")
    print(f"    {'Name:':<12} {match.away_name}")
    print(f"    {'Score:':<12} {match.away_score}")
    print("  📊 Status:")
    print(f"    {'Started:':<12} {match.started}")
    print(f"    {'Finished:':<12} {match.finished}")
    print(f"    {'Cancelled:':<12} {match.cancelled}")


def print_league(league):
    """Print a league record."""
    print("✅ League data received:")
    print(f"  {'ID:':<12} {league.id}")
    print(f"  {'Name:':<12} {league.name}")
    print(f"  {'Group Name:':<12} {league.group_name}")


def print_team(team):
    """Print a team record."""
    print("✅ Team data received:")
    print(f"  {'ID:':<12} {team.id}")
    print(f"  {'Name:':<12} {team.name}")


def check_unfinished_matches(contract) -> list[int]:
    """Discover unfinished match ids; an empty list on failure."""
    print("\n⏰ Testing getUnfinishedMatches()...")
    try:
        match_ids = read_unfinished_matches(contract)
    except FutchainError as e:
        print(f"❌ {e}")
        return []
    print("✅ Unfinished matches received:")
    print(f"  Count: {len(match_ids)}")
    if match_ids:
        shown = ", ".join(str(i) for i in match_ids[:DISCOVERY_PREVIEW])
        more = "..." if len(match_ids) > DISCOVERY_PREVIEW else ""
        print(f"  IDs: [{shown}{more}]")
        print(f"  🎯 Using match ID {match_ids[0]} for subsequent tests")
    return match_ids


def check_match(contract, match_id: int = DEFAULT_ENTITY_ID):
    """Read and print one match."""
    print(f"\n🏈 Testing getMatch({match_id})...")
    try:
        match = read_match(contract, match_id)
    except FutchainError as e:
        print(f"❌ {e}")
        return None
    print_match(match)
    return match


def check_league(contract, league_id: int = DEFAULT_ENTITY_ID):
    """Read and print one league."""
    print(f"\n🏆 Testing getLeague({league_id})...")
    try:
        league = read_league(contract, league_id)
    except FutchainError as e:
        print(f"❌ {e}")
        return None
    print_league(league)
    return league


def check_team(contract, team_id: int = DEFAULT_ENTITY_ID):
    """Read and print one team."""
    print(f"\n👥 Testing getTeam({team_id})...")
    try:
        team = read_team(contract, team_id)
    except FutchainError as e:
        print(f"❌ {e}")
        return None
    print_team(team)
    return team


def _signature(name: str, args: tuple) -> str:
    return f"{name}({', '.join(str(a) for a in args)})"


def _operations(match_id: int, league_id: int, team_id: int):
    return [
        ("getMatch", (match_id,)),
        ("getLeague", (league_id,)),
        ("getTeam", (team_id,)),
        ("getUnfinishedMatches", ()),
    ]


def check_gas_estimation(contract, match_id: int = DEFAULT_ENTITY_ID, league_id: int = DEFAULT_ENTITY_ID,
                         team_id: int = DEFAULT_ENTITY_ID):
    """Estimate gas for each precompile function."""
    print("\n⛽ Testing gas estimation...")
    estimates = []
    for name, args in _operations(match_id, league_id, team_id):
        estimate = estimate_gas(name, lambda: getattr(contract.functions, name)(*args))
        if estimate.error is not None:
            print(f"  {_signature(name, args)}: estimation failed - {estimate.error}")
        else:
            print(f"  {name}: {estimate.gas} gas")
        estimates.append(estimate)
    return estimates


def check_raw_calls(w3, abi: list, address: str = CONTRACT_ADDRESS, match_id: int = DEFAULT_ENTITY_ID,
                    league_id: int = DEFAULT_ENTITY_ID, team_id: int = DEFAULT_ENTITY_ID):
    """Issue hand-encoded calls and print the raw return data."""
    print("\n🔧 Testing raw calls...")
    results = []
    for name, args in _operations(match_id, league_id, team_id):
        result = raw_call(w3, address, abi, name, args)
        if result.error is not None:
            print(f"  {_signature(name, args)}: raw call failed - {result.error}")
        else:
            print(f"  {name}:")
            print(f"    Call data: 0x{result.calldata.hex()}")
            print(f"    Raw result: {result.preview}...")
            print(f"    Result length: {result.byte_length} bytes")
        results.append(result)
    return results


def check_performance(contract, match_id: int = DEFAULT_ENTITY_ID, league_id: int = DEFAULT_ENTITY_ID,
                      team_id: int = DEFAULT_ENTITY_ID, iterations: int = DEFAULT_ITERATIONS):
    """Sample latency of each read."""
    print("\n🚀 Performance testing...")
    readers = [
        ("getMatch", lambda: read_match(contract, match_id)),
        ("getLeague", lambda: read_league(contract, league_id)),
        ("getTeam", lambda: read_team(contract, team_id)),
        ("getUnfinishedMatches", lambda: read_unfinished_matches(contract)),
    ]
    all_stats = []
    for name, fn in readers:
        print(f"  Testing {name} ({iterations} iterations)...")
        stats = sample_latency(
            name, fn, iterations=iterations,
            on_failure=lambda i, e: print(f"    Iteration {i} failed: {e}"),
        )
        if stats.samples_ms:
            print(f"    Average: {stats.average:.2f}ms, Min: {stats.minimum:.2f}ms, Max: {stats.maximum:.2f}ms")
        else:
            print("    No successful iterations")
        all_stats.append(stats)
    return all_stats


def _print_step(step):
    if step.operation == "getMatch":
        print(f"\n--- Testing match ID {step.argument} ---")
    if not step.ok:
        print(f"❌ {step.error}")
    elif step.operation == "getMatch":
        print_match(step.value)
    elif step.operation == "getLeague":
        print_league(step.value)
    else:
        print_team(step.value)


def check_cross_reference(contract, match_ids):
    """Follow discovered matches to their leagues and teams."""
    print("\n🎮 Testing with real data from unfinished matches...")
    working_set = select_working_set(match_ids)
    if not match_ids:
        print("  No unfinished matches found, using fallback IDs")
    print(f"Testing with match IDs: [{', '.join(str(i) for i in working_set)}]")
    return cross_reference(contract, working_set, on_step=_print_step)


def run_all(w3, contract, abi: list, address: str = CONTRACT_ADDRESS, rpc_url: str = RPC_URL,
            iterations: int = DEFAULT_ITERATIONS) -> bool:
    """Run every phase in order. Returns False only when the endpoint is unreachable."""
    print_header("🔬 Futchain Precompile Test Suite")

    if not check_connection(w3):
        return False

    show_debug_info(w3, abi, address=address, rpc_url=rpc_url)

    print("\n🎯 Step 1: Getting real match data...")
    match_ids = check_unfinished_matches(contract)
    match_id = match_ids[0] if match_ids else DEFAULT_ENTITY_ID

    print("\n🎯 Step 2: Testing with real match data...")
    match = check_match(contract, match_id)
    league_id, team_id = defaults_from_match(match)
    if match is not None:
        print(f"  🎯 Using league ID {league_id} and team ID {team_id} for subsequent tests")
    check_league(contract, league_id)
    check_team(contract, team_id)

    print("\n🎯 Step 3: Performance and detailed testing...")
    check_gas_estimation(contract, match_id, league_id, team_id)
    check_raw_calls(w3, abi, address, match_id, league_id, team_id)
    check_performance(contract, match_id, league_id, team_id, iterations=iterations)
    check_cross_reference(contract, match_ids)

    print("\n🎉 All tests completed!")
    return True


def run_phases(w3, contract, abi: list, phases: list[str], address: str = CONTRACT_ADDRESS,
               rpc_url: str = RPC_URL, match_id: int = DEFAULT_ENTITY_ID, league_id: int = DEFAULT_ENTITY_ID,
               team_id: int = DEFAULT_ENTITY_ID, iterations: int = DEFAULT_ITERATIONS) -> bool:
    """Run selected phases with explicit ids, after the connectivity check."""
    if not check_connection(w3):
        return False

    match_ids = [match_id]
    for phase in PHASES:
        if phase not in phases:
            continue
        if phase == "debug":
            show_debug_info(w3, abi, address=address, rpc_url=rpc_url)
        elif phase == "discovery":
            match_ids = check_unfinished_matches(contract)
        elif phase == "match":
            check_match(contract, match_id)
        elif phase == "league":
            check_league(contract, league_id)
        elif phase == "team":
            check_team(contract, team_id)
        elif phase == "gas":
            check_gas_estimation(contract, match_id, league_id, team_id)
        elif phase == "raw":
            check_raw_calls(w3, abi, address, match_id, league_id, team_id)
        elif phase == "perf":
            check_performance(contract, match_id, league_id, team_id, iterations=iterations)
        elif phase == "cross":
            check_cross_reference(contract, match_ids)

    print("\n🎉 Selected tests completed!")
    return True


def main(argv=None) -> int:
    """Parse arguments and run; returns the process exit code."""
    parser = argparse.ArgumentParser(description="Futchain precompile diagnostic run")
    parser.add_argument("--rpc-url", default=RPC_URL, help="JSON-RPC endpoint")
    parser.add_argument("--address", default=CONTRACT_ADDRESS, help="Precompile address")
    parser.add_argument("--abi", default=ABI_PATH, help="Path to an ABI JSON file (defaults to the built-in ABI)")
    parser.add_argument("--timeout", type=float, default=RPC_TIMEOUT, help="RPC request timeout in seconds")
    parser.add_argument("--iterations", type=int, default=DEFAULT_ITERATIONS, help="Latency sampling iterations")
    parser.add_argument("--phase", action="append", choices=PHASES, help="Run only this phase (repeatable)")
    parser.add_argument("--match-id", type=int, default=DEFAULT_ENTITY_ID, help="Match ID for single-phase runs")
    parser.add_argument("--league-id", type=int, default=DEFAULT_ENTITY_ID, help="League ID for single-phase runs")
    parser.add_argument("--team-id", type=int, default=DEFAULT_ENTITY_ID, help="Team ID for single-phase runs")

    args = parser.parse_args(argv)

    try:
        abi = load_abi(args.abi) if args.abi else FUTCHAIN_ABI
        w3 = connect(args.rpc_url, timeout=args.timeout)
        contract = precompile_contract(w3, args.address, abi)
    except (OSError, ValueError) as e:
        print(f"❌ Invalid configuration: {e}")
        return 1

    if args.phase:
        ok = run_phases(
            w3, contract, abi, args.phase,
            address=args.address, rpc_url=args.rpc_url,
            match_id=args.match_id, league_id=args.league_id, team_id=args.team_id,
            iterations=args.iterations,
        )
    else:
        ok = run_all(w3, contract, abi, address=args.address, rpc_url=args.rpc_url, iterations=args.iterations)

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
