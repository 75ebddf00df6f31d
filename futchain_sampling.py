"""Gas estimation, raw-call inspection and latency sampling for precompile reads."""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from eth_abi import encode
from web3 import Web3

from futchain_abi import input_types

DEFAULT_ITERATIONS = 10
PREVIEW_BYTES = 32


@dataclass(frozen=True)
class GasEstimate:
    operation: str
    gas: Optional[int] = None
    error: Optional[Exception] = None


def estimate_gas(operation: str, build_call: Callable[[], Any]) -> GasEstimate:
    """Estimate gas for the contract call built by ``build_call``."""
    try:
        return GasEstimate(operation, gas=build_call().estimate_gas())
    except Exception as e:
        return GasEstimate(operation, error=e)


def encode_call(abi: list, fn_name: str, args=()) -> bytes:
    """Selector plus ABI-encoded arguments, built without the contract object."""
    types = input_types(abi, fn_name)
    selector = Web3.keccak(text=f"{fn_name}({','.join(types)})")[:4]
    return bytes(selector) + encode(types, list(args))


@dataclass(frozen=True)
class RawCallResult:
    operation: str
    calldata: bytes = b""
    raw: Optional[bytes] = None
    error: Optional[Exception] = None

    @property
    def byte_length(self) -> int:
        return len(self.raw) if self.raw is not None else 0

    @property
    def preview(self) -> str:
        return Web3.to_hex(self.raw[:PREVIEW_BYTES]) if self.raw else "0x"


def raw_call(w3, address: str, abi: list, fn_name: str, args=()) -> RawCallResult:
    try:
        calldata = encode_call(abi, fn_name, args)
    except Exception as e:
        return RawCallResult(fn_name, error=e)
    try:
        raw = w3.eth.call({"to": Web3.to_checksum_address(address), "data": Web3.to_hex(calldata)})
    except Exception as e:
        return RawCallResult(fn_name, calldata=calldata, error=e)
    return RawCallResult(fn_name, calldata=calldata, raw=bytes(raw))


@dataclass
class LatencyStats:
    """Per-iteration timings in milliseconds; failed iterations are kept apart."""
    operation: str
    samples_ms: list = field(default_factory=list)
    failures: list = field(default_factory=list)

    @property
    def minimum(self) -> Optional[float]:
        return min(self.samples_ms) if self.samples_ms else None

    @property
    def maximum(self) -> Optional[float]:
        return max(self.samples_ms) if self.samples_ms else None

    @property
    def average(self) -> Optional[float]:
        if not self.samples_ms:
            return None
        return sum(self.samples_ms) / len(self.samples_ms)


def sample_latency(operation: str, fn: Callable[[], Any], iterations: int = DEFAULT_ITERATIONS,
                   clock: Callable[[], float] = time.perf_counter,
                   on_failure: Optional[Callable[[int, Exception], None]] = None) -> LatencyStats:
    """Run ``fn`` ``iterations`` times back to back and time each success."""
    stats = LatencyStats(operation)
    for i in range(1, iterations + 1):
        start = clock()
        try:
            fn()
        except Exception as e:
            stats.failures.append((i, e))
            if on_failure is not None:
                on_failure(i, e)
            continue
        stats.samples_ms.append((clock() - start) * 1000)
    return stats
