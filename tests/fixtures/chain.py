"""Fake chain client and deployers for deterministic testing."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from web3.providers import AsyncBaseProvider

from abmcp.core.errors import ExternalCallError, FailureKind
from abmcp.deploy.base import SmartAccountDeployment

if TYPE_CHECKING:
    from collections.abc import Sequence

    from abmcp.deploy.base import TokenDeployParams

SIGNER = "0x1111111111111111111111111111111111111111"
ALICE = "0x2222222222222222222222222222222222222222"
TOKEN = "0x3333333333333333333333333333333333333333"
USDC = "0x4444444444444444444444444444444444444444"

FAKE_TX_HASH = "0x" + "ab" * 32

# Mixed-case checksum form of a well-known mainnet address.
VITALIK = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"


class FakeChainClient:
    """In-memory chain client for tests.

    Implements the ``ChainClient`` protocol.  Balances, contract reads
    and ENS records are canned; every call is recorded in ``call_log``.
    Setting ``fail_with`` makes every network call raise an
    ``ExternalCallError`` of that kind.
    """

    def __init__(
        self,
        *,
        signer: str | None = SIGNER,
        balances: dict[str, int] | None = None,
        reads: dict[tuple[str, str], Any] | None = None,
        ens: dict[str, str | None] | None = None,
        code: dict[str, bytes] | None = None,
        fail_with: FailureKind | None = None,
        chain_id: int = 11124,
    ) -> None:
        self._signer = signer
        self._balances = {k.lower(): v for k, v in (balances or {}).items()}
        self._reads = {(a.lower(), fn): v for (a, fn), v in (reads or {}).items()}
        self._ens = ens or {}
        self._code = {k.lower(): v for k, v in (code or {}).items()}
        self._fail_with = fail_with
        self._chain_id = chain_id
        self.call_log: list[dict[str, Any]] = []
        self._tx_count = 0

    def _record(self, method: str, **kwargs: Any) -> None:
        self.call_log.append({"method": method, **kwargs})
        if self._fail_with is not None:
            raise ExternalCallError(
                self._fail_with,
                f"fake {method} failure",
                detail=f"{self._fail_with.value} from fake chain",
            )

    def calls(self, method: str) -> list[dict[str, Any]]:
        """Recorded calls to ``method``."""
        return [c for c in self.call_log if c["method"] == method]

    def _next_hash(self) -> str:
        self._tx_count += 1
        return "0x" + f"{self._tx_count:064x}"

    @property
    def chain_id(self) -> int:
        return self._chain_id

    @property
    def signer_address(self) -> str | None:
        return self._signer

    async def get_balance(self, address: str) -> int:
        self._record("get_balance", address=address)
        return self._balances.get(address.lower(), 0)

    async def read_contract(
        self,
        address: str,
        abi: list[dict[str, Any]],
        function_name: str,
        args: Sequence[Any] = (),
    ) -> Any:
        self._record(
            "read_contract", address=address, function=function_name, args=list(args)
        )
        key = (address.lower(), function_name)
        if key not in self._reads:
            raise ExternalCallError(
                FailureKind.CONTRACT_REVERT,
                "The contract rejected the call (execution reverted).",
            )
        return self._reads[key]

    async def write_contract(
        self,
        address: str,
        abi: list[dict[str, Any]],
        function_name: str,
        args: Sequence[Any] = (),
        *,
        value: int = 0,
    ) -> str:
        self._record(
            "write_contract",
            address=address,
            function=function_name,
            args=list(args),
            value=value,
        )
        return self._next_hash()

    async def send_transaction(self, to: str, value: int) -> str:
        self._record("send_transaction", to=to, value=value)
        return self._next_hash()

    async def get_ens_address(self, name: str) -> str | None:
        self._record("get_ens_address", name=name)
        return self._ens.get(name)

    async def get_code(self, address: str) -> bytes:
        self._record("get_code", address=address)
        return self._code.get(address.lower(), b"")


class FakeTokenDeployer:
    """Token deployer returning a fixed address or raising ``error``."""

    def __init__(self, address: str = TOKEN, error: Exception | None = None) -> None:
        self._address = address
        self._error = error
        self.calls: list[TokenDeployParams] = []

    async def deploy(self, params: TokenDeployParams) -> str:
        self.calls.append(params)
        if self._error is not None:
            raise self._error
        return self._address


class FakeAccountDeployer:
    """Smart-account deployer returning a canned deployment."""

    def __init__(self, deployment: SmartAccountDeployment | None = None) -> None:
        self._deployment = deployment or SmartAccountDeployment(
            address="0x5555555555555555555555555555555555555555",
            transaction_hash=FAKE_TX_HASH,
        )
        self.calls: list[str] = []

    async def deploy_account(self, initial_signer: str) -> SmartAccountDeployment:
        self.calls.append(initial_signer)
        return self._deployment


class CannedProvider(AsyncBaseProvider):
    """JSON-RPC provider answering from a method -> result table.

    Lets tests drive a real ``AsyncWeb3`` (middleware, ABI encoding,
    address validation) without a node.  Every request is recorded in
    ``requests`` as ``(method, params)``.
    """

    def __init__(self, results: dict[str, Any]) -> None:
        super().__init__()
        self._results = results
        self.requests: list[tuple[str, list[Any]]] = []

    async def make_request(self, method: str, params: Any) -> dict[str, Any]:
        self.requests.append((method, list(params)))
        if method not in self._results:
            msg = f"No canned result for {method}"
            raise AssertionError(msg)
        return {"jsonrpc": "2.0", "id": 1, "result": self._results[method]}

    async def is_connected(self, show_traceback: bool = False) -> bool:
        return True

    def params(self, method: str) -> list[list[Any]]:
        return [p for m, p in self.requests if m == method]
