"""Chain client capability and its web3.py implementation.

Tools depend on the ``ChainClient`` protocol only.  ``Web3ChainClient``
is the production adapter: it talks JSON-RPC through ``AsyncWeb3``,
signs locally with an eth-account ``LocalAccount``, and converts every
library failure into an :class:`ExternalCallError` at this boundary.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

from eth_account import Account
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3

from abmcp.chain.address import is_address
from abmcp.chain.networks import get_network
from abmcp.core.errors import AbmcpError, ConfigError
from abmcp.core.failures import external_call_error

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from eth_account.signers.local import LocalAccount

    from abmcp.chain.address import ResolvedAddress
    from abmcp.chain.networks import Network
    from abmcp.config.schema import ChainConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _checksum_args(value: Any) -> Any:
    """Checksum every hex address in a contract call argument tree."""
    if isinstance(value, str) and is_address(value):
        return Web3.to_checksum_address(value)
    if isinstance(value, (list, tuple)):
        return type(value)(_checksum_args(item) for item in value)
    return value


@runtime_checkable
class ChainClient(Protocol):
    """Protocol for the on-chain capabilities tools may use.

    All calls are asynchronous and raise :class:`ExternalCallError`
    on failure.  Write calls sign with the client's configured account
    and raise :class:`ConfigError` when none is configured.
    """

    @property
    def chain_id(self) -> int:
        """Chain ID of the connected network."""
        ...

    @property
    def signer_address(self) -> str | None:
        """Address of the signing account, or None if read-only."""
        ...

    async def get_balance(self, address: ResolvedAddress) -> int:
        """Native balance in wei."""
        ...

    async def read_contract(
        self,
        address: ResolvedAddress,
        abi: list[dict[str, Any]],
        function_name: str,
        args: Sequence[Any] = (),
    ) -> Any:
        """Call a view function and return its decoded result."""
        ...

    async def write_contract(
        self,
        address: ResolvedAddress,
        abi: list[dict[str, Any]],
        function_name: str,
        args: Sequence[Any] = (),
        *,
        value: int = 0,
    ) -> str:
        """Sign and submit a contract call. Returns the tx hash."""
        ...

    async def send_transaction(self, to: ResolvedAddress, value: int) -> str:
        """Sign and submit a native transfer. Returns the tx hash."""
        ...

    async def get_ens_address(self, name: str) -> str | None:
        """Resolve an ENS-like name, or None when there is no record."""
        ...

    async def get_code(self, address: ResolvedAddress) -> bytes:
        """Deployed bytecode at ``address`` (empty for an EOA)."""
        ...


class Web3ChainClient:
    """``ChainClient`` backed by web3.py's ``AsyncWeb3``.

    Constructed once per process and shared by all tools.  The client
    holds no per-call state.
    """

    def __init__(
        self,
        network: Network,
        rpc_url: str | None = None,
        *,
        private_key: str | None = None,
        private_key_env: str = "ABSTRACT_PRIVATE_KEY",
        w3: AsyncWeb3 | None = None,
    ) -> None:
        self._network = network
        self._rpc_url = rpc_url or network.rpc_url
        self._w3 = w3 or AsyncWeb3(AsyncHTTPProvider(self._rpc_url))
        self._private_key_env = private_key_env
        self._account: LocalAccount | None = None
        if private_key:
            try:
                self._account = Account.from_key(private_key)
            except ValueError as e:
                msg = f"Invalid private key in {private_key_env}: {type(e).__name__}"
                raise ConfigError(msg) from e

    @classmethod
    def from_config(cls, config: ChainConfig) -> Web3ChainClient:
        """Build a client for the configured network and signer."""
        network = get_network(config.network)
        logger.info(
            "Connecting to %s (chain_id=%d) rpc=%s signer=%s",
            network.name,
            network.chain_id,
            config.rpc_url or network.rpc_url,
            "configured" if config.private_key else "none",
        )
        return cls(
            network,
            config.rpc_url,
            private_key=config.private_key,
            private_key_env=config.private_key_env,
        )

    @property
    def network(self) -> Network:
        return self._network

    @property
    def chain_id(self) -> int:
        return self._network.chain_id

    @property
    def signer_address(self) -> str | None:
        return self._account.address if self._account is not None else None

    def _require_account(self) -> LocalAccount:
        if self._account is None:
            msg = f"{self._private_key_env} env variable is required to sign transactions"
            raise ConfigError(msg)
        return self._account

    async def _call(self, operation: str, fn: Callable[[], Awaitable[T]]) -> T:
        """Run one RPC interaction, mapping library failures at the boundary."""
        try:
            return await fn()
        except AbmcpError:
            raise
        except Exception as e:
            raise external_call_error(e, operation=operation) from e

    def _contract(self, address: str, abi: list[dict[str, Any]]) -> Any:
        return self._w3.eth.contract(
            address=Web3.to_checksum_address(address),
            abi=abi,
        )

    async def _sign_and_send(self, account: LocalAccount, tx: dict[str, Any]) -> str:
        signed = account.sign_transaction(tx)
        tx_hash = await self._w3.eth.send_raw_transaction(signed.raw_transaction)
        return Web3.to_hex(tx_hash)

    async def get_balance(self, address: ResolvedAddress) -> int:
        async def _get() -> int:
            return int(
                await self._w3.eth.get_balance(Web3.to_checksum_address(address))
            )

        return await self._call("getBalance", _get)

    async def read_contract(
        self,
        address: ResolvedAddress,
        abi: list[dict[str, Any]],
        function_name: str,
        args: Sequence[Any] = (),
    ) -> Any:
        async def _read() -> Any:
            contract = self._contract(address, abi)
            call = getattr(contract.functions, function_name)(*_checksum_args(args))
            return await call.call()

        return await self._call(f"readContract:{function_name}", _read)

    async def write_contract(
        self,
        address: ResolvedAddress,
        abi: list[dict[str, Any]],
        function_name: str,
        args: Sequence[Any] = (),
        *,
        value: int = 0,
    ) -> str:
        account = self._require_account()

        async def _write() -> str:
            contract = self._contract(address, abi)
            call = getattr(contract.functions, function_name)(*_checksum_args(args))
            nonce = await self._w3.eth.get_transaction_count(
                account.address, "pending"
            )
            tx = await call.build_transaction(
                {
                    "from": account.address,
                    "value": value,
                    "nonce": nonce,
                    "chainId": self.chain_id,
                }
            )
            return await self._sign_and_send(account, tx)

        return await self._call(f"writeContract:{function_name}", _write)

    async def send_transaction(self, to: ResolvedAddress, value: int) -> str:
        account = self._require_account()

        async def _send() -> str:
            tx: dict[str, Any] = {
                "from": account.address,
                "to": Web3.to_checksum_address(to),
                "value": value,
                "nonce": await self._w3.eth.get_transaction_count(
                    account.address, "pending"
                ),
                "chainId": self.chain_id,
                "gasPrice": await self._w3.eth.gas_price,
            }
            tx["gas"] = await self._w3.eth.estimate_gas(tx)
            return await self._sign_and_send(account, tx)

        return await self._call("sendTransaction", _send)

    async def get_ens_address(self, name: str) -> str | None:
        async def _lookup() -> str | None:
            found = await self._w3.ens.address(name)
            return str(found) if found else None

        return await self._call("getEnsAddress", _lookup)

    async def get_code(self, address: ResolvedAddress) -> bytes:
        async def _code() -> bytes:
            return bytes(await self._w3.eth.get_code(Web3.to_checksum_address(address)))

        return await self._call("getCode", _code)
