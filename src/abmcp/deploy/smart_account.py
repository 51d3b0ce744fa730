"""Abstract Global Wallet deployment through the AGW account factory.

The account address is derived by the factory from a salt (keccak256 of
the initial signer's address bytes).  If code already lives at that
address nothing is sent; otherwise one ``deployAccount`` transaction is
submitted with an ``initialize`` call that installs the signer as the
account's first K1 owner.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector, keccak, to_checksum_address

from abmcp.chain.abi import AGW_FACTORY_ABI, AGW_INITIALIZE_SIGNATURE
from abmcp.chain.address import ZERO_ADDRESS
from abmcp.core.errors import ConfigError, ParseError
from abmcp.deploy.base import SmartAccountDeployment

if TYPE_CHECKING:
    from abmcp.chain.address import AddressResolver, ResolvedAddress
    from abmcp.chain.client import ChainClient
    from abmcp.config.schema import SmartAccountConfig

logger = logging.getLogger(__name__)


def account_salt(signer: str) -> bytes:
    """Factory salt for an initial signer."""
    return keccak(hexstr=signer)


def initializer_calldata(signer: str, validator: str) -> bytes:
    """Calldata for ``initialize(signer, validator, [], (0x0, 0, 0x))``."""
    selector = function_signature_to_4byte_selector(AGW_INITIALIZE_SIGNATURE)
    args = encode(
        ["address", "address", "bytes[]", "(address,uint256,bytes)"],
        [
            to_checksum_address(signer),
            to_checksum_address(validator),
            [],
            (ZERO_ADDRESS, 0, b""),
        ],
    )
    return selector + args


class FactorySmartAccountDeployer:
    """Smart-account deployer that calls the AGW factory contract.

    Implements the :class:`SmartAccountDeployer` protocol.
    """

    def __init__(
        self,
        chain: ChainClient,
        resolver: AddressResolver,
        config: SmartAccountConfig,
    ) -> None:
        self._chain = chain
        self._resolver = resolver
        self._config = config

    async def _configured(self, field: str) -> ResolvedAddress:
        value = getattr(self._config, field)
        if not value:
            msg = f"smart_account.{field} must be set to deploy smart accounts"
            raise ConfigError(msg)
        resolved = await self._resolver.resolve(value)
        if resolved is None:
            msg = f"smart_account.{field} is not a valid address: {value}"
            raise ConfigError(msg)
        return resolved

    async def deploy_account(
        self, initial_signer: ResolvedAddress
    ) -> SmartAccountDeployment:
        factory = await self._configured("factory_address")
        validator = await self._configured("validator_address")
        salt = account_salt(initial_signer)

        predicted = await self._chain.read_contract(
            factory, AGW_FACTORY_ABI, "getAddressForSalt", [salt]
        )
        account = await self._resolver.resolve(str(predicted))
        if account is None:
            msg = f"Factory returned an invalid account address: {predicted!r}"
            raise ParseError(msg)

        if await self._chain.get_code(account):
            logger.info("Smart account already deployed at %s", account)
            return SmartAccountDeployment(address=account)

        tx_hash = await self._chain.write_contract(
            factory,
            AGW_FACTORY_ABI,
            "deployAccount",
            [salt, initializer_calldata(initial_signer, validator)],
        )
        logger.info("Smart account deployment sent address=%s tx=%s", account, tx_hash)
        return SmartAccountDeployment(address=account, transaction_hash=tx_hash)
