import math
import time
import typing
from collections import OrderedDict
from typing import Any, Optional

from ape import networks
from ape.api import AccountAPI, ProviderAPI, ReceiptAPI
from ape.contracts import ContractContainer, ContractInstance
from ape.exceptions import AccountsError, ProviderError, TransactionError, TransactionNotFoundError
from eth_typing import ChecksumAddress
from eth_utils import to_hex
from ethpm_types import ContractType
from web3.exceptions import TimeExhausted, Web3Exception

from antrix_deployment.artifacts import get_contract_container
from antrix_deployment.config import DeploymentConfig, get_owner_address, validate_address
from antrix_deployment.confirm import _confirm_resolution
from antrix_deployment.constants import DEPLOYMENT_BANNER
from antrix_deployment.errors import (
    ConfirmationTimeout,
    InvalidConfiguration,
    TransactionRejected,
)
from antrix_deployment.networks import check_chain_id, is_local_network
from antrix_deployment.signers import get_signer


def instance_from_receipt(receipt: ReceiptAPI, contract_type: ContractType) -> ContractInstance:
    return ContractInstance.from_receipt(receipt, contract_type)


class Deployer:
    """
    Deploys a single contract instance owned by a configured address,
    then waits for the deployment to be confirmed.
    """

    def __init__(
        self,
        config: DeploymentConfig,
        account: Optional[AccountAPI] = None,
        chain_id: Optional[int] = None,
        provider: Optional[ProviderAPI] = None,
    ):
        self.config = config
        self.chain_id = chain_id
        self._account = account
        self._provider = provider
        self._autosign = config.autosign or is_local_network(config.network)

    def get_account(self) -> AccountAPI:
        """Returns the deployer account, resolving the default signer on first use."""
        if self._account is None:
            self._account = get_signer(self.config.network, alias=self.config.account)
        return self._account

    def get_provider(self) -> ProviderAPI:
        if self._provider is None:
            self._provider = networks.provider
        return self._provider

    def _get_kwargs(self) -> typing.Dict[str, Any]:
        """Returns the deployment kwargs."""
        kwargs = dict()
        if self.config.required_confirmations is not None:
            kwargs["required_confirmations"] = self.config.required_confirmations
        return kwargs

    def _resolve_params(
        self, container: ContractContainer, owner_address: ChecksumAddress
    ) -> OrderedDict:
        contract_name = container.contract_type.name
        abi_inputs = container.constructor.abi.inputs
        if len(abi_inputs) != 1:
            raise InvalidConfiguration(
                f"Constructor parameters length mismatch - "
                f"{contract_name} ABI requires {len(abi_inputs)}, expected 1 (owner address)."
            )
        owner_input = abi_inputs[0]
        if owner_input.type != "address":
            raise InvalidConfiguration(
                f"{contract_name} constructor parameter '{owner_input.name}' has type "
                f"'{owner_input.type}'; expected 'address'."
            )
        return OrderedDict({owner_input.name or "owner": owner_address})

    def _await_receipt(self, container: ContractContainer, txn_hash: str) -> ContractInstance:
        """
        Keeps waiting for a sent deployment transaction after the provider's own
        acceptance timeout ran out. The confirmation window counts from when the
        transaction was sent, which is when the provider started waiting.
        """
        timeout = self.config.confirmation_timeout
        provider = self.get_provider()
        deadline = None
        if timeout is not None:
            waited = provider.network.transaction_acceptance_timeout
            deadline = time.monotonic() + timeout - waited

        while deadline is None or time.monotonic() < deadline:
            remaining = None if deadline is None else math.ceil(deadline - time.monotonic())
            try:
                receipt = provider.get_receipt(txn_hash, timeout=remaining, **self._get_kwargs())
            except TransactionNotFoundError:
                continue
            except (TransactionError, ProviderError, Web3Exception) as e:
                raise TransactionRejected(f"Deployment transaction rejected: {e}") from e
            return instance_from_receipt(receipt, container.contract_type)

        raise ConfirmationTimeout(
            f"Deployment {txn_hash} was not confirmed within {timeout} seconds."
        )

    def _submit(self, container: ContractContainer, resolved_params: OrderedDict):
        deployer_account = self.get_account()
        try:
            return deployer_account.deploy(
                container,
                *resolved_params.values(),
                **self._get_kwargs(),
            )
        except TransactionNotFoundError as e:
            # sent, but the provider stopped waiting before the window closed
            txn_hash = getattr(e, "transaction_hash", None)
            if txn_hash is None:
                raise ConfirmationTimeout(f"Gave up waiting for the deployment receipt: {e}") from e
            if not isinstance(txn_hash, str):
                txn_hash = to_hex(txn_hash)
            return self._await_receipt(container, txn_hash)
        except TimeExhausted as e:
            raise ConfirmationTimeout(f"Gave up waiting for the deployment receipt: {e}") from e
        except (TransactionError, AccountsError, ProviderError, Web3Exception) as e:
            raise TransactionRejected(f"Deployment transaction rejected: {e}") from e

    def deploy(
        self, owner_address: Optional[str] = None, announce: bool = True
    ) -> ContractInstance:
        if announce:
            print(DEPLOYMENT_BANNER)
        check_chain_id(self.config.network, expected=self.config.chain_id, actual=self.chain_id)

        deployer_account = self.get_account()
        print(f"Deploying the contract with the account: {deployer_account.address}")

        container = get_contract_container(
            self.config.contract_name, artifacts_dir=self.config.artifacts_dir
        )

        if owner_address is None:
            owner_address = get_owner_address()
        else:
            owner_address = validate_address(owner_address, label="owner address")
        resolved_params = self._resolve_params(container, owner_address)

        if not self._autosign:
            _confirm_resolution(
                resolved_params, container.contract_type.name, self.config.network
            )

        instance = self._submit(container, resolved_params)
        print(f"{self.config.contract_name} deployed to {instance.address}")
        return instance
