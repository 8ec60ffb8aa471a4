from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional

from ape import chain
from ape.contracts import ContractInstance
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address, to_hex

from antrix_deployment.constants import ADDRESS_FILENAME_TEMPLATE, REGISTRY_FILENAME_TEMPLATE
from antrix_deployment.utils import _load_json, _write_json

ABI = List[Dict[str, Any]]
ContractName = str


class RegistryEntry(NamedTuple):
    """Represents a single deployed contract."""

    name: ContractName
    address: ChecksumAddress
    abi: ABI
    tx_hash: Optional[str]
    block_number: Optional[int]
    deployer: Optional[str]


def _get_abi(contract_instance: ContractInstance) -> ABI:
    """Returns the ABI of a contract instance."""
    contract_abi = list()
    for entry in contract_instance.contract_type.abi:
        contract_abi.append(entry.model_dump(mode="json", by_alias=True, exclude_none=True))
    return contract_abi


def get_entry(contract_instance: ContractInstance) -> RegistryEntry:
    """
    Builds the registry entry for a deployed instance. The transaction details
    come from the creation receipt, looked up by the instance's txn_hash.
    """
    tx_hash = block_number = deployer = None
    txn_hash = getattr(contract_instance, "txn_hash", None)
    if txn_hash:
        tx_hash = txn_hash if isinstance(txn_hash, str) else to_hex(txn_hash)
        receipt = chain.get_receipt(tx_hash)
        block_number = int(receipt.block_number)
        deployer = receipt.transaction.sender
    return RegistryEntry(
        name=contract_instance.contract_type.name,
        address=to_checksum_address(contract_instance.address),
        abi=_get_abi(contract_instance),
        tx_hash=tx_hash,
        block_number=block_number,
        deployer=deployer,
    )


class ArtifactWriter:
    """
    Persists the outcome of a successful deployment: the contract address
    keyed by network, the contract artifact, and the deployment record.
    """

    def __init__(self, output_dir: Path, network_name: str):
        self.output_dir = Path(output_dir)
        self.network_name = network_name

    @property
    def address_filepath(self) -> Path:
        return self.output_dir / ADDRESS_FILENAME_TEMPLATE.format(network=self.network_name)

    @property
    def registry_filepath(self) -> Path:
        return self.output_dir / REGISTRY_FILENAME_TEMPLATE.format(network=self.network_name)

    def artifact_filepath(self, contract_name: ContractName) -> Path:
        return self.output_dir / f"{contract_name}.json"

    def write_address(self, entry: RegistryEntry) -> Path:
        """Records the address, keeping entries for other contracts on the same network."""
        addresses = dict()
        if self.address_filepath.exists():
            addresses = _load_json(self.address_filepath)
        addresses[entry.name] = entry.address
        return _write_json(addresses, self.address_filepath)

    def write_artifact(self, contract_instance: ContractInstance) -> Path:
        contract_type = contract_instance.contract_type
        data = contract_type.model_dump(mode="json", by_alias=True, exclude_none=True)
        return _write_json(data, self.artifact_filepath(contract_type.name))

    def write_registry(self, entry: RegistryEntry) -> Path:
        return _write_json(entry._asdict(), self.registry_filepath)

    def write(self, contract_instance: ContractInstance) -> List[Path]:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        entry = get_entry(contract_instance)
        written = [
            self.write_address(entry),
            self.write_artifact(contract_instance),
        ]
        if entry.tx_hash is not None:
            written.append(self.write_registry(entry))
        for filepath in written:
            print(f"(i) Wrote {filepath}")
        return written
