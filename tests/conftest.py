import json
import time

import pytest
from ape.exceptions import TransactionNotFoundError
from eth_utils import to_checksum_address

from antrix_deployment import registry
from antrix_deployment.config import DeploymentConfig

DEPLOYER_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
OWNER_ADDRESS = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
LOCAL_NETWORK = "ethereum:local:test"

ANTRIX_ABI = [
    {
        "inputs": [{"internalType": "address", "name": "initialOwner", "type": "address"}],
        "stateMutability": "nonpayable",
        "type": "constructor",
    },
    {
        "anonymous": False,
        "inputs": [
            {
                "indexed": True,
                "internalType": "address",
                "name": "previousOwner",
                "type": "address",
            },
            {"indexed": True, "internalType": "address", "name": "newOwner", "type": "address"},
        ],
        "name": "OwnershipTransferred",
        "type": "event",
    },
    {
        "inputs": [],
        "name": "owner",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
]

# initcode that ignores its constructor argument and deploys a single STOP
ANTRIX_BYTECODE = "0x6001600c60003960016000f300"


def hardhat_artifact(abi=None, bytecode=ANTRIX_BYTECODE):
    return {
        "_format": "hh-sol-artifact-1",
        "contractName": "Antrix",
        "sourceName": "contracts/Antrix.sol",
        "abi": ANTRIX_ABI if abi is None else abi,
        "bytecode": bytecode,
        "deployedBytecode": "0x00",
        "linkReferences": {},
        "deployedLinkReferences": {},
    }


def write_artifact(artifacts_dir, data, filename="Antrix.json", source="Antrix.sol"):
    contract_dir = artifacts_dir / "contracts" / source
    contract_dir.mkdir(parents=True, exist_ok=True)
    filepath = contract_dir / filename
    filepath.write_text(json.dumps(data))
    return filepath


class FakeReceipt:
    def __init__(self, txn_hash, block_number, sender, contract_address=None):
        self.txn_hash = txn_hash
        self.block_number = block_number
        self.contract_address = contract_address
        self.transaction = type("Transaction", (), {"sender": sender})()


class FakeInstance:
    """Mirrors ape's ContractInstance: the creation receipt is only reachable by txn_hash."""

    def __init__(self, address, contract_type, txn_hash=None):
        self.address = address
        self.contract_type = contract_type
        self.txn_hash = txn_hash


class FakeChain:
    def __init__(self):
        self.receipts = dict()

    def get_receipt(self, txn_hash):
        try:
            return self.receipts[txn_hash]
        except KeyError:
            raise TransactionNotFoundError(transaction_hash=txn_hash)


class FakeProvider:
    """
    Receipt source for a transaction the account already sent. Without a
    receipt every lookup waits a little and then gives up, as ape does.
    """

    def __init__(self, receipt=None, acceptance_timeout=0, delay=0.05):
        self.network = type("Network", (), {"transaction_acceptance_timeout": acceptance_timeout})()
        self.receipt = receipt
        self.delay = delay
        self.lookups = list()

    def get_receipt(self, txn_hash, timeout=None, **kwargs):
        self.lookups.append((txn_hash, timeout, kwargs))
        if self.receipt is not None:
            return self.receipt
        time.sleep(self.delay if timeout is None else min(timeout, self.delay))
        raise TransactionNotFoundError(transaction_hash=txn_hash)


class FakeAccount:
    """Stands in for an ape account; every deploy() yields a new address."""

    def __init__(self, address=DEPLOYER_ADDRESS, error=None, chain=None):
        self.address = address
        self.error = error
        self.chain = chain
        self.deployments = list()

    def deploy(self, container, *args, **kwargs):
        self.deployments.append((container, args, kwargs))
        if self.error is not None:
            raise self.error
        nonce = len(self.deployments)
        address = to_checksum_address(f"0x{nonce:040x}")
        txn_hash = f"0x{nonce:064x}"
        if self.chain is not None:
            self.chain.receipts[txn_hash] = FakeReceipt(
                txn_hash, block_number=nonce, sender=self.address, contract_address=address
            )
        return FakeInstance(address, container.contract_type, txn_hash=txn_hash)


@pytest.fixture
def artifacts_dir(tmp_path):
    directory = tmp_path / "artifacts"
    write_artifact(directory, hardhat_artifact())
    write_artifact(directory, {"_format": "hh-sol-dbg-1"}, filename="Antrix.dbg.json")
    return directory


@pytest.fixture
def deploy_config(artifacts_dir, tmp_path):
    return DeploymentConfig(
        network=LOCAL_NETWORK,
        artifacts_dir=artifacts_dir,
        output_dir=tmp_path / "modules",
        confirmation_timeout=5,
    )


@pytest.fixture
def owner_env(monkeypatch):
    monkeypatch.setenv("OWNER_ADDRESS", OWNER_ADDRESS)
    return OWNER_ADDRESS


@pytest.fixture
def no_owner_env(monkeypatch):
    monkeypatch.delenv("OWNER_ADDRESS", raising=False)


@pytest.fixture
def fake_chain(monkeypatch):
    fake = FakeChain()
    monkeypatch.setattr(registry, "chain", fake)
    return fake


@pytest.fixture
def signer(fake_chain):
    return FakeAccount(chain=fake_chain)
