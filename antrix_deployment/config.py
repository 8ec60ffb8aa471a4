import os
import typing
from pathlib import Path
from typing import Any, Dict, NamedTuple, Optional

from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from antrix_deployment.constants import (
    CONTRACT_NAME,
    DEFAULT_CONFIRMATION_TIMEOUT,
    OUTPUT_DIR,
    OWNER_ADDRESS_ENVVAR,
)
from antrix_deployment.errors import (
    DeploymentConfigError,
    InvalidConfiguration,
    MissingConfiguration,
)
from antrix_deployment.utils import _load_yaml


class DeploymentConfig(NamedTuple):
    """
    Everything a deployment run needs to know about its environment.

    network is an ape network choice (e.g. 'ethereum:local:test');
    account is an ape account alias; artifacts_dir points to compiled
    build output and falls back to the ape project when unset.
    """

    network: str
    account: Optional[str] = None
    artifacts_dir: Optional[Path] = None
    contract_name: str = CONTRACT_NAME
    chain_id: Optional[int] = None
    confirmation_timeout: Optional[float] = DEFAULT_CONFIRMATION_TIMEOUT
    required_confirmations: Optional[int] = None
    output_dir: Path = OUTPUT_DIR
    autosign: bool = False

    @classmethod
    def from_yaml(cls, filepath: Path, network: str, **overrides) -> "DeploymentConfig":
        config = _load_yaml(filepath)
        return cls.from_params(config, network=network, **overrides)

    @classmethod
    def from_params(cls, params: Dict, network: str, **overrides) -> "DeploymentConfig":
        """Builds a config from a parsed params file; non-None overrides win."""
        values = validate_params(params)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(network=network, **values)


def _positive_number(section: Dict, key: str) -> Optional[float]:
    value = section.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise DeploymentConfigError(f"{key} must be a positive number, got {value!r}.")
    return value


def validate_params(params: Any) -> typing.Dict[str, Any]:
    """
    Checks a parsed params file and returns the DeploymentConfig fields it sets.
    """
    print("Validating parameters YAML...")
    if not isinstance(params, dict):
        raise DeploymentConfigError("Malformed params file; expected a mapping.")

    deployment = params.get("deployment")
    if not isinstance(deployment, dict):
        raise DeploymentConfigError("deployment is not set in params file.")

    values = dict()

    chain_id = deployment.get("chain_id")
    if chain_id is not None:
        try:
            values["chain_id"] = int(chain_id)
        except (TypeError, ValueError):
            raise DeploymentConfigError(f"chain_id must be an integer, got {chain_id!r}.")

    timeout = _positive_number(deployment, "confirmation_timeout")
    if timeout is not None:
        values["confirmation_timeout"] = timeout

    confirmations = deployment.get("required_confirmations")
    if confirmations is not None:
        is_int = isinstance(confirmations, int) and not isinstance(confirmations, bool)
        if not is_int or confirmations < 0:
            raise DeploymentConfigError(
                f"required_confirmations must be a non-negative integer, got {confirmations!r}."
            )
        values["required_confirmations"] = confirmations

    contract_name = deployment.get("contract")
    if contract_name:
        values["contract_name"] = str(contract_name)

    artifacts = params.get("artifacts") or dict()
    if not isinstance(artifacts, dict):
        raise DeploymentConfigError("artifacts must be a mapping in params file.")
    if artifacts.get("dir"):
        values["artifacts_dir"] = Path(artifacts["dir"])
    if artifacts.get("output_dir"):
        values["output_dir"] = Path(artifacts["output_dir"])

    return values


def get_owner_address(environ: Optional[typing.Mapping[str, str]] = None) -> ChecksumAddress:
    """Reads the contract owner from the environment."""
    environ = os.environ if environ is None else environ
    value = (environ.get(OWNER_ADDRESS_ENVVAR) or "").strip()
    if not value:
        raise MissingConfiguration(f"{OWNER_ADDRESS_ENVVAR} is not set.")
    return validate_address(value, label=OWNER_ADDRESS_ENVVAR)


def validate_address(value: str, label: str = "address") -> ChecksumAddress:
    try:
        return to_checksum_address(value)
    except (TypeError, ValueError):
        raise InvalidConfiguration(f"{label} is not a valid address: {value!r}")
