from typing import Optional

from antrix_deployment.constants import LOCAL_NETWORKS
from antrix_deployment.errors import DeploymentConfigError

NETWORK_CHOICE_DELIMITER = ":"


def get_network_name(network_choice: str) -> str:
    """
    Returns the network name from an ape network choice.

    'ethereum:sepolia:infura' -> 'sepolia'; a bare name is returned as is.
    """
    parts = network_choice.split(NETWORK_CHOICE_DELIMITER)
    if len(parts) == 1:
        return parts[0]
    return parts[1]


def is_local_network(network_choice: str) -> bool:
    return get_network_name(network_choice) in LOCAL_NETWORKS


def network_choice_from_provider(provider) -> str:
    """Builds an 'ecosystem:network:provider' choice from a connected ape provider."""
    network = provider.network
    return NETWORK_CHOICE_DELIMITER.join((network.ecosystem.name, network.name, provider.name))


def check_chain_id(network_choice: str, expected: Optional[int], actual: Optional[int]) -> None:
    """
    Checks that the connected chain matches the chain id in the params file.
    Local networks are exempt.
    """
    if expected is None or actual is None:
        return
    if is_local_network(network_choice):
        return
    if int(expected) != int(actual):
        raise DeploymentConfigError(
            f"chain_id in params file ({expected}) does not match "
            f"chain_id of current network ({actual})."
        )
