from collections import OrderedDict

from ape.utils import ZERO_ADDRESS

from antrix_deployment.errors import DeploymentAborted


def _abort() -> None:
    print("Aborting deployment!")
    raise DeploymentAborted("Deployment aborted by operator.")


def _confirm_deployment(contract_name: str, network_choice: str) -> None:
    """Asks the user to confirm the deployment of a single contract."""
    answer = input(f"Deploy {contract_name} to {network_choice} Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _confirm_zero_address() -> None:
    answer = input("Zero Address detected for deployment parameter; Continue? Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _confirm_resolution(
    resolved_params: OrderedDict, contract_name: str, network_choice: str
) -> None:
    """Asks the user to confirm the resolved constructor parameters for a single contract."""
    print(f"\nConstructor parameters for {contract_name}")
    contains_zero_address = False
    for name, resolved_value in resolved_params.items():
        print(f"\t{name}={resolved_value}")
        if not contains_zero_address:
            contains_zero_address = resolved_value == ZERO_ADDRESS
    _confirm_deployment(contract_name, network_choice)
    if contains_zero_address:
        _confirm_zero_address()
