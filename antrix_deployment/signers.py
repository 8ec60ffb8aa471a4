from typing import Optional

from ape import accounts
from ape.api import AccountAPI

from antrix_deployment.errors import NoSignerAvailable
from antrix_deployment.networks import is_local_network


def get_signer(network_choice: str, alias: Optional[str] = None) -> AccountAPI:
    """
    Returns the account that signs the deployment.

    Live networks require an account alias; local networks default to the
    first test account.
    """
    if alias:
        try:
            return accounts.load(alias)
        except (KeyError, IndexError, ValueError) as e:
            raise NoSignerAvailable(f"No account with alias '{alias}'.") from e

    if not is_local_network(network_choice):
        raise NoSignerAvailable(
            f"Must specify an account alias when deploying to {network_choice}."
        )

    test_accounts = accounts.test_accounts
    if len(test_accounts) == 0:
        raise NoSignerAvailable(f"No test accounts configured for {network_choice}.")
    return test_accounts[0]
