import sys
from pathlib import Path
from typing import Callable, Optional

import click
from ape.cli import ConnectedProviderCommand, network_option
from dotenv import find_dotenv, load_dotenv

from antrix_deployment.config import DeploymentConfig
from antrix_deployment.constants import DEPLOYMENT_BANNER
from antrix_deployment.deployer import Deployer
from antrix_deployment.networks import get_network_name, network_choice_from_provider
from antrix_deployment.registry import ArtifactWriter


def run_deployment(
    config: Optional[DeploymentConfig] = None,
    chain_id: Optional[int] = None,
    save_artifacts: bool = False,
    deployer: Optional[Deployer] = None,
    load_config: Optional[Callable[[], DeploymentConfig]] = None,
) -> int:
    """
    Runs one deployment and returns the process exit code.
    Any failure, including an invalid params file, is printed after the
    banner and mapped to 1.
    """
    print(DEPLOYMENT_BANNER)
    try:
        if deployer is None:
            if config is None:
                config = load_config()
            deployer = Deployer(config=config, chain_id=chain_id)
        config = deployer.config
        instance = deployer.deploy(announce=False)
        if save_artifacts:
            writer = ArtifactWriter(
                output_dir=config.output_dir, network_name=get_network_name(config.network)
            )
            writer.write(instance)
    except Exception as e:
        click.secho(f"Deployment failed: {e}", fg="red")
        return 1
    return 0


@click.command(cls=ConnectedProviderCommand, name="deploy")
@network_option(required=True)
@click.option(
    "--params",
    "-p",
    "params_filepath",
    help="Deployment params YAML",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=False,
)
@click.option(
    "--account",
    "-a",
    help="Alias of the ape account that signs the deployment",
    type=click.STRING,
    required=False,
)
@click.option(
    "--artifacts-dir",
    help="Directory holding the compiled build artifacts; defaults to the ape project",
    type=click.Path(file_okay=False, path_type=Path),
    required=False,
)
@click.option(
    "--save-artifacts",
    help="Write the deployed address and contract artifact to the output directory",
    is_flag=True,
    default=False,
)
@click.option(
    "--autosign",
    help="Do not ask for confirmation before deploying",
    is_flag=True,
    default=False,
)
def cli(network, provider, params_filepath, account, artifacts_dir, save_artifacts, autosign):
    """Deploy the Antrix contract with OWNER_ADDRESS as its owner."""
    load_dotenv(find_dotenv(usecwd=True))
    network_choice = network_choice_from_provider(provider)
    overrides = dict(account=account, artifacts_dir=artifacts_dir, autosign=autosign)

    def load_config() -> DeploymentConfig:
        if params_filepath:
            return DeploymentConfig.from_yaml(params_filepath, network=network_choice, **overrides)
        return DeploymentConfig(network=network_choice, **overrides)

    exit_code = run_deployment(
        load_config=load_config, chain_id=provider.chain_id, save_artifacts=save_artifacts
    )
    sys.exit(exit_code)


if __name__ == "__main__":
    cli()
