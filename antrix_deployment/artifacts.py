from pathlib import Path
from typing import List, Optional

from ape import project
from ape.contracts import ContractContainer
from ape.exceptions import ProjectError
from ethpm_types import ContractType

from antrix_deployment.constants import DEBUG_ARTIFACT_SUFFIX
from antrix_deployment.errors import ArtifactNotFound
from antrix_deployment.utils import _load_json

EMPTY_BYTECODE = ("", "0x")


def find_artifact_files(contract_name: str, artifacts_dir: Path) -> List[Path]:
    """
    Returns the build artifact files for a contract, e.g.
    <artifacts_dir>/contracts/Antrix.sol/Antrix.json. Debug artifacts are skipped.
    """
    filename = f"{contract_name}.json"
    return sorted(
        path
        for path in artifacts_dir.rglob(filename)
        if path.is_file() and not path.name.endswith(DEBUG_ARTIFACT_SUFFIX)
    )


def contract_type_from_artifact(contract_name: str, data: dict) -> ContractType:
    """Builds a ContractType from a compiled build artifact (ABI plus bytecode)."""
    try:
        abi = data["abi"]
        bytecode = data["bytecode"]
    except (KeyError, TypeError):
        raise ArtifactNotFound(
            f"Build artifact for {contract_name} is missing 'abi' or 'bytecode'."
        )

    if isinstance(bytecode, dict):
        # solc standard JSON output nests the hex under 'object'
        bytecode = bytecode.get("object", "")
    if not isinstance(bytecode, str):
        raise ArtifactNotFound(
            f"Build artifact for {contract_name} has malformed 'bytecode' "
            f"({type(bytecode).__name__}); expected a hex string."
        )
    if bytecode in EMPTY_BYTECODE:
        raise ArtifactNotFound(
            f"{contract_name} has no deployment bytecode (abstract or interface?)."
        )
    if not bytecode.startswith("0x"):
        bytecode = f"0x{bytecode}"

    deployed_bytecode = data.get("deployedBytecode")
    if isinstance(deployed_bytecode, dict):
        deployed_bytecode = deployed_bytecode.get("object")

    contract_data = {
        "contractName": data.get("contractName") or contract_name,
        "sourceId": data.get("sourceName"),
        "abi": abi,
        "deploymentBytecode": {"bytecode": bytecode},
    }
    if deployed_bytecode:
        contract_data["runtimeBytecode"] = {"bytecode": deployed_bytecode}
    try:
        return ContractType.model_validate(contract_data)
    except ValueError as e:
        raise ArtifactNotFound(f"Malformed build artifact for {contract_name}: {e}") from e


def _get_build_artifact_container(contract_name: str, artifacts_dir: Path) -> ContractContainer:
    if not artifacts_dir.is_dir():
        raise ArtifactNotFound(
            f"Build artifacts directory {artifacts_dir} does not exist; "
            "compile the contracts first."
        )

    artifact_files = find_artifact_files(contract_name, artifacts_dir)
    if not artifact_files:
        raise ArtifactNotFound(f"No build artifact found for '{contract_name}' in {artifacts_dir}.")
    if len(artifact_files) > 1:
        found = ", ".join(str(path) for path in artifact_files)
        raise ArtifactNotFound(f"Ambiguous build artifacts for '{contract_name}': {found}")

    try:
        data = _load_json(artifact_files[0])
    except (OSError, ValueError) as e:
        raise ArtifactNotFound(f"Could not read build artifact {artifact_files[0]}: {e}") from e

    contract_type = contract_type_from_artifact(contract_name, data)
    return ContractContainer(contract_type)


def _get_project_container(contract_name: str) -> ContractContainer:
    try:
        return getattr(project, contract_name)
    except (AttributeError, ProjectError) as e:
        raise ArtifactNotFound(f"No contract found with name '{contract_name}'.") from e


def get_contract_container(
    contract_name: str, artifacts_dir: Optional[Path] = None
) -> ContractContainer:
    """
    Resolves the factory for a contract, from build artifacts when a
    directory is given, otherwise from the ape project.
    """
    if artifacts_dir is not None:
        return _get_build_artifact_container(contract_name, Path(artifacts_dir))
    return _get_project_container(contract_name)
