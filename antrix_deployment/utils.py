import json
from pathlib import Path

import yaml

from antrix_deployment.constants import ARTIFACT_JSON_FORMAT


def _load_yaml(filepath: Path) -> dict:
    """Loads a YAML file."""
    with open(filepath, "r") as file:
        return yaml.safe_load(file)


def _load_json(filepath: Path) -> dict:
    """Loads a JSON file."""
    with open(filepath, "r") as file:
        return json.load(file)


def _write_json(data, filepath: Path) -> Path:
    with open(filepath, "w") as file:
        json.dump(data, file, **ARTIFACT_JSON_FORMAT)
    return filepath
