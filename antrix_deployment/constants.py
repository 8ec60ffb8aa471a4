from pathlib import Path

import antrix_deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(antrix_deployment.__file__).parent
PROJECT_ROOT = DEPLOYMENT_DIR.parent
OUTPUT_DIR = PROJECT_ROOT / "ignition" / "modules"

#
# Contracts
#

CONTRACT_NAME = "Antrix"

#
# Output
#

DEPLOYMENT_BANNER = "Deployment started!"

#
# Environment
#

OWNER_ADDRESS_ENVVAR = "OWNER_ADDRESS"

#
# Networks
#

LOCAL_NETWORKS = ["local"]

# seconds from sending the transaction; covers inclusion plus any extra confirmations
DEFAULT_CONFIRMATION_TIMEOUT = 600

#
# Artifacts
#

ADDRESS_FILENAME_TEMPLATE = "contract-address-{network}.json"
REGISTRY_FILENAME_TEMPLATE = "deployment-{network}.json"
DEBUG_ARTIFACT_SUFFIX = ".dbg.json"
ARTIFACT_JSON_FORMAT = {"indent": 2}
