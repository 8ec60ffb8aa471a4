#!/usr/bin/python3
"""
Deploys Antrix with OWNER_ADDRESS as owner.

    ape run deploy --network ethereum:local:test
    ape run deploy --network ethereum:sepolia:infura --account deployer -p params/sepolia.yml
"""

from antrix_deployment.cli import cli

if __name__ == "__main__":
    cli()
