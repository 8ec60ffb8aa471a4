class DeploymentError(Exception):
    """Base class for failures that end a deployment run."""


class NoSignerAvailable(DeploymentError):
    """Raised when no account is available to sign the deployment."""


class ArtifactNotFound(DeploymentError):
    """Raised when the compiled contract cannot be resolved."""


class MissingConfiguration(DeploymentError):
    """Raised when a required setting (e.g. an environment variable) is unset."""


class InvalidConfiguration(DeploymentError):
    """Raised when a setting is present but malformed."""


class DeploymentConfigError(DeploymentError, ValueError):
    """Raised when a deployment params file is invalid."""


class TransactionRejected(DeploymentError):
    """Raised when the network or signer rejects the deployment transaction."""


class ConfirmationTimeout(DeploymentError):
    """Raised when the deployment is not confirmed within the configured window."""


class DeploymentAborted(DeploymentError):
    """Raised when the operator declines to continue."""
