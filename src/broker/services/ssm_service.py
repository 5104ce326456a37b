"""SSM Parameter Store access for gateway credentials.

Used when ``CREDENTIALS_SOURCE=ssm``: the Razorpay key id and key secret are
read as SecureString parameters instead of plain environment variables.
"""

import logging
from functools import lru_cache

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)


class SSMServiceError(Exception):
    """Raised when SSM parameter retrieval fails."""


class SSMParameterNotFound(SSMServiceError):
    """Raised when a parameter does not exist."""


class SSMService:
    """Retrieves and caches SecureString parameters.

    Usage:
        ssm = SSMService()
        secret = ssm.get_parameter("/payment-broker/dev/razorpay/key_secret")
    """

    def __init__(self, client=None) -> None:
        """Initialize the SSM client.

        Args:
            client: Optional boto3 SSM client (created lazily when omitted)
        """
        self._client = client
        self._cache: dict[str, str] = {}

    def _get_client(self):
        if self._client is None:
            self._client = boto3.client("ssm")
        return self._client

    def get_parameter(self, name: str) -> str:
        """Retrieve a decrypted parameter value.

        Args:
            name: Full parameter path

        Returns:
            The decrypted parameter value.

        Raises:
            SSMParameterNotFound: If the parameter does not exist.
            SSMServiceError: If the parameter cannot be retrieved.
        """
        if name in self._cache:
            logger.debug("SSM cache hit for %s", name)
            return self._cache[name]

        try:
            logger.info("Fetching SSM parameter: %s", name)
            response = self._get_client().get_parameter(Name=name, WithDecryption=True)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code == "ParameterNotFound":
                raise SSMParameterNotFound(f"SSM parameter not found: {name}") from e
            if error_code == "AccessDeniedException":
                raise SSMServiceError(
                    f"Access denied to SSM parameter: {name}. "
                    "Check IAM permissions for ssm:GetParameter."
                ) from e
            raise SSMServiceError(f"Failed to retrieve SSM parameter {name}: {e}") from e
        except BotoCoreError as e:
            raise SSMServiceError(f"Failed to retrieve SSM parameter {name}: {e}") from e

        value = response["Parameter"]["Value"]
        self._cache[name] = value
        return value

    def get_optional_parameter(self, name: str) -> str | None:
        """Retrieve a parameter, returning None if it does not exist."""
        try:
            return self.get_parameter(name)
        except SSMParameterNotFound:
            logger.warning("SSM parameter %s is not set", name)
            return None


@lru_cache(maxsize=1)
def get_ssm_service() -> SSMService:
    """Get the shared SSMService instance."""
    return SSMService()
