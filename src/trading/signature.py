"""
HMAC-SHA256 request signing for authenticated exchange calls
"""

import hashlib
import hmac

from src.core.exceptions import SignatureError
from src.utils.logger import get_logger

logger = get_logger(__name__)


class SignatureProvider:
    """Signs query strings with an API secret. The secret is never stored."""

    digestmod = hashlib.sha256

    def sign(self, message: str, secret: str) -> str:
        """Return the lowercase hex HMAC of *message* keyed by *secret*"""
        try:
            key = secret.encode("utf-8")
            payload = message.encode("utf-8")
            return hmac.new(key, payload, self.digestmod).hexdigest()
        except (AttributeError, TypeError, ValueError) as e:
            logger.error(f"Error creating signature: {type(e).__name__}")
            raise SignatureError(f"Failed to create API signature: {e}") from e
