"""
Response helpers for ark_sdk.client.
"""
import logging

from ..errors import ArkServerStatusError
from .types import ArkResponse

logger = logging.getLogger(__name__)


def raise_for_status(response: ArkResponse, action: str) -> ArkResponse:
    """
    Return the response when it is 2xx.

    Raises:
        ArkServerStatusError: With the status and response text otherwise
    """
    if response["ok"]:
        return response
    logger.error(
        f"raise_for_status: Failed to {action} - [{response['status']}] {response['url']}"
    )
    raise ArkServerStatusError(action, response["status"], response["text"])
