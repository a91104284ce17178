"""
Report delivery collaborator.

Rendering and sending a finished analysis (email, PDF, object storage) is
fallible and slow, and sits outside the modeling core. The core only knows
the ReportDelivery interface; deliver_with_retry() adds bounded retries.
"""

import json
import logging
import time
from pathlib import Path
from typing import Callable, Protocol

from pydantic import BaseModel

from pfas_gac.exceptions import PFASModelError

logger = logging.getLogger(__name__)


class DeliveryError(PFASModelError):
    """A delivery attempt failed and may be retried."""
    pass


class ReportDelivery(Protocol):
    def deliver(self, result: BaseModel) -> str:
        """Deliver a result and return a receipt (message id, path, URL)."""
        ...


class JsonFileDelivery:
    """Writes each result as a JSON file into a directory."""

    def __init__(self, directory: str | Path, prefix: str = "analysis"):
        self.directory = Path(directory)
        self.prefix = prefix
        self._counter = 0

    def deliver(self, result: BaseModel) -> str:
        self._counter += 1
        path = self.directory / f"{self.prefix}_{self._counter:04d}.json"
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(result.model_dump(mode="json"), indent=2))
        except OSError as e:
            raise DeliveryError(f"Could not write report: {e}", details={"path": str(path)}) from e
        return str(path)


def deliver_with_retry(
    delivery: ReportDelivery,
    result: BaseModel,
    attempts: int = 3,
    backoff_s: float = 0.5,
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """
    Deliver a result, retrying on DeliveryError with linear backoff.

    Args:
        delivery: Delivery implementation
        result: Analysis or validation result
        attempts: Maximum number of attempts
        backoff_s: Delay after the first failure; grows linearly
        sleep: Sleep function

    Returns:
        Receipt from the successful attempt

    Raises:
        DeliveryError: If every attempt fails
    """
    attempts = max(1, attempts)
    for attempt in range(1, attempts + 1):
        try:
            receipt = delivery.deliver(result)
            logger.info("Report delivered on attempt %d: %s", attempt, receipt)
            return receipt
        except DeliveryError as e:
            logger.warning("Delivery attempt %d/%d failed: %s", attempt, attempts, e)
            if attempt == attempts:
                raise
            sleep(backoff_s * attempt)
