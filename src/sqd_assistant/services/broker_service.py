from __future__ import annotations

import logging
from typing import List

from ..repositories import Repository

logger = logging.getLogger(__name__)


class BrokerService:
    """Lookup of the broker tags already in use."""

    def __init__(self, repository: Repository) -> None:
        self.repository = repository

    def get_pool(self) -> List[str]:
        logger.info("BrokerService.get_pool")
        brokers = self.repository.distinct_brokers()
        logger.info("Retrieved %d brokers", len(brokers))
        return brokers
