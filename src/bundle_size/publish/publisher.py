"""Publication of size history and per-build diffs to an external store."""

import asyncio
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import requests

from ..core.logging import get_logger
from ..core.snapshot import Snapshot

logger = get_logger(__name__)


class Publisher(ABC):
    """Abstract sink for size data.

    Both operations are best effort: implementations log failures instead
    of raising them into the build.
    """

    @abstractmethod
    async def publish_sizes(self, history: List[Snapshot], label: str) -> bool:
        """Publish the full history (most recent first)."""
        pass

    @abstractmethod
    async def publish_diff(self, snapshot: Snapshot, label: str) -> bool:
        """Publish the snapshot of a single build."""
        pass


def ci_metadata() -> Dict[str, Optional[str]]:
    """Repository details for the current CI run, if any."""
    return {
        'repo': os.getenv('GITHUB_REPOSITORY'),
        'branch': os.getenv('GITHUB_HEAD_REF') or os.getenv('GITHUB_REF_NAME'),
        'sha': os.getenv('GITHUB_SHA'),
        'event': os.getenv('GITHUB_EVENT_NAME'),
    }


class HttpPublisher(Publisher):
    """POSTs JSON payloads to a size store service."""

    def __init__(self, url: str, token: Optional[str] = None, timeout: float = 10.0):
        """Initialize the publisher.

        Args:
            url: Base URL of the size store; ``/sizes`` and ``/diff`` are appended
            token: Optional bearer token
            timeout: Request timeout in seconds
        """
        if not url:
            raise ValueError("HttpPublisher requires a url")
        self.url = url.rstrip('/')
        self.token = token
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        headers = {'Content-Type': 'application/json'}
        if self.token:
            headers['Authorization'] = f"Bearer {self.token}"
        return headers

    def _post(self, endpoint: str, payload: Dict[str, Any]) -> None:
        response = requests.post(
            f"{self.url}/{endpoint}",
            json=payload,
            headers=self._headers(),
            timeout=self.timeout
        )
        response.raise_for_status()

    async def _send(self, endpoint: str, payload: Dict[str, Any]) -> bool:
        try:
            await asyncio.to_thread(self._post, endpoint, payload)
            logger.info(f"Published {endpoint} to {self.url}")
            return True
        except requests.RequestException as e:
            logger.error(f"Failed to publish {endpoint} to {self.url}: {e}")
            return False

    async def publish_sizes(self, history: List[Snapshot], label: str) -> bool:
        payload = dict(ci_metadata(), filename=label,
                       sizes=[snapshot.to_dict() for snapshot in history])
        return await self._send('sizes', payload)

    async def publish_diff(self, snapshot: Snapshot, label: str) -> bool:
        payload = dict(ci_metadata(), filename=label, diff=snapshot.to_dict())
        return await self._send('diff', payload)
