"""Result presentation hook for the client orchestrator."""

import logging
from typing import Any, Dict, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


class ResultPresenter(Protocol):
    """Receives every successful result, e.g. to render it in a UI."""

    def present(self, operation: str, result: str, params: Dict[str, Any]) -> None:
        ...


class LoggingPresenter:
    """Logs results instead of displaying them."""

    def present(self, operation: str, result: str, params: Dict[str, Any]) -> None:
        logger.info("Operation %s returned %d characters", operation, len(result))


class CollectingPresenter:
    """Keeps every presented result in memory, newest last."""

    def __init__(self) -> None:
        self.results: List[Tuple[str, str, Dict[str, Any]]] = []

    def present(self, operation: str, result: str, params: Dict[str, Any]) -> None:
        self.results.append((operation, result, dict(params)))

    @property
    def last(self) -> Optional[Tuple[str, str, Dict[str, Any]]]:
        return self.results[-1] if self.results else None
