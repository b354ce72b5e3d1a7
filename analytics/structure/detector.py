"""Base detector class for series analyzers."""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict

from ..models.ohlcv import OHLCV

logger = logging.getLogger(__name__)


class DetectorStats:
    """Statistics for detector performance tracking."""

    def __init__(self):
        self.seen = 0  # Series evaluated
        self.fired = 0  # Series that produced output


class Detector(ABC):
    """Abstract base class for all series detectors."""

    def __init__(self, name: str, parameters: Dict[str, Any]):
        """
        Initialize detector.

        Args:
            name: Detector name (e.g., 'SupportResistanceDetector')
            parameters: Configuration parameters
        """
        self.name = name
        self.parameters = parameters or {}
        self.enabled = self.parameters.get('enabled', True)
        self.stats = DetectorStats()
        self._stats_lock = threading.Lock()

        # Validate parameters (subclass can override)
        self._validate_parameters()

        logger.info(f"Initialized {self.name}", extra={"enabled": self.enabled})

    @abstractmethod
    def detect(self, data: OHLCV) -> Any:
        """
        Analyze a normalized OHLCV series.

        Args:
            data: OHLCV time series

        Returns:
            Detector-specific result; empty when the series is too short
        """

    def _validate_parameters(self) -> None:
        """
        Validate detector parameters.

        Subclasses should override to validate their specific parameters.
        Called during __init__(), so subclass attributes must be set BEFORE super().__init__().
        """

    def _record(self, fired: bool) -> None:
        # Detectors are shared across analyze_many worker threads
        with self._stats_lock:
            self.stats.seen += 1
            if fired:
                self.stats.fired += 1

    def get_summary(self) -> Dict[str, Any]:
        return {
            "class": self.__class__.__name__,
            "enabled": self.enabled,
            "seen": self.stats.seen,
            "fired": self.stats.fired,
        }
