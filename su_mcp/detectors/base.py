from abc import ABC, abstractmethod
from typing import List
from su_mcp.config import Thresholds
from su_mcp.models import Issue, ProfileIndex

class BaseDetector(ABC):
    """Base class for detectors that inspect a scan snapshot."""

    def __init__(self, thresholds: Thresholds):
        """Initialize detector with thresholds.

        Args:
            thresholds: Threshold values for detection
        """
        self.thresholds = thresholds

    @abstractmethod
    def detect(self, index: ProfileIndex) -> List[Issue]:
        """Execute detection and return list of issues.

        Args:
            index: Profile snapshot produced by a scan

        Returns:
            List of Issue objects found
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Get detector name.

        Returns:
            Detector name string
        """
        pass
