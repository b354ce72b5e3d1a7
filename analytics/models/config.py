"""
Configuration models.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from hashlib import sha256
import json


@dataclass
class ConfigHash:
    """Configuration hash for reproducibility."""
    hash_value: str
    timestamp: str

    @staticmethod
    def compute(config_dict: Dict[str, Any]) -> str:
        """Compute SHA256 hash of config."""
        json_str = json.dumps(config_dict, sort_keys=True, default=str)
        return sha256(json_str.encode()).hexdigest()


@dataclass
class Config:
    """Analytics configuration."""
    indicator_configs: Dict[str, Any] = field(default_factory=dict)
    level_configs: Dict[str, Any] = field(default_factory=dict)
    heatmap_configs: Dict[str, Any] = field(default_factory=dict)
    data_configs: Dict[str, Any] = field(default_factory=dict)
    config_hash: Optional[ConfigHash] = None

    def __post_init__(self):
        if self.config_hash is None:
            self.config_hash = ConfigHash(
                hash_value=ConfigHash.compute(self.analysis_parameters()),
                timestamp=datetime.now(timezone.utc).isoformat()
            )

    def analysis_parameters(self) -> Dict[str, Any]:
        """Parameters that influence analysis output (data source excluded)."""
        return {
            'indicators': self.indicator_configs,
            'levels': self.level_configs,
            'heatmap': self.heatmap_configs,
        }
