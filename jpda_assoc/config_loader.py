#!/usr/bin/env python3
"""
Configuration loader for single-scan association updates
Handles YAML parsing, validation, and updater setup
"""

import yaml
from dataclasses import dataclass
from typing import Dict, List, Optional, Union
from pathlib import Path
import logging

from .constants import AssociationAlgorithm, ApproximationType, DEFAULT_PERMANENT_BOUND
from .validators import InvalidArgumentError, parse_algorithm, parse_approximation
from .tracking.permanent import get_permanent_bound

logger = logging.getLogger(__name__)


def setup_logging(level: Union[str, int] = "INFO"):
    """Configure root logging for scripts using the association core"""
    if isinstance(level, str):
        level_value = logging.getLevelName(level.upper())
        if not isinstance(level_value, int):
            raise InvalidArgumentError(f"Unknown log level: {level}")
        level = level_value
    logging.basicConfig(level=level)


@dataclass
class UpdateConfig:
    """Single-scan update configuration"""
    algorithm: Optional[AssociationAlgorithm] = None
    approximation: Optional[ApproximationType] = None
    permanent_bound: str = DEFAULT_PERMANENT_BOUND
    use_log_domain: bool = True
    log_level: str = "INFO"

    def to_dict(self) -> Dict:
        """Convert to dictionary for saving"""
        return {
            'association': {
                'algorithm': None if self.algorithm is None else self.algorithm.name.lower(),
                'approximation': None if self.approximation is None else self.approximation.name.lower(),
                'permanent_bound': self.permanent_bound,
                'use_log_domain': self.use_log_domain
            },
            'logging': {
                'level': self.log_level
            }
        }


class ConfigLoader:
    """Load and validate update configurations"""

    def __init__(self, config_dir: str = "configs"):
        """
        Initialize configuration loader

        Args:
            config_dir: Directory containing configuration files
        """
        self.config_dir = Path(config_dir)

    def _resolve(self, config_name: str) -> Path:
        filepath = Path(config_name)
        if filepath.suffix in ('.yaml', '.yml') and filepath.exists():
            return filepath

        if not config_name.endswith(('.yaml', '.yml')):
            config_name += '.yaml'
        return self.config_dir / config_name

    def load_config(self, config_name: str) -> UpdateConfig:
        """
        Load an update configuration from YAML

        Args:
            config_name: Name of a file in the config directory (with or
                         without .yaml) or a path to a YAML file

        Returns:
            UpdateConfig object
        """
        filepath = self._resolve(config_name)
        if not filepath.exists():
            raise FileNotFoundError(f"Configuration file not found: {filepath}")

        logger.info(f"Loading configuration: {filepath}")

        with open(filepath, 'r') as f:
            config_dict = yaml.safe_load(f) or {}

        return self.parse_config(config_dict)

    def parse_config(self, config_dict: Dict) -> UpdateConfig:
        """Parse configuration dictionary into an UpdateConfig"""
        assoc_cfg = config_dict.get('association') or {}
        log_cfg = config_dict.get('logging') or {}

        algorithm = assoc_cfg.get('algorithm')
        approximation = assoc_cfg.get('approximation')
        permanent_bound = assoc_cfg.get('permanent_bound', DEFAULT_PERMANENT_BOUND)

        # Fail on unknown names at load time rather than at the first update
        permanent_bound = get_permanent_bound(permanent_bound).name

        return UpdateConfig(
            algorithm=None if algorithm is None else parse_algorithm(algorithm),
            approximation=None if approximation is None else parse_approximation(approximation),
            permanent_bound=permanent_bound,
            use_log_domain=bool(assoc_cfg.get('use_log_domain', True)),
            log_level=str(log_cfg.get('level', 'INFO')).upper()
        )

    def list_configs(self) -> List[str]:
        """List available configuration files"""
        if not self.config_dir.exists():
            return []
        return sorted(file.stem for file in self.config_dir.glob("*.yaml"))

    def validate_config(self, config: UpdateConfig) -> List[str]:
        """
        Validate update configuration

        Returns:
            List of validation warnings
        """
        warnings = []

        if config.approximation is not None:
            if config.algorithm is not None and not config.algorithm.is_approximate:
                warnings.append(
                    f"Approximation {config.approximation.name} is ignored by {config.algorithm.name}")

        if config.permanent_bound != DEFAULT_PERMANENT_BOUND:
            if config.approximation is not None and config.approximation != ApproximationType.UHLMANN:
                warnings.append(
                    f"Permanent bound {config.permanent_bound} only affects the UHLMANN approximation")

        if config.permanent_bound == 'exact':
            warnings.append("Exact permanents grow exponentially with the number of measurements")

        if not config.use_log_domain:
            warnings.append("Exact probabilities without the log domain may underflow")

        return warnings

    def save_config(self, config: UpdateConfig, filename: str) -> Path:
        """Save update configuration to YAML file"""
        if not filename.endswith('.yaml'):
            filename += '.yaml'

        self.config_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.config_dir / filename

        with open(filepath, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)

        logger.info(f"Saved configuration to {filepath}")
        return filepath
