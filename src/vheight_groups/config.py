"""
Configuration for vheight-groups.

Grouping parameters are read from the [grouping] table of a TOML file:

    [grouping]
    vh_min = 75.0      # Minimum allowable virtual height (km)
    vh_max = 900.0     # Maximum allowable virtual height (km)
    vh_box = 50.0      # Suggested virtual height bin width (km)
    min_pnts = 3       # Points needed for the global maximum to be a peak
    max_vbin = 20      # Maximum number of virtual height bins

Configuration precedence:
    1. Explicit path passed to load_config()
    2. File named by the VHEIGHT_GROUPS_CONFIG environment variable
    3. Built-in defaults
"""

from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Any, Dict, Optional
import copy
import logging
import os

import toml

from .exceptions import InvalidConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = 'VHEIGHT_GROUPS_CONFIG'

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'

DEFAULT_CONFIG: Dict[str, Any] = {
    'grouping': {
        'vh_min': 75.0,
        'vh_max': 900.0,
        'vh_box': 50.0,
        'min_pnts': 3,
        'max_vbin': 20,
    },
}


def setup_logging(debug: bool = False) -> None:
    """Configure root logging for applications embedding the pipeline."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from TOML file."""
    if config_path is None:
        config_path = os.environ.get(CONFIG_ENV_VAR)

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        with open(path, 'r') as f:
            config = toml.load(f)
        logger.debug(f"Loaded configuration from {path}")
        return config

    return copy.deepcopy(DEFAULT_CONFIG)


@dataclass(frozen=True)
class GroupingConfig:
    """Parameters of select_alt_groups()."""
    vh_min: float = 75.0
    vh_max: float = 900.0
    vh_box: float = 50.0
    min_pnts: int = 3
    max_vbin: int = 20

    def __post_init__(self):
        if not self.vh_box > 0:
            raise InvalidConfigurationError(f"vh_box must be positive, got {self.vh_box}")
        if not self.vh_max > self.vh_min:
            raise InvalidConfigurationError(
                f"vh_max ({self.vh_max}) must be greater than vh_min ({self.vh_min})")
        if self.max_vbin < 1:
            raise InvalidConfigurationError(
                f"max_vbin must be at least 1, got {self.max_vbin}")

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "GroupingConfig":
        """
        Build from a loaded configuration.

        Accepts either the whole configuration (with a [grouping] table) or
        the table itself. Unknown keys are ignored, missing keys defaulted.
        """
        section = config.get('grouping', config)
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in section.items():
            if key not in known:
                continue
            kwargs[key] = int(value) if key in ('min_pnts', 'max_vbin') else float(value)
        return cls(**kwargs)

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "GroupingConfig":
        """Load from TOML (or defaults) in one step."""
        return cls.from_dict(load_config(config_path))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
