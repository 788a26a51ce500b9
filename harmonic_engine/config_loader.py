"""
Configuration loader for engine policy and the chord difficulty table.

Provides centralized loading of YAML configuration files with caching.
The engine functions never read configuration themselves: callers load an
EngineConfig / DifficultyTable here and pass it in. Both dataclasses carry
built-in defaults, so the YAML files only need to list overrides.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Optional
import logging

import yaml

from .difficulty import DifficultySettings, DifficultyTable
from .exercise_scoring import CloseLurePolicy

logger = logging.getLogger(__name__)


ENGINE_CONFIG_FILE = "engine.yaml"
DIFFICULTY_TABLE_FILE = "chord_difficulties.yaml"


class ConfigLoadError(Exception):
    """Raised when configuration loading fails."""
    pass


@dataclass
class EngineConfig:
    """Tunable policy of the question engine."""
    close_lures: CloseLurePolicy = field(default_factory=CloseLurePolicy)
    difficulty: DifficultySettings = field(default_factory=DifficultySettings)

    @classmethod
    def from_dict(cls, data: Dict) -> 'EngineConfig':
        return cls(
            close_lures=CloseLurePolicy.from_dict(data.get('close_lures') or {}),
            difficulty=DifficultySettings.from_dict(data.get('difficulty') or {}),
        )


class ConfigLoader:
    """
    Loads engine configs from YAML files with caching.
    
    Attributes:
        config_dir: Base directory for configuration files
    """
    
    def __init__(self, config_dir: Optional[Path] = None):
        """
        Args:
            config_dir: Directory holding engine.yaml and chord_difficulties.yaml.
                        Defaults to the ``configs`` directory shipped with the package.
        """
        if config_dir is None:
            self.config_dir = Path(__file__).parent / "configs"
        else:
            self.config_dir = Path(config_dir)
        
        self._cache: Dict[str, Any] = {}
        
    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        """
        Parse one YAML file; the top level must be a mapping.
        
        Raises:
            ConfigLoadError: If the file cannot be loaded or parsed
        """
        if not path.exists():
            raise ConfigLoadError(f"Configuration file not found: {path}")
        
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigLoadError(f"Failed to parse YAML file {path}: {e}")
        except OSError as e:
            raise ConfigLoadError(f"Failed to load configuration file {path}: {e}")

        if not isinstance(data, dict):
            raise ConfigLoadError(f"Expected a mapping at the top of {path}")
        return data

    def _load_cached(self, filename: str) -> Dict[str, Any]:
        if filename in self._cache:
            return self._cache[filename]

        path = self.config_dir / filename
        data = self._load_yaml(path)
        self._cache[filename] = data
        logger.debug(f"Loaded {filename} from {path}")
        return data
    
    def load_engine_config(self) -> EngineConfig:
        """
        Load QCM and difficulty policy from engine.yaml.
        
        Returns:
            EngineConfig; built-in defaults when the file is absent
            
        Raises:
            ConfigLoadError: If the file exists but cannot be parsed
        """
        if not self.has_engine_config():
            logger.warning(f"No {ENGINE_CONFIG_FILE} in {self.config_dir}, using built-in defaults")
            return EngineConfig()
        
        data = self._load_cached(ENGINE_CONFIG_FILE)
        try:
            return EngineConfig.from_dict(data)
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigLoadError(f"Invalid engine configuration: {e}")
    
    def load_difficulty_table(self) -> DifficultyTable:
        """
        Load the chord-key difficulty table from chord_difficulties.yaml.
        
        Returns:
            DifficultyTable; the built-in table when the file is absent
            
        Raises:
            ConfigLoadError: If the file exists but is invalid
        """
        if not self.has_difficulty_table():
            logger.warning(f"No {DIFFICULTY_TABLE_FILE} in {self.config_dir}, using built-in table")
            return DifficultyTable()
        
        data = self._load_cached(DIFFICULTY_TABLE_FILE)
        try:
            table = DifficultyTable.from_dict(data)
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigLoadError(f"Invalid chord difficulty table: {e}")

        out_of_range = [k for k, v in table.chord_keys.items() if not 1 <= v <= 4]
        if out_of_range:
            raise ConfigLoadError(f"Difficulties must be 1-4, got invalid keys: {sorted(out_of_range)}")
        return table
    
    def has_engine_config(self) -> bool:
        return (self.config_dir / ENGINE_CONFIG_FILE).exists()
    
    def has_difficulty_table(self) -> bool:
        return (self.config_dir / DIFFICULTY_TABLE_FILE).exists()
    
    def reload(self) -> None:
        """Drop cached files so edited YAML is read again on next load."""
        self._cache.clear()
        logger.info("Configuration cache cleared")


# Default loader shared by callers that do not pass a directory
_default_loader: Optional[ConfigLoader] = None


def get_config_loader(config_dir: Optional[Path] = None) -> ConfigLoader:
    """
    Shared loader for the packaged configs.

    Passing ``config_dir`` returns a fresh, unshared loader for that
    directory instead.
    """
    global _default_loader
    
    if config_dir is not None:
        return ConfigLoader(config_dir)
    
    if _default_loader is None:
        _default_loader = ConfigLoader()
    
    return _default_loader
