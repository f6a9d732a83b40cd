"""
Configuration - how the watch face draws and animates.

Nothing here is user-facing yet. The values default to the design tokens
and can be overridden from a YAML or JSON file for a particular device
build. Configuration is read-only: there is no save path.
"""

import json
import logging
import yaml
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Tuple, Optional, Dict, Any

from .display.design import COLORS, STROKES, TIMING


logger = logging.getLogger(__name__)


def _color(value: Any) -> Tuple[int, int, int]:
    """YAML/JSON give lists; colors are tuples everywhere else."""
    return tuple(int(c) for c in value)


def _valid_color(color: Tuple[int, ...]) -> bool:
    return len(color) == 3 and all(0 <= c <= 255 for c in color)


@dataclass
class HandStyleConfig:
    """Hand colors and shadow."""
    hour_hand_color: Tuple[int, int, int] = COLORS.HAND
    minute_hand_color: Tuple[int, int, int] = COLORS.HAND
    second_hand_color: Tuple[int, int, int] = COLORS.HAND_HIGHLIGHT
    shadow_color: Tuple[int, int, int] = COLORS.HAND_SHADOW
    shadow_radius: int = STROKES.SHADOW_RADIUS

    def validate(self) -> Tuple[bool, Optional[str]]:
        for name in ("hour_hand_color", "minute_hand_color", "second_hand_color", "shadow_color"):
            if not _valid_color(getattr(self, name)):
                return False, f"{name} must be three 0-255 components"
        if self.shadow_radius < 0:
            return False, "shadow_radius must be >= 0"
        return True, None


@dataclass
class AnimationConfig:
    """Eye-rotation animation cadence."""
    frame_step: int = TIMING.PHASE_STEP
    frame_delay_ms: int = TIMING.FRAME_DELAY_MS

    def validate(self) -> Tuple[bool, Optional[str]]:
        if self.frame_step <= 0:
            return False, "animation frame_step must be positive"
        if self.frame_delay_ms < 0:
            return False, "animation frame_delay_ms must be >= 0"
        return True, None


@dataclass
class WatchFaceConfig:
    """Complete configuration for the watch face."""
    hands: HandStyleConfig = field(default_factory=HandStyleConfig)
    animation: AnimationConfig = field(default_factory=AnimationConfig)
    text_color: Tuple[int, int, int] = COLORS.SCREEN_TEXT

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WatchFaceConfig":
        """Create from dictionary. Missing keys keep their defaults."""
        hands = dict(data.get("hands") or {})
        for key in ("hour_hand_color", "minute_hand_color", "second_hand_color", "shadow_color"):
            if key in hands:
                hands[key] = _color(hands[key])

        config = cls(
            hands=HandStyleConfig(**hands),
            animation=AnimationConfig(**(data.get("animation") or {})),
        )
        if "text_color" in data:
            config.text_color = _color(data["text_color"])
        return config

    def validate(self) -> Tuple[bool, Optional[str]]:
        """Validate entire configuration."""
        valid, error = self.hands.validate()
        if not valid:
            return False, f"Hands: {error}"

        valid, error = self.animation.validate()
        if not valid:
            return False, f"Animation: {error}"

        if not _valid_color(self.text_color):
            return False, "text_color must be three 0-255 components"

        return True, None


class ConfigManager:
    """Loads configuration from disk, falling back to defaults."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize config manager.

        Args:
            config_path: Path to config file (default: watchface.yaml in current dir)
        """
        if config_path is None:
            config_path = Path("watchface.yaml")
        self.config_path = Path(config_path)
        self._config: Optional[WatchFaceConfig] = None

    def load(self, force_reload: bool = False) -> WatchFaceConfig:
        """Load configuration from file or return defaults."""
        if self._config is not None and not force_reload:
            return self._config

        if self.config_path.exists():
            try:
                with open(self.config_path, "r") as f:
                    if self.config_path.suffix in (".yaml", ".yml"):
                        data = yaml.safe_load(f) or {}
                    else:
                        data = json.load(f)

                if not isinstance(data, dict):
                    raise ValueError(f"top level must be a mapping, got {type(data).__name__}")

                self._config = WatchFaceConfig.from_dict(data)

                valid, error = self._config.validate()
                if not valid:
                    logger.warning("Invalid config %s, using defaults: %s", self.config_path, error)
                    self._config = WatchFaceConfig()
            except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
                logger.warning("Error loading config %s, using defaults: %s", self.config_path, e)
                self._config = WatchFaceConfig()
        else:
            self._config = WatchFaceConfig()

        return self._config

    def reload(self) -> WatchFaceConfig:
        """Force reload configuration from file."""
        self._config = None
        return self.load()


# Global config manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_path: Optional[Path] = None) -> ConfigManager:
    """Get global config manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager(config_path)
    return _config_manager


def get_watch_face_config() -> WatchFaceConfig:
    """Get current watch face configuration."""
    return get_config_manager().load()
