"""Global settings for the nightwatch simulation."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List
import logging

import yaml

from . import constants as C

logger = logging.getLogger(__name__)


@dataclass
class NightSettings:
    """Night length and driver cadences."""
    first_night: int = C.FIRST_NIGHT
    night_length_minutes: int = C.NIGHT_LENGTH_MINUTES
    minute_step: int = C.MINUTE_STEP
    max_power: int = C.MAX_POWER
    minute_interval_ms: int = C.MINUTE_INTERVAL_MS
    power_interval_ms: int = C.POWER_INTERVAL_MS
    movement_interval_ms: int = C.MOVEMENT_INTERVAL_MS
    threat_interval_ms: int = C.THREAT_INTERVAL_MS
    max_ticks_per_update: int = C.MAX_TICKS_PER_UPDATE


@dataclass
class PowerSettings:
    """Power drain weights per active subsystem."""
    base_usage: int = C.BASE_POWER_USAGE
    camera: int = C.CAMERA_USAGE
    door: int = C.DOOR_USAGE
    light: int = C.LIGHT_USAGE


def _default_roster() -> List[Dict[str, Any]]:
    return [
        {"name": "Freddy", "kind": "roamer", "spawn": C.SHOW_STAGE, "aggressiveness": 1.0},
        {"name": "Bonnie", "kind": "roamer", "spawn": C.SHOW_STAGE, "aggressiveness": 2.0},
        {"name": "Chica", "kind": "roamer", "spawn": C.SHOW_STAGE, "aggressiveness": 2.0},
        {"name": "Foxy", "kind": "scripted", "spawn": C.PIRATE_COVE, "aggressiveness": 3.0},
    ]


@dataclass
class AgentSettings:
    """Movement and threat parameters."""
    move_cooldown_ms: int = C.MOVE_COOLDOWN_MS
    base_rate: float = C.BASE_RATE
    time_rate: float = C.TIME_RATE
    loss_probability: float = C.LOSS_PROBABILITY
    roster: List[Dict[str, Any]] = field(default_factory=_default_roster)


@dataclass
class Settings:
    """Main settings container."""
    night: NightSettings = field(default_factory=NightSettings)
    power: PowerSettings = field(default_factory=PowerSettings)
    agents: AgentSettings = field(default_factory=AgentSettings)

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Settings":
        """Load settings from YAML file, falling back to defaults."""
        settings = cls()

        if config_path and config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}

            for section in ("night", "power", "agents"):
                if section not in data:
                    continue
                target = getattr(settings, section)
                for key, value in (data[section] or {}).items():
                    if hasattr(target, key):
                        setattr(target, key, value)
                    else:
                        logger.warning(f"Unknown setting '{section}.{key}' ignored")

        probability = settings.agents.loss_probability
        clamped = max(0.0, min(1.0, probability))
        if clamped != probability:
            logger.warning(f"Loss probability {probability} clamped to {clamped}")
            settings.agents.loss_probability = clamped

        return settings

    def save(self, config_path: Path) -> None:
        """Save current settings to YAML file."""
        data = {
            "night": {
                "first_night": self.night.first_night,
                "night_length_minutes": self.night.night_length_minutes,
                "minute_step": self.night.minute_step,
                "max_power": self.night.max_power,
                "minute_interval_ms": self.night.minute_interval_ms,
                "power_interval_ms": self.night.power_interval_ms,
                "movement_interval_ms": self.night.movement_interval_ms,
                "threat_interval_ms": self.night.threat_interval_ms,
                "max_ticks_per_update": self.night.max_ticks_per_update,
            },
            "power": {
                "base_usage": self.power.base_usage,
                "camera": self.power.camera,
                "door": self.power.door,
                "light": self.power.light,
            },
            "agents": {
                "move_cooldown_ms": self.agents.move_cooldown_ms,
                "base_rate": self.agents.base_rate,
                "time_rate": self.agents.time_rate,
                "loss_probability": self.agents.loss_probability,
                "roster": self.agents.roster,
            },
        }

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

_settings: Settings | None = None

def get_settings() -> Settings:
    """Get global settings instance."""
    global _settings
    if _settings is None:
        config_path = Path(__file__).parent / "nightwatch.yaml"
        _settings = Settings.load(config_path)
    return _settings


def reset_settings() -> None:
    """Reset the global settings (for testing)."""
    global _settings
    _settings = None
