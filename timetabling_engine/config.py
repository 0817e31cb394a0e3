# timetabling_engine/config.py

"""
Configuration module for the timetabling engine.

Holds the tunables of the or-tree search, the population controller and the
soft-constraint penalty weights. Values can be loaded from the flat key/value
settings used by existing scheduling runs via ``SchedulingEngineConfig.from_dict``.
"""

from typing import Dict, Any, Optional
from enum import Enum
from dataclasses import dataclass, field
import logging

from .exceptions import ProblemConfigurationError


class CycleAction(Enum):
    """Action taken by one population control cycle"""

    REDUCE = "reduce"
    CROSSOVER = "crossover"


@dataclass
class SearchConfig:
    """Configuration for the or-tree search"""

    max_frontier_size: int = 28000
    # Restarts allowed in one search call before it reports exhaustion
    max_frontier_resets: int = 1000
    # Parent draws attempted before a crossover cycle is abandoned
    selection_attempts: int = 10


@dataclass
class PopulationConfig:
    """Configuration for the set-based (population) search"""

    initial_population: int = 10
    max_population: int = 10
    num_remove: int = 1
    max_generations: int = 10

    # Stability detection
    stable_threshold: int = 1
    max_stable_generations: int = 500


@dataclass
class PenaltyWeights:
    """Weights and penalties of the soft constraints"""

    w_min_filled: int = 1
    w_pref: int = 1
    w_pair: int = 1
    w_sec_diff: int = 1

    pen_course_min: int = 1
    pen_lab_min: int = 1
    pen_not_paired: int = 1
    pen_section: int = 1


@dataclass
class SchedulingEngineConfig:
    """Main configuration for the timetabling engine"""

    search: SearchConfig = field(default_factory=SearchConfig)
    population: PopulationConfig = field(default_factory=PopulationConfig)
    weights: PenaltyWeights = field(default_factory=PenaltyWeights)

    # Global settings
    time_limit_seconds: float = 60.0 * 60 * 24
    seed: Optional[int] = None
    enable_logging: bool = True
    log_level: str = "INFO"

    def validate(self) -> None:
        """Reject settings the engine cannot run with."""
        positive = {
            "max_frontier_size": self.search.max_frontier_size,
            "max_frontier_resets": self.search.max_frontier_resets,
            "selection_attempts": self.search.selection_attempts,
            "initial_population": self.population.initial_population,
            "max_population": self.population.max_population,
            "num_remove": self.population.num_remove,
        }
        for name, value in positive.items():
            if value < 1:
                raise ProblemConfigurationError(
                    f"Setting '{name}' must be positive, got {value}"
                )
        if self.population.max_generations < 0:
            raise ProblemConfigurationError(
                f"Setting 'max_generations' must not be negative, "
                f"got {self.population.max_generations}"
            )
        if self.time_limit_seconds <= 0:
            raise ProblemConfigurationError(
                f"Setting 'time_limit_seconds' must be positive, "
                f"got {self.time_limit_seconds}"
            )

    @classmethod
    def from_dict(cls, settings: Dict[str, Any]) -> "SchedulingEngineConfig":
        """
        Build a configuration from flat key/value settings.

        Keys use the names of the scheduling run settings files
        (``initialPop``, ``maxPop``, ``wMinFilled``, ...). Values may be strings.
        """
        engine_config = cls()
        for key, raw_value in settings.items():
            if key in _IGNORED_KEYS:
                continue
            target = _SETTING_KEYS.get(key)
            if target is None:
                raise ProblemConfigurationError(f"Unknown setting '{key}'")
            try:
                value = int(str(raw_value).strip())
            except ValueError as e:
                raise ProblemConfigurationError(
                    f"Setting '{key}' expects an integer, got {raw_value!r}"
                ) from e
            section, attribute = target
            owner = getattr(engine_config, section) if section else engine_config
            setattr(owner, attribute, value)

        engine_config.validate()
        return engine_config


# Console tracing switches of the settings files; log levels replace them
_IGNORED_KEYS = {"printPr", "printData"}

_SETTING_KEYS = {
    "initialPop": ("population", "initial_population"),
    "maxPop": ("population", "max_population"),
    "numRemove": ("population", "num_remove"),
    "maxGeneration": ("population", "max_generations"),
    "stableThreshold": ("population", "stable_threshold"),
    "maxStableGeneration": ("population", "max_stable_generations"),
    "maxFrontierSize": ("search", "max_frontier_size"),
    "maxFrontierResets": ("search", "max_frontier_resets"),
    "wMinFilled": ("weights", "w_min_filled"),
    "wPref": ("weights", "w_pref"),
    "wPair": ("weights", "w_pair"),
    "wSecDiff": ("weights", "w_sec_diff"),
    "penCourseMin": ("weights", "pen_course_min"),
    "penLabMin": ("weights", "pen_lab_min"),
    "penNotPaired": ("weights", "pen_not_paired"),
    "penSection": ("weights", "pen_section"),
    "seed": (None, "seed"),
}


# Global configuration instance
config = SchedulingEngineConfig()


def get_logger(name: str) -> logging.Logger:
    """Get configured logger for the timetabling engine"""
    logger = logging.getLogger(f"timetabling_engine.{name}")
    if config.enable_logging and not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(getattr(logging, config.log_level))
    return logger
