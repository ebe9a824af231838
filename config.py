# Simulation configuration for the beer-game supply chain.
# Values can be given in code or loaded from config.json next to this file.

import json
import os
from dataclasses import dataclass, asdict, fields
from typing import Optional


DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "config.json")


class ConfigurationError(ValueError):
    """Raised when a simulation is wired or parameterized incorrectly."""


@dataclass
class SimulationConfig:
    max_weeks:          int   = 25
    order_delay:        int   = 2
    shipment_delay:     int   = 2
    initial_inventory:  int   = 15
    holding_cost:       float = 0.5
    backlog_cost:       float = 1.0
    # Manufacturer lead time; falls back to shipment_delay
    production_delay:   Optional[int] = None
    # Orchestrator fills OrderContext with downstream state and customer demand
    information_sharing: bool = False

    def __post_init__(self):
        if self.production_delay is None:
            self.production_delay = self.shipment_delay
        if self.max_weeks < 1:
            raise ConfigurationError(f"max_weeks must be at least 1, got {self.max_weeks}")
        for name in ("order_delay", "shipment_delay", "production_delay"):
            value = getattr(self, name)
            if value < 1:
                raise ConfigurationError(f"{name} must be at least 1, got {value}")
        if self.initial_inventory < 0:
            raise ConfigurationError(f"initial_inventory cannot be negative, got {self.initial_inventory}")
        if self.holding_cost < 0 or self.backlog_cost < 0:
            raise ConfigurationError("cost rates cannot be negative")

    @property
    def lead_time(self) -> int:
        """Turns between placing an order and receiving the goods."""
        return self.order_delay + self.shipment_delay

    def to_dict(self) -> dict:
        return asdict(self)


def load_config(path: Optional[str] = None) -> SimulationConfig:
    """
    Build a SimulationConfig from a JSON file.
    With no path, config.json beside this module is used if it exists,
    otherwise the defaults are returned.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH
        if not os.path.exists(path):
            return SimulationConfig()
    with open(path, "r") as f:
        raw = json.load(f)
    known = {f.name for f in fields(SimulationConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys in {path}: {', '.join(unknown)}")
    return SimulationConfig(**raw)
