from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, Optional

import numpy as np

from .acc import ACC
from .idm import IDM, IDMPlus
from .longitudinal import NOISE_ACC, CarFollowingModel, SpeedRestrictions
from .mobil import MOBIL

logger = logging.getLogger(__name__)

LONGITUDINAL_MODELS = {"IDM": IDM, "IDM+": IDMPlus, "ACC": ACC}


@dataclass
class LongitudinalParams:
    model: str = "ACC"
    v0: float = 30.0
    T: float = 1.5
    s0: float = 2.0
    a: float = 1.0
    b: float = 1.5
    b_max: Optional[float] = None  # None keeps the model default (16 IDM, 18 ACC)
    cool: Optional[float] = None  # ACC only
    noise_acc: float = NOISE_ACC


@dataclass
class LaneChangeParams:
    b_safe: float = 4.0
    b_safe_max: float = 8.0
    p: float = 0.1
    b_thr: float = 0.2
    b_bias_right: float = 0.1
    target_lane_prio: bool = False


@dataclass
class VehicleClassConfig:
    """Calibration of one vehicle class: length plus longitudinal and lane-change models."""

    name: str
    length: float = 5.0
    longitudinal: LongitudinalParams = field(default_factory=LongitudinalParams)
    lane_change: LaneChangeParams = field(default_factory=LaneChangeParams)

    def __post_init__(self) -> None:
        if self.longitudinal.model not in LONGITUDINAL_MODELS:
            raise ValueError(
                f"Unknown longitudinal model {self.longitudinal.model!r}; "
                f"expected one of {sorted(LONGITUDINAL_MODELS)}"
            )
        if self.length <= 0:
            raise ValueError("Vehicle length must be positive.")
        if self.longitudinal.cool is not None and self.longitudinal.model != "ACC":
            raise ValueError("cool is only defined for the ACC model.")

    def build_longitudinal(
        self,
        restrictions: Optional[SpeedRestrictions] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> CarFollowingModel:
        params = self.longitudinal
        kwargs = {
            "v0": params.v0,
            "T": params.T,
            "s0": params.s0,
            "a": params.a,
            "b": params.b,
            "noise_acc": params.noise_acc,
            "restrictions": restrictions if restrictions is not None else SpeedRestrictions(),
            "rng": rng if rng is not None else np.random.default_rng(),
        }
        if params.b_max is not None:
            kwargs["b_max"] = params.b_max
        if params.cool is not None:
            kwargs["cool"] = params.cool
        return LONGITUDINAL_MODELS[params.model](**kwargs)

    def build_lane_change(self, observer=None) -> MOBIL:
        return MOBIL(**asdict(self.lane_change), observer=observer)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "VehicleClassConfig":
        data = dict(data)
        longitudinal = LongitudinalParams(**data.pop("longitudinal", {}))
        lane_change = LaneChangeParams(**data.pop("lane_change", {}))
        return cls(longitudinal=longitudinal, lane_change=lane_change, **data)


DEFAULT_VEHICLE_CLASSES: Dict[str, VehicleClassConfig] = {
    "car": VehicleClassConfig(
        name="car",
        length=5.0,
        longitudinal=LongitudinalParams(model="ACC", v0=30.0, T=1.5, s0=2.0, a=1.0, b=1.5),
        lane_change=LaneChangeParams(b_safe=4.0, b_safe_max=8.0, p=0.1, b_thr=0.2, b_bias_right=0.1),
    ),
    "truck": VehicleClassConfig(
        name="truck",
        length=12.0,
        longitudinal=LongitudinalParams(model="ACC", v0=22.0, T=1.8, s0=3.0, a=0.6, b=1.5),
        lane_change=LaneChangeParams(b_safe=3.0, b_safe_max=6.0, p=0.2, b_thr=0.3, b_bias_right=0.3),
    ),
}


def load_vehicle_classes(filepath: str) -> Dict[str, VehicleClassConfig]:
    """
    Load vehicle classes from a JSON object mapping class name -> class config.

    The class name is taken from the key unless the entry sets its own "name".
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {filepath}")
    if path.suffix.lower() != ".json":
        raise ValueError(f"Unsupported config format: {path.suffix}")

    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("Config root must be a JSON object of vehicle classes.")

    classes: Dict[str, VehicleClassConfig] = {}
    for key, entry in data.items():
        entry = dict(entry)
        entry.setdefault("name", key)
        classes[key] = VehicleClassConfig.from_dict(entry)
    logger.info("Loaded %d vehicle classes from %s", len(classes), path)
    return classes


def save_vehicle_classes(classes: Dict[str, VehicleClassConfig], filepath: str, indent: int = 2) -> None:
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump({key: cfg.to_dict() for key, cfg in classes.items()}, f, indent=indent)


__all__ = [
    "DEFAULT_VEHICLE_CLASSES",
    "LONGITUDINAL_MODELS",
    "LaneChangeParams",
    "LongitudinalParams",
    "VehicleClassConfig",
    "load_vehicle_classes",
    "save_vehicle_classes",
]
