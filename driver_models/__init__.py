"""Driver behaviour kernels for traffic microsimulation: IDM, ACC and MOBIL."""

from .longitudinal import CarFollowingModel, LongitudinalModel, SpeedRestrictions, my_tanh
from .idm import IDM, IDMPlus
from .acc import ACC, GIVE_WAY_PLACEHOLDER_ACC
from .mobil import LaneChangeEvaluation, MOBIL, PriorityRuleDisabledError
from .config import DEFAULT_VEHICLE_CLASSES, VehicleClassConfig, load_vehicle_classes

__all__ = [
    "ACC",
    "CarFollowingModel",
    "DEFAULT_VEHICLE_CLASSES",
    "GIVE_WAY_PLACEHOLDER_ACC",
    "IDM",
    "IDMPlus",
    "LaneChangeEvaluation",
    "LongitudinalModel",
    "MOBIL",
    "PriorityRuleDisabledError",
    "SpeedRestrictions",
    "VehicleClassConfig",
    "load_vehicle_classes",
    "my_tanh",
]
