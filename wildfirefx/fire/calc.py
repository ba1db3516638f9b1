"""
Fire behavior relationships and unit conversions.

Byram's flame length / fireline intensity relationship, and the haul chart
identities linking heat per unit area, rate of spread and intensity.
"""

import math

from ..core.particles import MPH_TO_FT_PER_SEC
from .behavior import FireBehaviorSample, InvalidFireBehaviorError, METERS_TO_FEET


CHAINS_PER_HOUR_TO_FT_PER_MIN = 1.100
FT_PER_MIN_TO_CHAINS_PER_HOUR = 0.9091


def chains_per_hour_to_ft_per_min(ros: float) -> float:
    return ros * CHAINS_PER_HOUR_TO_FT_PER_MIN


def ft_per_min_to_chains_per_hour(ros: float) -> float:
    return ros * FT_PER_MIN_TO_CHAINS_PER_HOUR


def mph_to_ft_per_sec(speed: float) -> float:
    return speed * MPH_TO_FT_PER_SEC


def meters_to_feet(length: float) -> float:
    return length * METERS_TO_FEET


def compute_fireline_intensity(heat_area: float, ros_chains_per_hour: float) -> float:
    """
    Fireline intensity [Btu/ft/s] from heat per unit area [Btu/ft2]
    and rate of spread [ch/hr].
    """
    ros_ft_per_min = chains_per_hour_to_ft_per_min(ros_chains_per_hour)
    return heat_area * ros_ft_per_min / 60.0


def compute_flame_length(fireline_intensity: float) -> float:
    """Byram's flame length [ft] from fireline intensity [Btu/ft/s]"""
    return 0.45 * math.pow(fireline_intensity, 0.46)


def compute_intensity_from_flame_length(flame_length: float) -> float:
    """Inverse of Byram's relationship: fireline intensity [Btu/ft/s]"""
    return 5.67 * math.pow(flame_length, 2.17)


def compute_heat_area(flame_length: float, ros_chains_per_hour: float) -> float:
    """Heat per unit area [Btu/ft2] that yields flame_length at the given ROS"""
    if ros_chains_per_hour <= 0:
        raise ValueError("Rate of spread must be positive")
    fli = compute_intensity_from_flame_length(flame_length)
    ros_ft_per_min = chains_per_hour_to_ft_per_min(ros_chains_per_hour)
    return 60.0 * fli / ros_ft_per_min


def compute_ros_chains_per_hour(flame_length: float, heat_area: float) -> float:
    """Rate of spread [ch/hr] that yields flame_length at the given heat per area"""
    if heat_area <= 0:
        raise ValueError("Heat per unit area must be positive")
    fli = compute_intensity_from_flame_length(flame_length)
    ros_ft_per_min = 60.0 * fli / heat_area
    return ft_per_min_to_chains_per_hour(ros_ft_per_min)


def sample_from_flame_length(
    flame_length: float,
    heat_release: float,
    fuel_bed_depth: float = 1.0,
    effective_wind_speed: float = 0.0,
    flame_residence_time: float = 0.2,
    characteristic_sav: float = 1500.0,
    reaction_velocity: float = 10.0,
) -> FireBehaviorSample:
    """
    Build a self-consistent sample from flame length and heat release.

    Intensity follows Byram; the head fire spread rate follows from the
    haul chart identity; flanking spread is taken as a tenth of the head.
    """
    if flame_length < 0 or heat_release < 0:
        raise InvalidFireBehaviorError("Flame length and heat release must be non-negative")
    fli = compute_intensity_from_flame_length(flame_length)
    ros_max = 60.0 * fli / heat_release if heat_release > 0 else 0.0
    return FireBehaviorSample(
        flame_length=flame_length,
        fireline_intensity=fli,
        rate_of_spread_max=ros_max,
        rate_of_spread_flanking=ros_max * 0.1,
        effective_wind_speed=effective_wind_speed,
        heat_release=heat_release,
        fuel_bed_depth=fuel_bed_depth,
        characteristic_sav=characteristic_sav,
        flame_residence_time=flame_residence_time,
        reaction_velocity=reaction_velocity,
    )
