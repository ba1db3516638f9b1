"""Tests for the fire emitter, its calibration and configuration snapshots."""

import dataclasses
import logging
import math
import threading

import numpy as np
import pytest

from wildfirefx.core.surface import BlendMode
from wildfirefx.fire.behavior import FireBehaviorSample, InvalidFireBehaviorError
from wildfirefx.fire.emitter import (
    DEFAULT_CALIBRATION,
    EmitterCalibration,
    EmitterConfig,
    FireEmitter,
    InvalidConfigError,
)


CHAPARRAL = FireBehaviorSample(
    flame_length=23.14,
    fireline_intensity=5178.0,
    rate_of_spread_max=114.65,
    effective_wind_speed=10.0,
    heat_release=2710.0,
    fuel_bed_depth=6.0,
    characteristic_sav=1739.0,
    flame_residence_time=0.22,
)

GRASS = FireBehaviorSample(
    flame_length=4.0,
    heat_release=90.0,
    fuel_bed_depth=1.0,
    effective_wind_speed=5.0,
)


def emit_nonempty(emitter, x=0.0, y=0.0):
    for _ in range(1000):
        batch = emitter.emit(x, y)
        if batch:
            return batch
    raise AssertionError("emitter never produced a particle")


class TestEmission:
    """Tests for batch size and per-particle initial state."""

    def test_batch_size_within_bounds(self):
        emitter = FireEmitter(config=EmitterConfig(max_count=10), seed=1)
        counts = [len(emitter.emit(0, 0)) for _ in range(500)]
        assert min(counts) >= 0
        assert max(counts) <= 9

    def test_batch_size_is_uniform(self):
        emitter = FireEmitter(config=EmitterConfig(max_count=10), seed=2)
        counts = [len(emitter.emit(0, 0)) for _ in range(5000)]
        assert abs(np.mean(counts) - 4.5) < 0.2
        assert set(counts) == set(range(10))

    def test_zero_max_count_emits_nothing(self):
        emitter = FireEmitter(config=EmitterConfig(max_count=0), seed=3)
        assert all(emitter.emit(100, 100) == [] for _ in range(50))

    def test_zero_variance_starts_at_origin(self):
        config = EmitterConfig(x_variance=0.0, y_variance=0.0)
        emitter = FireEmitter(config=config, seed=4)
        for p in emit_nonempty(emitter, 320, 470):
            assert p.x == 320
            assert p.y == 470

    def test_initial_state_ranges(self):
        emitter = FireEmitter(seed=5)
        config = emitter.config
        ox, oy = 320.0, 470.0
        particles = []
        for _ in range(200):
            particles.extend(emitter.emit(ox, oy))
        assert particles

        for p in particles:
            assert ox - config.x_variance <= p.x < ox + config.x_variance
            assert oy <= p.y < oy + config.y_variance
            assert -config.y_velocity <= p.vy <= 0
            assert abs(p.vx) <= config.x_velocity
            assert DEFAULT_CALIBRATION.min_expire_time <= p.expire_time <= config.expire_time
            assert p.life == 1.0
            assert p.radius == config.radius
            assert p.start_color == config.start_color
            assert p.end_color == config.end_color
            assert p.blend_mode == config.blend_mode

    def test_vertical_speed_falls_off_from_center(self):
        emitter = FireEmitter(seed=6)
        particles = []
        for _ in range(400):
            particles.extend(emitter.emit(0.0, 0.0))
        x_var = emitter.config.x_variance
        center = [-p.vy for p in particles if abs(p.x) < 0.2 * x_var]
        edge = [-p.vy for p in particles if abs(p.x) > 0.8 * x_var]
        assert np.mean(center) > np.mean(edge)

    def test_seeded_emitters_are_reproducible(self):
        a = FireEmitter(seed=42)
        b = FireEmitter(seed=42)
        for _ in range(20):
            batch_a = [(p.x, p.y, p.vx, p.vy, p.expire_time) for p in a.emit(10, 10)]
            batch_b = [(p.x, p.y, p.vx, p.vy, p.expire_time) for p in b.emit(10, 10)]
            assert batch_a == batch_b

    def test_explicit_generator(self):
        rng = np.random.default_rng(9)
        emitter = FireEmitter(rng=rng)
        assert emitter.rng is rng


class TestConfigure:
    """Tests for deriving configuration from fire behavior."""

    def test_chaparral_scenario(self):
        emitter = FireEmitter()
        config = emitter.configure(CHAPARRAL)
        assert config.y_velocity == pytest.approx(23.14)
        assert config.x_velocity == pytest.approx(4.628)
        assert config.x_variance == pytest.approx(84.2)
        assert config.y_variance == pytest.approx(18.0)
        assert config.radius == pytest.approx(100.0)
        assert config.max_count == 150
        assert config.expire_time == pytest.approx(0.92)
        assert config.wind_speed == pytest.approx(10.0)
        assert emitter.config is config
        assert emitter.sample is CHAPARRAL

    def test_small_fire_scenario(self):
        config = FireEmitter().configure(GRASS)
        assert config.radius == pytest.approx(20.0)
        assert config.max_count == 30
        assert config.y_velocity == pytest.approx(4.0)

    def test_zero_heat_gives_empty_batches(self):
        emitter = FireEmitter(seed=1)
        emitter.configure(FireBehaviorSample(flame_length=2.0))
        assert emitter.config.max_count == 0
        assert emitter.emit(0, 0) == []

    @pytest.mark.parametrize("bad", [
        FireBehaviorSample(flame_length=-1.0),
        FireBehaviorSample(heat_release=math.nan),
        FireBehaviorSample(fuel_bed_depth=math.inf),
    ])
    def test_invalid_sample_keeps_previous_config(self, bad):
        emitter = FireEmitter()
        good = emitter.configure(CHAPARRAL)
        with pytest.raises(InvalidFireBehaviorError):
            emitter.configure(bad)
        assert emitter.config is good
        assert emitter.sample is CHAPARRAL

    def test_non_sample_is_rejected(self):
        emitter = FireEmitter()
        with pytest.raises(InvalidFireBehaviorError):
            emitter.configure({'flame_length': 3.0})

    def test_try_configure_logs_and_returns_false(self, caplog):
        emitter = FireEmitter()
        before = emitter.config
        with caplog.at_level(logging.WARNING, logger='wildfirefx.fire.emitter'):
            assert emitter.try_configure(FireBehaviorSample(flame_length=-5.0)) is False
        assert emitter.config is before
        assert "Rejected fire behavior update" in caplog.text

    def test_try_configure_accepts_good_sample(self):
        emitter = FireEmitter()
        assert emitter.try_configure(GRASS) is True
        assert emitter.sample is GRASS

    def test_colors_and_blend_survive_reconfigure(self):
        emitter = FireEmitter()
        emitter.set_colors((0, 0, 255), (0, 255, 255))
        emitter.set_blend_mode(BlendMode.ADD)
        config = emitter.configure(GRASS)
        assert config.start_color == (0, 0, 255)
        assert config.end_color == (0, 255, 255)
        assert config.blend_mode == BlendMode.ADD

    def test_set_colors_without_end(self):
        config = FireEmitter().set_colors((1, 2, 3))
        assert config.start_color == (1, 2, 3)
        assert config.end_color is None

    def test_wind_modifier_only_when_enabled(self):
        windy = FireEmitter(seed=1, wind_enabled=True)
        windy.configure(CHAPARRAL)
        assert all(p.velocity_modifier is not None for p in emit_nonempty(windy))

        calm = FireEmitter(seed=1)
        calm.configure(CHAPARRAL)
        assert all(p.velocity_modifier is None for p in emit_nonempty(calm))

    def test_no_wind_modifier_at_zero_wind(self):
        emitter = FireEmitter(seed=1, wind_enabled=True)
        emitter.configure(FireBehaviorSample(flame_length=4.0, heat_release=90.0))
        assert all(p.velocity_modifier is None for p in emit_nonempty(emitter))


class TestCalibration:
    """Tests for emitter coefficient overrides."""

    def test_custom_caps(self):
        calibration = EmitterCalibration(max_particles=20, max_radius=30.0)
        config = FireEmitter(calibration=calibration).configure(CHAPARRAL)
        assert config.max_count == 20
        assert config.radius == 30.0

    def test_set_calibration_rederives_last_sample(self):
        emitter = FireEmitter()
        emitter.configure(GRASS)
        config = emitter.set_calibration(EmitterCalibration(vertical_velocity_per_ft=2.0))
        assert config.y_velocity == pytest.approx(8.0)
        assert emitter.config is config

    def test_set_calibration_before_any_sample(self):
        emitter = FireEmitter()
        before = emitter.config
        emitter.set_calibration(EmitterCalibration(radius_per_ft=1.0))
        assert emitter.config is before

    def test_tight_caps_clamp_default_config(self):
        calibration = EmitterCalibration(max_particles=12, max_radius=10.0)
        emitter = FireEmitter(calibration=calibration, seed=1)
        assert emitter.config.max_count == 12
        assert emitter.config.radius == 10.0
        for _ in range(20):
            assert len(emitter.emit(0.0, 0.0)) < 12

    def test_explicit_config_over_caps_rejected(self):
        calibration = EmitterCalibration(max_particles=12)
        with pytest.raises(InvalidConfigError):
            FireEmitter(calibration=calibration, config=EmitterConfig(max_count=40))

    def test_set_calibration_before_any_sample_clamps(self):
        emitter = FireEmitter()
        config = emitter.set_calibration(EmitterCalibration(max_particles=5, max_radius=8.0))
        assert config.max_count == 5
        assert config.radius == 8.0
        assert config.validate(emitter.calibration) is config

    def test_min_expire_time_travels_with_config(self):
        calibration = EmitterCalibration(min_expire_time=0.25)
        emitter = FireEmitter(calibration=calibration, seed=3)
        assert emitter.config.min_expire_time == 0.25
        config = emitter.configure(GRASS)
        assert config.min_expire_time == 0.25
        particles = emit_nonempty(emitter)
        assert all(p.expire_time >= 0.25 for p in particles)

    def test_negative_coefficient_rejected(self):
        with pytest.raises(InvalidConfigError):
            EmitterCalibration(radius_per_ft=-1.0).validate()
        with pytest.raises(InvalidConfigError):
            EmitterCalibration(heat_per_particle=0.0).validate()

    def test_from_dict_ignores_unknown_keys(self):
        calibration = EmitterCalibration.from_dict({
            'max_particles': 75.0,
            'radius_per_ft': 2.5,
            'sparkle': True,
        })
        assert calibration.max_particles == 75
        assert isinstance(calibration.max_particles, int)
        assert calibration.radius_per_ft == 2.5

    def test_to_dict_round_trip(self):
        calibration = EmitterCalibration(x_variance_per_heat=0.05)
        assert EmitterCalibration.from_dict(calibration.to_dict()) == calibration


class TestEmitterConfig:
    """Tests for configuration invariants."""

    def test_defaults_are_valid(self):
        assert EmitterConfig().validate() == EmitterConfig()

    @pytest.mark.parametrize("kwargs", [
        {'expire_time': 0.0},
        {'expire_time': -1.0},
        {'x_variance': -1.0},
        {'y_velocity': math.nan},
        {'radius': 500.0},
        {'max_count': 1000},
        {'max_count': -1},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(InvalidConfigError):
            EmitterConfig(**kwargs).validate()

    def test_invalid_initial_config_rejected(self):
        with pytest.raises(InvalidConfigError):
            FireEmitter(config=EmitterConfig(expire_time=0.0))

    def test_config_is_immutable(self):
        config = EmitterConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.radius = 10.0


class TestConcurrentUpdates:
    """Tests for replacing the configuration while emitting."""

    def test_emitter_never_sees_mixed_config(self):
        emitter = FireEmitter(seed=11)
        config_a = DEFAULT_CALIBRATION.derive(CHAPARRAL)
        config_b = DEFAULT_CALIBRATION.derive(GRASS)
        valid = {
            (config_a.radius, config_a.max_count, config_a.expire_time),
            (config_b.radius, config_b.max_count, config_b.expire_time),
        }
        expiry_cap = {config_a.radius: config_a.expire_time, config_b.radius: config_b.expire_time}
        emitter.configure(CHAPARRAL)
        stop = threading.Event()

        def writer():
            while not stop.is_set():
                emitter.configure(GRASS)
                emitter.configure(CHAPARRAL)

        thread = threading.Thread(target=writer)
        thread.start()
        try:
            for _ in range(500):
                config = emitter.config
                assert (config.radius, config.max_count, config.expire_time) in valid
                batch = emitter.emit(0, 0)
                radii = {p.radius for p in batch}
                # One batch is built from a single snapshot
                assert len(radii) <= 1
                for p in batch:
                    assert p.expire_time <= expiry_cap[p.radius]
        finally:
            stop.set()
            thread.join()
