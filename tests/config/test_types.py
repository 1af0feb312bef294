"""Tests for maze_visitors.config.types module."""

from __future__ import annotations

import pytest

from maze_visitors.config.types import (
    ARCHETYPE_PRESETS,
    Archetype,
    ArchetypeConfig,
    DetourKind,
    MazeConfig,
    SimulationConfig,
    SimulationResult,
    VisitorOutcome,
    archetype_config,
)


class TestArchetypeConfig:
    def test_defaults_are_valid(self) -> None:
        config = ArchetypeConfig()
        assert config.base_speed == 1.0
        assert config.detour_kind is DetourKind.CONFUSION
        assert config.name == "default"

    def test_rejects_non_positive_speed(self) -> None:
        with pytest.raises(ValueError, match="base_speed"):
            ArchetypeConfig(base_speed=0.0)

    def test_rejects_chance_out_of_range(self) -> None:
        with pytest.raises(ValueError, match="confusion_chance"):
            ArchetypeConfig(confusion_chance=1.5)
        with pytest.raises(ValueError, match="misstep_chance"):
            ArchetypeConfig(misstep_chance=-0.1)

    def test_rejects_inverted_detour_range(self) -> None:
        with pytest.raises(ValueError, match="confusion_detour_max"):
            ArchetypeConfig(confusion_detour_min=5, confusion_detour_max=4)

    def test_rejects_zero_length_lost_detour(self) -> None:
        with pytest.raises(ValueError, match="lost_detour_min"):
            ArchetypeConfig(lost_detour_min=0, lost_detour_max=3)

    def test_starts_mesmerized_needs_duration(self) -> None:
        with pytest.raises(ValueError, match="initial_mesmerized_duration"):
            ArchetypeConfig(starts_mesmerized=True)

    def test_is_frozen(self) -> None:
        config = ArchetypeConfig()
        with pytest.raises(AttributeError):
            config.base_speed = 2.0  # type: ignore[misc]


class TestPresets:
    def test_every_archetype_has_a_preset(self) -> None:
        assert set(ARCHETYPE_PRESETS) == set(Archetype)
        for archetype, config in ARCHETYPE_PRESETS.items():
            assert config.archetype is archetype
            assert config.name == archetype.value

    def test_preset_strategies(self) -> None:
        assert ARCHETYPE_PRESETS[Archetype.LANTERN_DRUNK].detour_kind is DetourKind.CONFUSION
        assert ARCHETYPE_PRESETS[Archetype.WARY_WAYFARER].detour_kind is DetourKind.MISSTEP
        devotee = ARCHETYPE_PRESETS[Archetype.SLEEPWALKING_DEVOTEE]
        assert devotee.detour_kind is DetourKind.NONE
        assert devotee.starts_mesmerized

    def test_lookup_by_name(self) -> None:
        assert archetype_config("wary_wayfarer") is ARCHETYPE_PRESETS[Archetype.WARY_WAYFARER]

    def test_lookup_unknown_name(self) -> None:
        with pytest.raises(ValueError, match="archetype must be one of"):
            archetype_config("tourist")


class TestMazeConfig:
    def test_defaults(self) -> None:
        config = MazeConfig()
        assert config.width % 2 == 1 and config.height % 2 == 1

    def test_rejects_even_width(self) -> None:
        with pytest.raises(ValueError, match="width"):
            MazeConfig(width=10)

    def test_rejects_too_many_entrances(self) -> None:
        with pytest.raises(ValueError, match="entrances"):
            MazeConfig(width=5, height=5, entrances=9)

    def test_rejects_negative_lanterns(self) -> None:
        with pytest.raises(ValueError, match="lanterns"):
            MazeConfig(lanterns=-1)


class TestSimulationConfig:
    def test_rejects_zero_visitors(self) -> None:
        with pytest.raises(ValueError, match="n_visitors"):
            SimulationConfig(n_visitors=0)

    def test_rejects_empty_archetypes(self) -> None:
        with pytest.raises(ValueError, match="archetypes"):
            SimulationConfig(archetypes=())

    def test_rejects_non_positive_tick(self) -> None:
        with pytest.raises(ValueError, match="tick_seconds"):
            SimulationConfig(tick_seconds=0.0)


class TestSimulationResult:
    def test_count_by_outcome(self) -> None:
        outcomes = (
            VisitorOutcome(0, "lantern_drunk", "consumed", 10, 9, 1),
            VisitorOutcome(1, "wary_wayfarer", "escaping", 12, 11, 0),
            VisitorOutcome(2, "wary_wayfarer", "consumed", 8, 7, 0),
        )
        result = SimulationResult(run_id="r", ticks_run=12, outcomes=outcomes)
        assert result.count("consumed") == 2
        assert result.count("escaping") == 1
        assert result.count("active") == 0
