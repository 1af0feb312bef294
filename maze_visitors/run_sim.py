"""CLI entrypoint for maze visitor simulation runs.

Supports ``--config path/to/config.json`` for reproducibility. CLI
arguments override config-file values; config-file values override
built-in defaults.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from maze_visitors.config.constants import DEFAULT_MAX_TICKS, DEFAULT_TICK_SECONDS
from maze_visitors.config.types import (
    Archetype,
    DestinationMode,
    MazeConfig,
    SimulationConfig,
)
from maze_visitors.simulation.engine import run_simulation

# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def _coerce_int(raw: object, key: str) -> int:
    """Coerce raw value to int; rejects booleans and non-integer floats."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be an integer value")
    if isinstance(raw, float):
        if raw != int(raw):
            raise ValueError(f"{key} must be an integer value, got {raw!r}")
        return int(raw)
    if isinstance(raw, (int, str)):
        return int(raw)
    raise ValueError(f"{key} must be an integer value")


def _coerce_float(raw: object, key: str) -> float:
    """Coerce raw value to float; rejects booleans."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be a float value")
    if isinstance(raw, (int, float, str)):
        return float(raw)
    raise ValueError(f"{key} must be a float value")


def _coerce_archetypes(raw: object, key: str) -> tuple[Archetype, ...]:
    """Accept ``lantern_drunk,wary_wayfarer`` from the CLI or a JSON list of names."""
    if isinstance(raw, str):
        tokens = raw.split(",")
    elif isinstance(raw, (list, tuple)):
        tokens = [item.value if isinstance(item, Archetype) else str(item) for item in raw]
    else:
        raise ValueError(f"{key} must be a comma-separated string or a list of names")
    values = [token.strip() for token in tokens if token.strip()]
    if not values:
        raise ValueError(f"{key} must contain at least one value")
    try:
        return tuple(Archetype(value) for value in values)
    except ValueError as exc:
        valid = ", ".join(a.value for a in Archetype)
        raise ValueError(f"{key} must be drawn from {valid}") from exc


def _coerce_destination(raw: object, key: str) -> DestinationMode:
    valid = ", ".join(mode.value for mode in DestinationMode)
    if not isinstance(raw, str):
        raise ValueError(f"{key} must be one of {valid}")
    try:
        return DestinationMode(raw.strip().lower())
    except ValueError as exc:
        raise ValueError(f"{key} must be one of {valid}") from exc


def _coerce_path(raw: object, key: str) -> Path:
    if isinstance(raw, Path):
        return raw
    if isinstance(raw, str) and raw.strip():
        return Path(raw)
    raise ValueError(f"{key} must be a non-empty path")


def _coerce_log_level(raw: object, key: str) -> str:
    """Upper-cased stdlib level name such as ``INFO``."""
    if not isinstance(raw, str) or not isinstance(logging.getLevelName(raw.upper()), int):
        raise ValueError(f"{key} must be a logging level name")
    return raw.upper()


def _get_val(cli_val: object, key: str, file_cfg: dict[str, object], default: object) -> object:
    """CLI > file > default resolution."""
    if cli_val is not None:
        return cli_val
    return file_cfg.get(key, default)


def _get_int(cli_val: int | None, key: str, file_cfg: dict[str, object], default: int) -> int:
    return _coerce_int(_get_val(cli_val, key, file_cfg, default), key)


def _get_float(
    cli_val: float | None, key: str, file_cfg: dict[str, object], default: float
) -> float:
    return _coerce_float(_get_val(cli_val, key, file_cfg, default), key)


def _get_archetypes(cli_val: str | None, file_cfg: dict[str, object]) -> tuple[Archetype, ...]:
    default = [a.value for a in Archetype]
    return _coerce_archetypes(_get_val(cli_val, "archetypes", file_cfg, default), "archetypes")


def _get_path(
    cli_val: Path | None, key: str, file_cfg: dict[str, object], default: Path | None
) -> Path | None:
    raw = _get_val(cli_val, key, file_cfg, default)
    return None if raw is None else _coerce_path(raw, key)


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(description="Simulate visitors wandering a maze")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file with default values (CLI flags take precedence)",
    )
    parser.add_argument("--maze", type=Path, default=None, help="Maze text file")
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument("--height", type=int, default=None)
    parser.add_argument("--entrances", type=int, default=None)
    parser.add_argument("--lanterns", type=int, default=None)
    parser.add_argument("--maze-seed", type=int, default=None)
    parser.add_argument("--visitors", type=int, default=None)
    parser.add_argument("--archetypes", type=str, default=None)
    parser.add_argument("--max-ticks", type=int, default=None)
    parser.add_argument("--tick-seconds", type=float, default=None)
    parser.add_argument("--sim-seed", type=int, default=None)
    parser.add_argument("--destination", type=str, default=None, help="heart or exit")
    parser.add_argument("--out-dir", type=Path, default=None)
    parser.add_argument("--log-level", type=str, default=None)
    return parser


# ---------------------------------------------------------------------------
# Main CLI
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for one simulation run."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    file_cfg: dict[str, object] = {}
    if args.config is not None:
        try:
            file_cfg = json.loads(Path(args.config).read_text())
        except FileNotFoundError:
            parser.error(f"Config file not found: {args.config}")
        except json.JSONDecodeError as exc:
            parser.error(f"Config file is not valid JSON: {args.config}: {exc}")

    try:
        log_level = _coerce_log_level(
            _get_val(args.log_level, "log_level", file_cfg, "WARNING"), "log_level"
        )
    except ValueError as exc:
        parser.error(str(exc))
    logging.basicConfig(level=log_level, format="%(levelname)s %(name)s: %(message)s")

    default_maze = MazeConfig()
    try:
        sim_config = SimulationConfig(
            n_visitors=_get_int(args.visitors, "visitors", file_cfg, 6),
            archetypes=_get_archetypes(args.archetypes, file_cfg),
            max_ticks=_get_int(args.max_ticks, "max_ticks", file_cfg, DEFAULT_MAX_TICKS),
            tick_seconds=_get_float(
                args.tick_seconds, "tick_seconds", file_cfg, DEFAULT_TICK_SECONDS
            ),
            sim_seed=_get_int(args.sim_seed, "sim_seed", file_cfg, 0),
            destination=_coerce_destination(
                _get_val(args.destination, "destination", file_cfg, DestinationMode.HEART.value),
                "destination",
            ),
        )
        maze_config = MazeConfig(
            width=_get_int(args.width, "width", file_cfg, default_maze.width),
            height=_get_int(args.height, "height", file_cfg, default_maze.height),
            entrances=_get_int(args.entrances, "entrances", file_cfg, default_maze.entrances),
            lanterns=_get_int(args.lanterns, "lanterns", file_cfg, default_maze.lanterns),
            seed=_get_int(args.maze_seed, "maze_seed", file_cfg, default_maze.seed),
        )
        maze_path = _get_path(args.maze, "maze", file_cfg, None)
        out_dir = _coerce_path(_get_val(args.out_dir, "out_dir", file_cfg, "data"), "out_dir")
    except ValueError as exc:
        parser.error(str(exc))

    maze_text: str | None = None
    if maze_path is not None:
        try:
            maze_text = maze_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            parser.error(f"Maze file not found: {maze_path}")

    try:
        result = run_simulation(sim_config, out_dir, maze_text=maze_text, maze_config=maze_config)
    except ValueError as exc:
        parser.error(str(exc))
    summary = {
        "run_id": result.run_id,
        "ticks_run": result.ticks_run,
        "visitors": len(result.outcomes),
        "consumed": result.count("consumed"),
        "escaping": result.count("escaping"),
        "active": result.count("active"),
    }
    print(json.dumps(summary, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
