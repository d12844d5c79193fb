# tictactoe/config.py
from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .errors import ConfigError

DEFAULT_CONFIG_PATH = "tictactoe.toml"
EXECUTORS = ("process", "thread")


@dataclass
class SearchConfig:
    parallel: bool = False
    executor: str = "process"  # "process" or "thread" pool for the parallel root
    max_workers: Optional[int] = None  # None lets the executor pick

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        _check_bool("search.parallel", self.parallel)
        _check_int("search.max_workers", self.max_workers, optional=True)
        if self.executor not in EXECUTORS:
            raise ConfigError(f"search.executor must be one of {EXECUTORS}, got {self.executor!r}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ConfigError(f"search.max_workers must be >= 1, got {self.max_workers}")


@dataclass
class SimulationConfig:
    games: int = 100
    workers: int = 1
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        _check_int("simulation.games", self.games)
        _check_int("simulation.workers", self.workers)
        _check_int("simulation.seed", self.seed, optional=True)
        if self.games < 0 or self.workers < 1:
            raise ConfigError("simulation.games must be >= 0 and simulation.workers >= 1")


@dataclass
class WebConfig:
    host: str = "127.0.0.1"
    port: int = 5000
    debug: bool = False

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not isinstance(self.host, str):
            raise ConfigError(f"web.host must be a string, got {self.host!r}")
        _check_int("web.port", self.port)
        _check_bool("web.debug", self.debug)


@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    web: WebConfig = field(default_factory=WebConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = DEFAULT_CONFIG_PATH) -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        try:
            with open(path, "rb") as f:
                raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"{path}: {exc}") from exc

        for section in ("search", "simulation", "web"):
            if section in raw:
                _merge(getattr(cfg, section), raw[section])
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"])
        cfg.search.validate()
        cfg.simulation.validate()
        cfg.web.validate()
        return cfg

    def apply_env(self, environ: Optional[Dict[str, str]] = None) -> "Config":
        env = os.environ if environ is None else environ
        parallel = env.get("TICTACTOE_PARALLEL")
        if parallel:
            self.search.parallel = _parse_bool("TICTACTOE_PARALLEL", parallel)
        workers = env.get("TICTACTOE_WORKERS")
        if workers:
            try:
                self.search.max_workers = int(workers)
            except ValueError as exc:
                raise ConfigError(f"TICTACTOE_WORKERS must be an integer, got {workers!r}") from exc
            self.search.validate()
        log_level = env.get("TICTACTOE_LOG_LEVEL")
        if log_level:
            self.log_level = log_level
        return self


def _check_bool(name: str, value: Any) -> None:
    if not isinstance(value, bool):
        raise ConfigError(f"{name} must be a boolean, got {value!r}")


def _check_int(name: str, value: Any, optional: bool = False) -> None:
    if value is None and optional:
        return
    # bool is an int subclass; `true` is not a worker count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer, got {value!r}")


def _merge(target: Any, values: Dict[str, Any]) -> None:
    for k, v in values.items():
        if hasattr(target, k):
            setattr(target, k, v)


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


def load_config(path: Optional[str] = None) -> Config:
    """Load the TOML file (``TICTACTOE_CONFIG_TOML`` or the default path), then env overrides."""
    path = path or os.environ.get("TICTACTOE_CONFIG_TOML", DEFAULT_CONFIG_PATH)
    return Config.load_from_toml(path).apply_env()
