# draughts_engine/config.py
from dataclasses import dataclass, field
from typing import Optional
import logging
import os
import tomllib  # python >=3.11

# Feature weights of the static evaluation
FEATURE_WEIGHTS = {
    "material": 30,
    "formation": 4,
    "baseline": 2,
    "tempo": 1,
    "center": 1,
}

@dataclass
class SearchConfig:
    depth: int = 5
    random_seed: Optional[int] = None  # seeds the fallback move picker

@dataclass
class EvalConfig:
    weights: dict = field(default_factory=lambda: FEATURE_WEIGHTS.copy())
    man_value: int = 1
    king_value_opening: int = 3
    king_value_endgame: int = 5
    endgame_threshold: int = 15     # kings gain value at or below this many pieces
    baseline_min_pieces: int = 25   # baseline only counts with at least this many pieces
    formation_pair_bonus: int = 1
    formation_triple_bonus: int = 3

@dataclass
class UIConfig:
    engine_name: str = "AlphaBeast"
    engine_author: str = "AlphaBeast authors"
    api_port: int = 8000

@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "eval", "ui"):
            if section not in raw:
                continue
            target = getattr(cfg, section)
            for k, v in raw[section].items():
                if not hasattr(target, k):
                    continue
                if k == "weights":
                    # partial tables only override the named features
                    target.weights.update(v)
                else:
                    setattr(target, k, v)
        if "log_level" in raw:
            cfg.log_level = raw["log_level"]
        return cfg


def configure_logging(level: str = "INFO"):
    """Route engine logs to stderr at the configured level."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("ENGINE_CONFIG_TOML", "config.toml"))
# allow env override of depth for quick debugging
override_depth = os.environ.get("ENGINE_SEARCH_DEPTH")
if override_depth:
    try:
        CONFIG.search.depth = int(override_depth)
    except ValueError:
        logging.getLogger(__name__).warning(
            "ignoring non-integer ENGINE_SEARCH_DEPTH=%r", override_depth
        )
