# reversi/config.py
from dataclasses import dataclass, field
from typing import Optional
import os
import tomllib  # python >=3.11

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_BOOK_PATH = os.path.join(PACKAGE_DIR, "assets", "book.toml")


@dataclass
class SearchConfig:
    depth: int = 6                 # midgame NegaScout depth
    endgame_threshold: int = 12    # exhaustive search when empties <= this
    book_threshold: int = 12       # consult the book only while empties >= this
    tt_size: int = 65536           # slots, power of two
    zobrist_seed: int = 12345      # keep fixed: cache traces depend on it
    use_book: bool = True
    book_path: Optional[str] = None  # None means the packaged assets/book.toml
    strategy: str = "search"       # "search" or "greedy"
    win_bonus: int = 64            # added to a decisive endgame differential


@dataclass
class UIConfig:
    engine_name: str = "Reversi Engine"
    engine_author: str = "Medo"
    api_port: int = 8000


@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        # unknown keys are ignored
        for section in ("search", "ui"):
            if section in raw:
                target = getattr(cfg, section)
                for k, v in raw[section].items():
                    if hasattr(target, k):
                        setattr(target, k, v)
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"])
        return cfg

    def book_file(self) -> str:
        return self.search.book_path or DEFAULT_BOOK_PATH


# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("REVERSI_CONFIG_TOML", "config.toml"))
# allow env override of depth for quick debugging
try:
    override_depth = os.environ.get("REVERSI_SEARCH_DEPTH")
    if override_depth:
        CONFIG.search.depth = int(override_depth)
except ValueError:
    pass
