"""Configuration helpers for the jewel matcher."""

from dataclasses import dataclass, field
from pathlib import Path
import os
from typing import Optional, Tuple

DEFAULT_PRICE_THRESHOLDS: Tuple[Tuple[float, float], ...] = ((0.5, 5.0), (0.8, 3.0), (1.0, 1.0))


@dataclass(frozen=True)
class ScoringWeights:
    """Product-tuning constants for the additive match score."""

    color: float = 30.0
    style: float = 20.0
    occasion: float = 15.0
    material: float = 20.0
    category: float = 10.0
    gender: float = 10.0
    price: float = 5.0
    unisex_partial_credit: float = 6.0
    default_budget: float = 50000.0
    price_thresholds: Tuple[Tuple[float, float], ...] = DEFAULT_PRICE_THRESHOLDS

    def __post_init__(self) -> None:
        for name in ("color", "style", "occasion", "material", "category", "gender", "price"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} weight must be non-negative")
        if self.default_budget <= 0:
            raise ValueError("default_budget must be positive")
        ratios = [ratio for ratio, _ in self.price_thresholds]
        if ratios != sorted(ratios):
            raise ValueError("price_thresholds must be ordered by ascending ratio")


@dataclass
class MatcherConfig:
    """Configuration values for the matcher app.

    Runtime knobs (catalog location, sampling, result caps) sit next to the
    scoring weights so that an environment file can retune ranking without a
    code change.
    """

    catalog_db_path: str = "data/catalog.db"
    log_level: str = "INFO"
    image_size: Tuple[int, int] = (100, 100)
    sample_stride: int = 4
    query_limit: int = 20
    result_limit: int = 12
    max_upload_bytes: int = 5 * 1024 * 1024
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "MatcherConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is overridden key by key by upper-cased environment
        variables.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("MATCHER_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        defaults = ScoringWeights()
        weights = ScoringWeights(
            color=float(get_value("color_weight", str(defaults.color))),
            style=float(get_value("style_weight", str(defaults.style))),
            occasion=float(get_value("occasion_weight", str(defaults.occasion))),
            material=float(get_value("material_weight", str(defaults.material))),
            category=float(get_value("category_weight", str(defaults.category))),
            gender=float(get_value("gender_weight", str(defaults.gender))),
            price=float(get_value("price_weight", str(defaults.price))),
            unisex_partial_credit=float(
                get_value("unisex_partial_credit", str(defaults.unisex_partial_credit))
            ),
            default_budget=float(get_value("default_budget", str(defaults.default_budget))),
            price_thresholds=cls._parse_thresholds(get_value("price_thresholds")),
        )

        image_side = int(get_value("image_size", "100"))
        return cls(
            catalog_db_path=str(get_value("catalog_db_path", "data/catalog.db")),
            log_level=str(get_value("log_level", "INFO")),
            image_size=(image_side, image_side),
            sample_stride=int(get_value("sample_stride", "4")),
            query_limit=int(get_value("query_limit", "20")),
            result_limit=int(get_value("result_limit", "12")),
            max_upload_bytes=int(get_value("max_upload_bytes", str(5 * 1024 * 1024))),
            weights=weights,
            environment=env_name,
        )

    @staticmethod
    def _parse_thresholds(raw: Optional[str]) -> Tuple[Tuple[float, float], ...]:
        """Parse ``"0.5:5,0.8:3,1.0:1"`` into ratio/points pairs."""

        if not raw:
            return DEFAULT_PRICE_THRESHOLDS
        pairs = []
        for chunk in raw.split(","):
            ratio, _, points = chunk.strip().partition(":")
            if not points:
                raise ValueError(f"Malformed price threshold '{chunk}', expected ratio:points")
            pairs.append((float(ratio), float(points)))
        return tuple(pairs)

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a minimal YAML/INI-style config without external dependencies."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config
