from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import os
import yaml
from dotenv import load_dotenv


DEFAULT_ENDPOINT = (
    "https://gist.githubusercontent.com/peymano-wmt/32dcb892b06648910ddd40406e37fdab"
    "/raw/db25946fd77c5873b0303b858e861ce724e0dcd0/countries.json"
)


@dataclass(frozen=True)
class CountriesConfig:
    endpoint: str
    timeout_seconds: float


def _project_root() -> Path:
    # Resolve from this file: .../src/utils/config.py -> project root is 3 parents up.
    return Path(__file__).resolve().parents[2]


def load_countries_config(path: str | None = None) -> CountriesConfig:
    """
    Load countries endpoint config from YAML.

    Precedence:
    - explicit `path`
    - env `COUNTRIES_CONFIG`
    - project default `config/countries.yaml`

    env `COUNTRIES_ENDPOINT` (or .env) overrides `countries.endpoint`.
    """
    load_dotenv()
    cfg_path = Path(path or os.getenv("COUNTRIES_CONFIG") or (_project_root() / "config" / "countries.yaml"))
    cfg = load_yaml(cfg_path)
    section = cfg.get("countries") or {}

    endpoint = os.getenv("COUNTRIES_ENDPOINT") or section.get("endpoint")
    timeout_seconds = section.get("timeout_seconds")

    missing: list[str] = []
    if not endpoint:
        missing.append("countries.endpoint")
    if timeout_seconds is None:
        missing.append("countries.timeout_seconds")
    if missing:
        raise ValueError(f"Missing {', '.join(missing)} in {cfg_path}")

    return CountriesConfig(
        endpoint=str(endpoint),
        timeout_seconds=float(timeout_seconds),
    )


def load_yaml(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    return yaml.safe_load(p.read_text(encoding="utf-8")) or {}
