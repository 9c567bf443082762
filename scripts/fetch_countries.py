from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import TextIO

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
sys.path.insert(0, str(SRC_DIR))

from collector.countries_service import CountriesFetcher, CountriesService  # noqa: E402
from state.countries_view_model import CountriesViewModel  # noqa: E402
from transforms.countries import Country  # noqa: E402
from utils.config import load_countries_config  # noqa: E402
from utils.logging import setup_logging  # noqa: E402


def format_country_line(c: Country) -> str:
    return f"{c.flag} {c.name}, {c.capital}"


def format_country_detail(c: Country) -> str:
    return "\n".join(
        [
            c.name_and_region,
            f"  code:     {c.code}",
            f"  capital:  {c.capital}",
            f"  currency: {c.currency.name} ({c.currency.code}, {c.currency.symbol})",
            f"  language: {c.language.name} ({c.language.code})",
        ]
    )


async def run(
    service: CountriesFetcher,
    *,
    search: str | None = None,
    detail_code: str | None = None,
    out: TextIO | None = None,
) -> int:
    out = out or sys.stdout
    vm = CountriesViewModel(service)
    vm.refresh_countries()
    await vm.wait_idle()

    err = vm.last_error.value
    if err is not None:
        print(f"❌ {err}", file=out)
        return 1

    if detail_code:
        code = detail_code.upper()
        match = next((c for c in vm.countries.value if c.code.upper() == code), None)
        if match is None:
            print(f"❌ No country with code {code}", file=out)
            return 1
        print(format_country_detail(match), file=out)
        return 0

    for c in vm.filtered(search):
        print(format_country_line(c), file=out)
    return 0


async def main() -> int:
    parser = argparse.ArgumentParser(description="Fetch the countries list and print it")
    parser.add_argument("--search", type=str, default=None, help="Case-insensitive filter on name or capital")
    parser.add_argument("--detail", type=str, default=None, help="Print the detail view for one country code (e.g. DE)")
    parser.add_argument("--config", type=str, default=None, help="Config YAML (default: config/countries.yaml)")
    args = parser.parse_args()

    setup_logging(fmt="console")
    cfg = load_countries_config(args.config)

    async with CountriesService.from_config(cfg) as service:
        return await run(service, search=args.search, detail_code=args.detail)


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
