"""Mining statistics tools: pool rankings, per-pool history, network hashrate."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple

from mempool_mcp.tools.validators import ParamSpec, build_input_schema, path_segment

UrlBuilder = Callable[[str, Dict[str, Any]], str]


@dataclass(slots=True)
class ToolDefinition:
    name: str
    description: str
    params: Tuple[ParamSpec, ...]
    build_url: UrlBuilder
    input_schema: Dict[str, Any] = field(init=False)

    def __post_init__(self) -> None:
        self.input_schema = build_input_schema(self.params)


def _time_period(default: str, description: str) -> ParamSpec:
    return ParamSpec(
        name="timePeriod",
        types=("string",),
        description=description,
        default=default,
    )


def _slug(example: str) -> ParamSpec:
    return ParamSpec(
        name="slug",
        types=("string",),
        description=f"Mining pool slug (e.g., {example})",
        required=True,
    )


def _pool_blocks_url(base_url: str, params: Dict[str, Any]) -> str:
    url = f"{base_url}/v1/mining/pool/{path_segment(params['slug'])}/blocks"
    block_height = params.get("blockHeight")
    if block_height:
        url = f"{url}/{path_segment(block_height)}"
    return url


MINING_TOOLS: List[ToolDefinition] = [
    ToolDefinition(
        name="get_mining_pools",
        description=(
            "Returns a list of all known mining pools ordered by blocks found "
            "over the specified trailing timePeriod."
        ),
        params=(
            _time_period(
                "1w",
                "Optional: trailing period like 24h, 3d, 1w, 1m, 3m, 6m, 1y, 2y, 3y",
            ),
        ),
        build_url=lambda base, p: f"{base}/v1/mining/pools/{path_segment(p['timePeriod'])}",
    ),
    ToolDefinition(
        name="get_mining_pool",
        description="Returns details about the mining pool specified by slug.",
        params=(_slug("slushpool"),),
        build_url=lambda base, p: f"{base}/v1/mining/pool/{path_segment(p['slug'])}",
    ),
    ToolDefinition(
        name="get_mining_pool_hashrates",
        description=(
            "Returns average hashrates and share of total hashrate for active "
            "mining pools over the specified trailing timePeriod."
        ),
        params=(_time_period("1m", "Optional: 1m, 3m, 6m, 1y, 2y, 3y"),),
        build_url=lambda base, p: f"{base}/v1/mining/hashrate/pools/{path_segment(p['timePeriod'])}",
    ),
    ToolDefinition(
        name="get_mining_pool_hashrate",
        description=(
            "Returns all known hashrate data for the mining pool specified by "
            "slug. Hashrate values are weekly averages."
        ),
        params=(_slug("foundryusa"),),
        build_url=lambda base, p: f"{base}/v1/mining/pool/{path_segment(p['slug'])}/hashrate",
    ),
    ToolDefinition(
        name="get_mining_pool_blocks",
        description=(
            "Returns past 10 blocks mined by the specified mining pool before the "
            "specified blockHeight. If not specified, returns the 10 most recent blocks."
        ),
        params=(
            _slug("luxor"),
            ParamSpec(
                name="blockHeight",
                types=("string", "integer"),
                description="Optional block height to look back from (e.g., 730000)",
            ),
        ),
        build_url=_pool_blocks_url,
    ),
    ToolDefinition(
        name="get_hashrate",
        description=(
            "Returns current and historical network-wide hashrate and difficulty "
            "figures over the specified trailing timePeriod."
        ),
        params=(_time_period("1m", "Optional: 1m, 3m, 6m, 1y, 2y, 3y"),),
        build_url=lambda base, p: f"{base}/v1/mining/hashrate/{path_segment(p['timePeriod'])}",
    ),
]
