"""
CodeSync Profile Server (FastAPI)
=================================
HTTP API over the profile aggregator.
Auto-generated Swagger docs at /docs
"""
import logging
import sys
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
import uvicorn

BASE_DIR = Path(__file__).parent.absolute()
sys.path.insert(0, str(BASE_DIR))

from scrapers.aggregator import PLATFORM_ORDER, ProfileAggregator, stats_to_dicts
from utils.data_normalizer import PlatformId

logger = logging.getLogger(__name__)

app = FastAPI(
    title="CodeSync Profile API",
    description="Competitive-programming and GitHub profile aggregation API",
    version="1.0.0"
)

aggregator = None


def get_aggregator() -> ProfileAggregator:
    global aggregator
    if aggregator is None:
        aggregator = ProfileAggregator()
    return aggregator


@app.get("/api/health", tags=["Meta"])
async def health():
    return {"status": "ok"}


@app.get("/api/platforms", tags=["Meta"])
async def api_platforms():
    """Configured platform ids, in aggregation order."""
    return get_aggregator().factory.available_platforms


# Blocking scraper calls: plain `def` routes run in FastAPI's threadpool
@app.get("/api/profiles", tags=["Profiles"])
def api_profiles(
    leetcode: Optional[str] = Query(default=None, description="LeetCode username"),
    codechef: Optional[str] = Query(default=None, description="CodeChef username"),
    codeforces: Optional[str] = Query(default=None, description="Codeforces handle"),
    atcoder: Optional[str] = Query(default=None, description="AtCoder username"),
    hackerrank: Optional[str] = Query(default=None, description="HackerRank username"),
    github: Optional[str] = Query(default=None, description="GitHub login"),
):
    """Scrape every platform with a handle; failed platforms are left out."""
    handles = {
        PlatformId.LEETCODE: leetcode,
        PlatformId.CODECHEF: codechef,
        PlatformId.CODEFORCES: codeforces,
        PlatformId.ATCODER: atcoder,
        PlatformId.HACKERRANK: hackerrank,
        PlatformId.GITHUB: github,
    }
    results = get_aggregator().scrape_all_platforms_for_user(handles)
    logger.info(f"API: Returning {len(results)}/{len(PLATFORM_ORDER)} platform profiles")
    return stats_to_dicts(results)


@app.get("/api/profiles/{platform}/{handle}", tags=["Profiles"])
def api_platform_profile(platform: str, handle: str):
    """Scrape a single platform."""
    current = get_aggregator()
    try:
        platform_id = PlatformId.parse(platform)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown platform: {platform}")
    if platform_id.value not in current.factory.available_platforms:
        raise HTTPException(status_code=400, detail=f"Platform not enabled: {platform_id.value}")

    stats = current.scrape_platform_for_user(platform_id, handle)
    if stats is None:
        raise HTTPException(status_code=404, detail=f"No {platform_id.value} profile for {handle}")
    return stats.to_dict()


def run(host: str = '127.0.0.1', port: int = 8000, reload: bool = False):
    print(f"\n{'='*50}")
    print(f"  CodeSync Profile Server (FastAPI)")
    print(f"  Open: http://{host}:{port}/api/health")
    print(f"  API Docs: http://{host}:{port}/docs")
    print(f"{'='*50}\n")
    uvicorn.run("server:app", host=host, port=port, reload=reload)


if __name__ == '__main__':
    run(reload=True)
