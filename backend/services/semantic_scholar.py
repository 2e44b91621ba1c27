import httpx
import logging
import asyncio
from config import get_settings

logger = logging.getLogger("semantic_scholar")

BASE_URL = "https://api.semanticscholar.org/graph/v1"
SEARCH_FIELDS = "title,authors,year,abstract,venue,journal,url,externalIds"


class SemanticScholarClient:
    """Client for the Semantic Scholar Graph API (works without a key, rate limited)."""

    def __init__(self, rate_limit_delay: float = 1.0):
        self.rate_limit_delay = rate_limit_delay
        settings = get_settings()
        self.headers = {}
        if settings.SEMANTIC_SCHOLAR_API_KEY:
            self.headers["x-api-key"] = settings.SEMANTIC_SCHOLAR_API_KEY

    async def search_papers(self, query: str, limit: int = 10) -> list[dict]:
        """Search for papers by query string. Returns [] on any API error."""
        async with httpx.AsyncClient(timeout=30.0, headers=self.headers) as client:
            try:
                response = await client.get(
                    f"{BASE_URL}/paper/search",
                    params={
                        "query": query,
                        "limit": min(limit, 100),
                        "fields": SEARCH_FIELDS,
                    },
                )
                response.raise_for_status()
                data = response.json()
                await asyncio.sleep(self.rate_limit_delay)
                return data.get("data") or []
            except Exception as e:
                logger.error(f"Semantic Scholar search error: {e}")
                return []


def paper_url(item: dict) -> str:
    """Prefer a DOI link; fall back to the Semantic Scholar page."""
    doi = (item.get("externalIds") or {}).get("DOI")
    if doi:
        return f"https://doi.org/{doi}"
    return item.get("url") or ""


def paper_venue(item: dict) -> str:
    journal = item.get("journal") or {}
    return journal.get("name") or item.get("venue") or ""


def author_names(item: dict) -> str:
    authors = item.get("authors") or []
    names = [a.get("name", "") for a in authors if isinstance(a, dict) and a.get("name")]
    if not names:
        return ""
    if len(names) > 3:
        return f"{', '.join(names[:3])} et al."
    return ", ".join(names)
