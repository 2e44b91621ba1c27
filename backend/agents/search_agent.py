import logging
from agents.base_agent import BaseAgent
from agents.prompts import CLEAN_TEXT_INSTRUCTION, REVIEW_GUIDELINES, TEMPLATE_KNOWLEDGE
from config import get_settings
from models.session import Paper, ReviewType, SearchOutcome
from services.semantic_scholar import SemanticScholarClient, author_names, paper_url, paper_venue
from services.text_cleaner import strip_markdown, tidy_text

logger = logging.getLogger("agent.search")


def build_search_query(query: str, references: str = "") -> str:
    """The research question plus the optional "also consider" addendum."""
    return query + (f" (Consider also: {references})" if references else "")


def to_papers(results: list[dict], limit: int) -> list[Paper]:
    """Turn search hits into session papers, dropping hits without a link."""
    papers = []
    for item in results:
        url = paper_url(item)
        if not url:
            continue
        papers.append(Paper(
            id=f"paper-{len(papers)}",
            title=strip_markdown(item.get("title") or "Untitled Source"),
            authors=author_names(item) or "Various Authors",
            year=str(item.get("year") or "n.d."),
            journal=paper_venue(item) or "Academic Journal",
            url=url,
        ))
        if len(papers) >= limit:
            break
    return papers


class SearchAgent(BaseAgent):
    """SEARCH stage: gathers sources and writes the review narrative grounded on them."""

    def __init__(self, llm_service, scholar: SemanticScholarClient = None):
        super().__init__("search", llm_service)
        self.scholar = scholar or SemanticScholarClient()

    async def run(self, input_data: dict) -> SearchOutcome:
        query = input_data["query"]
        review_type = ReviewType(input_data.get("review_type", ReviewType.SLR))
        references = input_data.get("references", "")
        limit = get_settings().SEARCH_RESULT_LIMIT

        results = await self.scholar.search_papers(query, limit=limit)
        papers = to_papers(results, limit)
        if papers:
            logger.info(f"Found {len(papers)} sources for {query!r}")
        else:
            logger.warning(f"No linked sources found for {query!r}; the review will cite none")

        source_list = "\n".join(
            f"- {p.title} ({p.year}), {p.journal}. {p.url}" for p in papers[:20]
        ) or "- No indexed sources were found; rely on well-known literature."

        prompt = f"""Task: Conduct a {review_type.value} for the topic: {build_search_query(query, references)}.

Instructions:
{REVIEW_GUIDELINES}
Structure:
1. Executive Summary
2. Synthesis of Themes (organized by paper)
3. Quick Reference List (Title, Journal, DOI)
4. APA 7th Edition References

SOURCES FOUND:
{source_list}

{TEMPLATE_KNOWLEDGE}
{CLEAN_TEXT_INSTRUCTION}

PRIORITY: Global sources from Google Scholar, Scopus, and WoS."""

        text = await self.llm.generate(prompt)

        return SearchOutcome(papers=papers, summary=tidy_text(text))
