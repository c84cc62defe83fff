"""Agents directory - agent profiles joined with users and reviews client-side."""

from collections import defaultdict
from typing import Optional
from idrhub.models.agent import Agent, DEFAULT_COMMISSION_RATE
from idrhub.models.review import Review
from idrhub.services.supabase_client import SupabaseClient
from idrhub.utils.logging import get_structured_logger, log_timing

logger = get_structured_logger(__name__)

AGENTS_SELECT = "*, user:users!agents_id_fkey(id, full_name, email, role, avatar_url, phone)"
REVIEWS_SELECT = "*, reviewer:users!reviews_reviewer_id_fkey(full_name), property:properties(title)"


def average_rating(reviews: list[Review]) -> float:
    """Arithmetic mean of review ratings; exactly 0.0 for no reviews."""
    if not reviews:
        return 0.0
    return sum(r.rating or 0 for r in reviews) / len(reviews)


def build_agent_profiles(agent_rows: list[dict], review_rows: list[dict]) -> list[Agent]:
    """Join agent rows with their reviews and derive rating and latest review.

    ``review_rows`` must be ordered newest first; the first review of each
    agent's partition becomes its ``latest_review``.
    """
    reviews_by_agent: dict[str, list[Review]] = defaultdict(list)
    for row in review_rows:
        review = Review.model_validate(row)
        reviews_by_agent[review.agent_id].append(review)

    agents = []
    for row in agent_rows:
        agent_id = row["id"]
        user = row.get("user") or {}
        reviews = reviews_by_agent.get(agent_id, [])

        agents.append(Agent(
            id=agent_id,
            full_name=user.get("full_name") or f"Agent {agent_id[:8]}",
            email=user.get("email") or f"agent-{agent_id[:8]}@example.com",
            role=user.get("role") or "agent",
            avatar_url=user.get("avatar_url"),
            phone=user.get("phone"),
            verified=row.get("verified") or False,
            rating=average_rating(reviews),
            total_sales=row.get("total_sales") or 0,
            experience_years=row.get("experience_years") or 0,
            specializations=row.get("specializations") or [],
            bio=row.get("bio") or "",
            license_number=row.get("license_number") or "",
            commission_rate=row.get("commission_rate") or DEFAULT_COMMISSION_RATE,
            reviews=reviews,
            review_count=len(reviews),
            latest_review=reviews[0] if reviews else None,
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        ))
    return agents


class AgentsDirectory:
    """Cached list of agent profiles.

    Every fetch pulls the whole reviews table and aggregates it here.
    """

    def __init__(self):
        self.agents: list[Agent] = []
        self.loading = True
        self.error: Optional[str] = None

    async def fetch_agents(self) -> None:
        self.loading = True
        self.error = None
        try:
            with log_timing("fetch_agents", logger=logger):
                async with SupabaseClient() as client:
                    agents_result = (
                        client.table("agents")
                        .select(AGENTS_SELECT)
                        .order("created_at", desc=True)
                        .execute()
                    )
                    agent_rows = agents_result.data or []
                    review_rows = self._fetch_reviews(client)

            self.agents = build_agent_profiles(agent_rows, review_rows)
            logger.info(
                "Agents loaded",
                agents=len(self.agents),
                reviews=len(review_rows)
            )
        except Exception as e:
            logger.error("Error fetching agents", error=str(e))
            self.error = str(e) or "An error occurred"
        finally:
            self.loading = False

    def _fetch_reviews(self, client) -> list[dict]:
        # Agents still render without reviews; their rating is then 0
        try:
            result = (
                client.table("reviews")
                .select(REVIEWS_SELECT)
                .order("created_at", desc=True)
                .execute()
            )
            return result.data or []
        except Exception as e:
            logger.warning("Error fetching reviews, continuing without them", error=str(e))
            return []

    def get_agent(self, agent_id: str) -> Optional[Agent]:
        return next((a for a in self.agents if a.id == agent_id), None)
