from reviewbot.agents.quality import review_quality
from reviewbot.agents.security import review_security
from reviewbot.agents.performance import review_performance
from reviewbot.agents.suggestions import generate_inline_suggestions
from reviewbot.agents.orchestrator import perform_review, truncate_diff

__all__ = [
    "review_quality",
    "review_security",
    "review_performance",
    "generate_inline_suggestions",
    "perform_review",
    "truncate_diff",
]
