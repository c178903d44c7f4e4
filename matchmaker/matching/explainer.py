"""Short LLM-written explanations of why a freelancer fits a job."""

import asyncio
import logging
from abc import ABC, abstractmethod

from matchmaker.core.errors import ExplanationError, MatchmakerError, ProviderTimeoutError
from matchmaker.core.schemas import SearchHit
from matchmaker.llm.base import LLMProvider

logger = logging.getLogger(__name__)

MATCH_EXPLANATION_SYSTEM_PROMPT = (
    "You explain why a freelancer is a good match for a job in 1-2 sentences, "
    "focusing on relevant skills and experience."
)

# A 15-word answer fits well inside this budget.
EXPLANATION_MAX_TOKENS = 60


def build_explanation_prompt(job_text: str, candidate_text: str, skills: list[str]) -> str:
    return (
        f"Job description:\n{job_text}\n\n"
        f"Freelancer description:\n{candidate_text}\n\n"
        f"Freelancer skills: {', '.join(skills)}\n\n"
        "Explain ONLY in 15 words why this freelancer is a good match."
    )


class Explainer(ABC):
    """Produces free-text rationale for a job/freelancer pair."""

    @abstractmethod
    async def explain(self, job_text: str, candidate_text: str, skills: list[str]) -> str:
        """Return a short explanation of why the candidate matches the job."""


class LLMExplainer(Explainer):
    """Explainer backed by one of the registered LLM providers."""

    def __init__(self, provider: LLMProvider, model: str | None = None) -> None:
        self._provider = provider
        self._model = model

    async def explain(self, job_text: str, candidate_text: str, skills: list[str]) -> str:
        prompt = build_explanation_prompt(job_text, candidate_text, skills)
        raw = await asyncio.to_thread(
            self._provider.complete,
            prompt,
            system=MATCH_EXPLANATION_SYSTEM_PROMPT,
            model=self._model,
            max_tokens=EXPLANATION_MAX_TOKENS,
        )
        return raw.strip()


async def explain_all(
    explainer: Explainer,
    job_text: str,
    hits: list[SearchHit],
    *,
    max_concurrency: int = 5,
    timeout_s: float = 30.0,
) -> list[str]:
    """Explain every hit concurrently; results are index-aligned with hits.

    At most max_concurrency calls run at once and each gets timeout_s
    seconds. The first failure cancels the outstanding calls and is raised:
    ProviderTimeoutError on timeout, ExplanationError otherwise.
    """
    semaphore = asyncio.Semaphore(max_concurrency)

    async def _explain_one(hit: SearchHit) -> str:
        async with semaphore:
            try:
                return await asyncio.wait_for(
                    explainer.explain(job_text, hit.description, hit.skills),
                    timeout=timeout_s,
                )
            except TimeoutError:
                msg = f"Explanation for freelancer {hit.id} timed out after {timeout_s}s"
                raise ProviderTimeoutError(msg) from None
            except MatchmakerError:
                raise
            except Exception as e:
                msg = f"Explanation failed for freelancer {hit.id}: {e}"
                raise ExplanationError(msg) from e

    tasks = [asyncio.ensure_future(_explain_one(h)) for h in hits]
    try:
        explanations = await asyncio.gather(*tasks)
    except BaseException:
        for t in tasks:
            t.cancel()
        raise

    logger.debug("Generated %d explanations", len(explanations))
    return list(explanations)
