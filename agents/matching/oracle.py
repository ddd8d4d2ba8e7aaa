"""
Ranking Oracle
External LLM consulted for thesis-fit scores, pitch verdicts and deck analysis.

The oracle is a pure function of its inputs: prompt in, schema-validated
object out, or RankingOracleError. Truncation, merging and fallback live in
the ranker, not here.
"""

from abc import ABC, abstractmethod
from typing import Optional, TypeVar

import anthropic
import structlog
from pydantic import BaseModel, ValidationError

from funnel.core.config import settings

from .models import (
    CandidateScore,
    DeckAnalysis,
    FounderContext,
    PitchVerdict,
    RankingResponse,
    VCCandidate,
)

logger = structlog.get_logger(agent="oracle")

T = TypeVar("T", bound=BaseModel)


RANKING_SYSTEM_PROMPT = (
    "You are an expert Deal Flow Manager. Your job is to match a specific startup "
    "with the most relevant investors based on their detailed investment thesis."
)

PITCH_SYSTEM_PROMPT = (
    "You are an AI assistant specialized in venture capital deal flow. Your task is to "
    "critically assess the fit between a startup's pitch and a VC's investment thesis. "
    "Be objective and concise."
)

DECK_SYSTEM_PROMPT = """You are a General Partner at a Tier 1 Venture Capital firm.
Your job is to screen incoming deal flow. You are highly selective, cynical, and data-driven.
You ignore marketing fluff and look for:
1. "Hair on fire" problems.
2. Non-obvious insights or "Secrets".
3. Structural advantages (Network effects, proprietary tech, high switching costs).
4. Evidence of product-market fit (Retention, organic growth).

You are grading this startup on its potential to be a "Fund Returner" (100x exit).
Be harsh. Most startups fail. Your analysis should reflect the reality of the power law."""


class RankingOracleError(Exception):
    """The oracle call failed: transport error, timeout or malformed output."""


class RankingOracle(ABC):
    """Interface to the external scoring service."""

    @abstractmethod
    async def rank(self, context: FounderContext, candidates: list[VCCandidate]) -> list[CandidateScore]:
        """Score each candidate's thesis fit for the founder."""

    @abstractmethod
    async def judge_pitch(self, founder_content: str, thesis: str) -> PitchVerdict:
        """Decide whether one founder fits one VC thesis."""

    @abstractmethod
    async def analyze_deck(self, deck_text: str, sector: str, ask_amount: int) -> DeckAnalysis:
        """Produce a report card for a pitch deck."""


class AnthropicRankingOracle(RankingOracle):
    """
    Ranking oracle backed by Claude.

    Structured output is obtained by forcing a single tool call whose
    input schema is the required response model. One attempt per call,
    bounded by ``llm_timeout_seconds``.
    """

    def __init__(
        self,
        client: Optional[anthropic.AsyncAnthropic] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ):
        """
        Initialize oracle.

        Args:
            client: Preconfigured Anthropic client. Built from settings if omitted.
            model: Model name override.
            max_tokens: Response token budget override.
        """
        if client is None and settings.anthropic_api_key:
            client = anthropic.AsyncAnthropic(
                api_key=settings.anthropic_api_key,
                timeout=settings.llm_timeout_seconds,
                max_retries=0,
            )
        self.client = client
        self.model = model or settings.llm_model
        self.max_tokens = max_tokens or settings.llm_max_tokens

    async def _structured_call(
        self,
        *,
        system: str,
        prompt: str,
        tool_name: str,
        tool_description: str,
        output_model: type[T],
    ) -> T:
        """
        Send one prompt and validate the forced tool call against ``output_model``.

        Raises:
            RankingOracleError: On any failure to obtain a valid object.
        """
        if self.client is None:
            raise RankingOracleError("Ranking oracle is not configured (ANTHROPIC_API_KEY missing)")

        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=system,
                messages=[{"role": "user", "content": prompt}],
                tools=[
                    {
                        "name": tool_name,
                        "description": tool_description,
                        "input_schema": output_model.model_json_schema(),
                    }
                ],
                tool_choice={"type": "tool", "name": tool_name},
            )
        except anthropic.APIError as e:
            logger.error("oracle_call_failed", tool=tool_name, error=str(e), error_type=type(e).__name__)
            raise RankingOracleError(f"{tool_name} call failed: {e}") from e

        tool_input = None
        for block in response.content:
            if getattr(block, "type", None) == "tool_use" and block.name == tool_name:
                tool_input = block.input
                break

        if tool_input is None:
            logger.error("oracle_missing_output", tool=tool_name, stop_reason=getattr(response, "stop_reason", None))
            raise RankingOracleError(f"{tool_name} returned no structured output")

        try:
            return output_model.model_validate(tool_input)
        except ValidationError as e:
            logger.error("oracle_response_parse_error", tool=tool_name, error=str(e))
            raise RankingOracleError(f"{tool_name} returned malformed output") from e

    async def rank(self, context: FounderContext, candidates: list[VCCandidate]) -> list[CandidateScore]:
        vc_list = "\n---\n".join(candidate.to_prompt_text() for candidate in candidates)
        prompt = f"""Task: Rank these Venture Capital firms based on their likelihood to invest in this startup.

STARTUP CONTEXT:
{context.to_prompt_text()}

CANDIDATE VCs:
{vc_list}

INSTRUCTIONS:
- Assign a "score" (0-100) based on thesis fit.
- Provide a brief "reason" explaining the specific fit or misalignment.
- Be discerning. A generic match should be ~70. A thesis match should be >85.
- Return the results for ALL provided candidates, using each candidate's ID as "vc_id"."""

        result = await self._structured_call(
            system=RANKING_SYSTEM_PROMPT,
            prompt=prompt,
            tool_name="submit_rankings",
            tool_description="Submit a thesis-fit score and reason for every candidate VC.",
            output_model=RankingResponse,
        )
        logger.info("rankings_received", founder_id=str(context.founder_id), count=len(result.rankings))
        return result.rankings

    async def judge_pitch(self, founder_content: str, thesis: str) -> PitchVerdict:
        prompt = f'''Startup Pitch Deck Content:
"""
{founder_content}
"""

VC Investment Thesis:
"""
{thesis}
"""

Based on the startup's content and the VC's thesis, determine if there is a strong, viable match.
- 'isMatch': boolean, true if there's a strong fit, false otherwise.
- 'memo': string, a concise explanation (1-2 sentences) of the match/no-match decision.
- 'analysis': object, detailing relevant strengths and weaknesses of the match.'''

        return await self._structured_call(
            system=PITCH_SYSTEM_PROMPT,
            prompt=prompt,
            tool_name="submit_pitch_verdict",
            tool_description="Submit the match verdict for this startup and VC thesis.",
            output_model=PitchVerdict,
        )

    async def analyze_deck(self, deck_text: str, sector: str, ask_amount: int) -> DeckAnalysis:
        prompt = f'''Analyze the following pitch deck text for a startup in the "{sector}" sector raising ${ask_amount}.

DECK TEXT:
"""
{deck_text}
"""

TASK:
Provide a critical investment memo.

GUIDELINES:
- Strengths: specific unfair advantages, not generic statements like "large market".
- Weaknesses: fatal flaws, competitive risks, or unit economic challenges.
- Viability Score: 0-100. (Note: <60 is a pass, 60-80 is interesting, >80 is a hot deal). Be conservative.
- Summary: A 2-sentence punchy thesis on why we should or should not take a meeting.'''

        return await self._structured_call(
            system=DECK_SYSTEM_PROMPT,
            prompt=prompt,
            tool_name="submit_deck_analysis",
            tool_description="Submit the investment memo for this pitch deck.",
            output_model=DeckAnalysis,
        )
