"""
LLM service for scheme explanations over an OpenAI-compatible API
"""
import json
import logging
import re
from typing import Any, Dict, List, Optional
import httpx
from pydantic import ValidationError

from ..config import settings
from ..models.profile import Profile
from ..models.scheme import Scheme
from ..models.eligibility import EligibilityAssessment, ScoreResult
from ..utils.validators import format_inr

logger = logging.getLogger(__name__)


class ExplanationError(Exception):
    """Raised when the explanation model cannot produce a usable answer"""


class LLMService:
    """Service for explaining scheme eligibility with a chat model"""

    MATCH_SYSTEM_PROMPT = (
        "You are a helpful assistant that explains government schemes in simple terms. "
        "Always respond in clear, simple English to make it accessible to all users."
    )

    ASSESS_SYSTEM_PROMPT = (
        "You are an expert eligibility analyzer. "
        "Always return valid JSON only, no markdown or extra text."
    )

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.api_key = api_key if api_key is not None else settings.openai_api_key
        self.base_url = (base_url or settings.openai_base_url).rstrip("/")
        self.model = model or settings.openai_model

        # HTTP client with timeout
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.llm_timeout),
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json"
            }
        )

    async def close(self):
        """Close HTTP client"""
        await self.client.aclose()

    async def explain_match(self, profile: Profile, scheme: Scheme) -> str:
        """
        Explain in plain English whether a scheme suits the applicant

        Args:
            profile: Applicant profile
            scheme: Scheme being explained

        Returns:
            Free-text explanation (150-200 words)

        Raises:
            ExplanationError: if the model call fails
        """
        prompt = (
            f"{self._scheme_context(scheme)}\n{self._profile_context(profile)}\n\n"
            "Please provide:\n"
            "1. A clear explanation in simple English whether this user is eligible for this scheme\n"
            "2. Why they are eligible or not eligible (be specific)\n"
            "3. What information or documents are missing to confirm eligibility\n"
            "4. Confidence level (High/Medium/Low) based on available information\n\n"
            "Keep the response concise (150-200 words) and user-friendly."
        )

        return await self._chat(
            [
                {"role": "system", "content": self.MATCH_SYSTEM_PROMPT},
                {"role": "user", "content": prompt}
            ],
            max_tokens=300,
            temperature=0.7
        )

    async def assess_eligibility(
        self,
        profile: Profile,
        scheme: Scheme,
        score_result: ScoreResult
    ) -> EligibilityAssessment:
        """
        Ask the model for edge-case scoring, an explanation and next actions

        Args:
            profile: Applicant profile
            scheme: Scheme being evaluated
            score_result: Rule-based evaluation of the same pair

        Returns:
            EligibilityAssessment with ai_score clamped to 0-30

        Raises:
            ExplanationError: if the call fails or the answer is not valid JSON
        """
        eligibility_rules = json.dumps(scheme.eligibility.model_dump(exclude_none=True), indent=2)
        prompt = f"""You are an eligibility expert for Indian government schemes. Analyze this eligibility case:

Scheme: {scheme.title}
Description: {scheme.description}
Eligibility Rules: {eligibility_rules}

{self._profile_context(profile, include_name=False)}

Rule-Based Analysis:
- Passed: {len(score_result.passed)} rules
- Failed: {len(score_result.failed)} rules
- Missing: {len(score_result.missing)} fields

Provide a JSON response with:
1. "eligible": boolean (true if likely eligible, false if not)
2. "explanation": string (2-3 line explanation in Hinglish explaining why they qualify/don't qualify with specific reasons)
3. "aiScore": number (0-30, additional score based on edge cases and context)
4. "nextActions": array of objects with:
   - "action": string (what user should do)
   - "priority": "high" | "medium" | "low"
   - "description": string (why this action is needed)

Focus on:
- Edge cases (e.g., income slightly above limit but other factors strong)
- Missing information that could change eligibility
- Actionable next steps

Return ONLY valid JSON, no other text."""

        content = await self._chat(
            [
                {"role": "system", "content": self.ASSESS_SYSTEM_PROMPT},
                {"role": "user", "content": prompt}
            ],
            max_tokens=500,
            temperature=0.3,
            json_mode=True
        )

        parsed = self._extract_json_from_response(content)
        if parsed is None:
            raise ExplanationError("Failed to extract valid JSON from LLM response")

        try:
            return EligibilityAssessment.model_validate(parsed)
        except ValidationError as e:
            raise ExplanationError(f"Unexpected assessment structure: {e}") from e

    async def _chat(
        self,
        messages: List[Dict[str, str]],
        max_tokens: int,
        temperature: float,
        json_mode: bool = False
    ) -> str:
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        try:
            response = await self.client.post(f"{self.base_url}/chat/completions", json=payload)
        except httpx.TimeoutException as e:
            raise ExplanationError("LLM API request timed out") from e
        except httpx.RequestError as e:
            raise ExplanationError(f"LLM API request failed: {e}") from e

        if response.status_code != 200:
            raise ExplanationError(f"LLM API error: {response.status_code} - {response.text}")

        try:
            response_data = response.json()
            content = response_data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ExplanationError("No choices in LLM response") from e

        if not content:
            raise ExplanationError("Empty content in LLM response")

        logger.info(
            f"LLM response received from {self.model} "
            f"({response_data.get('usage', {}).get('total_tokens', 0)} tokens)"
        )
        return content.strip()

    def _extract_json_from_response(self, content: str) -> Optional[Dict[str, Any]]:
        """
        Extract a JSON object from LLM response content

        Args:
            content: Raw response content from LLM

        Returns:
            Parsed JSON dict or None if extraction fails
        """
        json_match = None

        # Pattern 1: ```json ... ```
        json_block_match = re.search(r'```json\s*(.*?)\s*```', content, re.DOTALL)
        if json_block_match:
            json_match = json_block_match.group(1)

        # Pattern 2: ``` ... ``` (without json specifier)
        if not json_match:
            block_match = re.search(r'```\s*(.*?)\s*```', content, re.DOTALL)
            if block_match:
                json_match = block_match.group(1)

        # Pattern 3: Look for content that starts with { and ends with }
        if not json_match:
            brace_match = re.search(r'(\{.*\})', content, re.DOTALL)
            if brace_match:
                json_match = brace_match.group(1)

        if not json_match:
            logger.warning("No JSON content found in LLM response")
            return None

        try:
            parsed_json = json.loads(json_match.strip())
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse extracted JSON: {e}")
            return None

        if not isinstance(parsed_json, dict):
            logger.warning("Extracted JSON is not an object")
            return None
        return parsed_json

    @staticmethod
    def _scheme_context(scheme: Scheme) -> str:
        docs = ', '.join(scheme.required_docs) if scheme.required_docs else 'N/A'
        eligibility = json.dumps(scheme.eligibility.model_dump(exclude_none=True), indent=2)
        return (
            f"Scheme: {scheme.title or 'N/A'}\n"
            f"Description: {scheme.description or 'N/A'}\n"
            f"State: {scheme.state or 'N/A'}\n"
            f"Eligibility Requirements: {eligibility}\n"
            f"Required Documents: {docs}"
        )

    @staticmethod
    def _profile_context(profile: Profile, include_name: bool = True) -> str:
        income = f"₹{format_inr(profile.income_annual)}" if profile.income_annual is not None else 'Not provided'
        lines = ["User Profile:"]
        if include_name:
            lines.append(f"- Name: {profile.name or 'Not provided'}")
        lines.extend([
            f"- Age: {profile.age if profile.age is not None else 'Not provided'}",
            f"- State: {profile.state or 'Not provided'}",
            f"- Annual Income: {income}",
            f"- Category: {profile.caste or 'Not provided'}",
            f"- Education: {profile.education or 'Not provided'}",
            f"- Documents Available: {', '.join(profile.documents) or 'None listed'}"
        ])
        return "\n".join(lines)


def create_llm_service() -> Optional[LLMService]:
    """Build the explanation service, or None when no API key is configured"""
    if not settings.llm_enabled:
        logger.warning("OpenAI not configured, explanations will use templates")
        return None
    return LLMService()
