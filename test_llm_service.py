"""
Tests for the LLM explanation service using a mocked HTTP transport
"""
import asyncio
import json

import httpx
import pytest

from yojanamitra.models import Profile, Scheme
from yojanamitra.services.llm_service import ExplanationError, LLMService
from yojanamitra.services.scoring_service import SchemeScorer


BASE_URL = "https://llm.test/v1"

SCHEME = Scheme.model_validate({
    "id": "up",
    "title": "UP Scholarship",
    "description": "Scholarship for OBC students",
    "state": "Uttar Pradesh",
    "eligibility": {"income_max": 150000, "caste": ["OBC"], "student": True},
    "required_docs": ["Aadhaar"],
})

PROFILE = Profile(name="Asha", state="Uttar Pradesh", income_annual=120000, caste="OBC", education="Graduate")


def chat_response(content, status_code=200):
    return httpx.Response(
        status_code,
        json={"choices": [{"message": {"content": content}}], "usage": {"total_tokens": 42}}
    )


def call_service(handler, method, *args):
    async def _run():
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        service = LLMService(api_key="test-key", base_url=BASE_URL, model="gpt-4o-mini", client=client)
        try:
            return await getattr(service, method)(*args)
        finally:
            await service.close()

    return asyncio.run(_run())


def test_explain_match_posts_chat_completion():
    requests = []

    def handler(request):
        requests.append(request)
        return chat_response("  You are likely eligible. High confidence.  ")

    explanation = call_service(handler, "explain_match", PROFILE, SCHEME)

    assert explanation == "You are likely eligible. High confidence."
    request = requests[0]
    assert str(request.url) == f"{BASE_URL}/chat/completions"
    payload = json.loads(request.content)
    assert payload["model"] == "gpt-4o-mini"
    assert payload["max_tokens"] == 300
    assert "response_format" not in payload
    user_prompt = payload["messages"][1]["content"]
    assert "Scheme: UP Scholarship" in user_prompt
    assert "- Annual Income: ₹120,000" in user_prompt
    assert "- Name: Asha" in user_prompt


def test_assess_eligibility_parses_json_object():
    requests = []
    answer = {
        "eligible": True,
        "explanation": "Aap eligible lagte hain.",
        "aiScore": 12,
        "nextActions": [{"action": "Upload Aadhaar", "priority": "high", "description": "Needed for KYC"}],
    }

    def handler(request):
        requests.append(request)
        return chat_response(json.dumps(answer))

    result = SchemeScorer().score(PROFILE, SCHEME, single_scheme=True)
    assessment = call_service(handler, "assess_eligibility", PROFILE, SCHEME, result)

    assert assessment.eligible is True
    assert assessment.ai_score == 12
    assert assessment.next_actions[0].action == "Upload Aadhaar"
    payload = json.loads(requests[0].content)
    assert payload["response_format"] == {"type": "json_object"}
    assert "- Passed: 4 rules" in payload["messages"][1]["content"]
    assert "- Missing: 1 fields" in payload["messages"][1]["content"]


def test_assess_eligibility_accepts_fenced_json_and_clamps_score():
    def handler(request):
        return chat_response('```json\n{"eligible": false, "explanation": "Nahi.", "aiScore": 99}\n```')

    result = SchemeScorer().score(PROFILE, SCHEME)
    assessment = call_service(handler, "assess_eligibility", PROFILE, SCHEME, result)

    assert assessment.ai_score == 30
    assert assessment.next_actions == []


@pytest.mark.parametrize("response", [
    chat_response("I cannot answer that."),
    chat_response('{"aiScore": "plenty"}'),
    chat_response("[1, 2, 3]"),
])
def test_assess_eligibility_rejects_unusable_answers(response):
    result = SchemeScorer().score(PROFILE, SCHEME)

    with pytest.raises(ExplanationError):
        call_service(lambda request: response, "assess_eligibility", PROFILE, SCHEME, result)


@pytest.mark.parametrize("response", [
    httpx.Response(500, text="upstream down"),
    httpx.Response(200, json={"choices": []}),
    httpx.Response(200, json={"choices": [{"message": {"content": ""}}]}),
    httpx.Response(200, text="not json"),
])
def test_explain_match_raises_on_bad_responses(response):
    with pytest.raises(ExplanationError):
        call_service(lambda request: response, "explain_match", PROFILE, SCHEME)


def test_transport_errors_become_explanation_errors():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ExplanationError):
        call_service(handler, "explain_match", PROFILE, SCHEME)
