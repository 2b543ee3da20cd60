"""
Tests for rule-based scheme scoring
"""
import pytest

from yojanamitra.models import Profile, Scheme
from yojanamitra.services.scoring_service import SchemeScorer, rank_scores


scorer = SchemeScorer()


def make_scheme(**overrides):
    data = {
        "id": "up_scholarship",
        "title": "UP Scholarship",
        "state": "Uttar Pradesh",
        "eligibility": {"income_max": 150000, "caste": ["OBC", "SC"], "student": True},
    }
    data.update(overrides)
    return Scheme.model_validate(data)


def up_graduate(**overrides):
    data = {
        "age": 25,
        "state": "Uttar Pradesh",
        "income_annual": 120000,
        "caste": "OBC",
        "education": "Graduate",
    }
    data.update(overrides)
    return Profile.model_validate(data)


def test_full_match_earns_every_weight():
    result = scorer.score(up_graduate(), make_scheme())

    assert result.score == 100
    assert result.confidence == pytest.approx(1.0)
    assert [p.rule for p in result.passed] == ["Income Limit", "Category Match", "Education Level", "State Match"]
    assert result.failed == []
    assert result.missing == []
    assert result.missing_fields == []


def test_income_below_limit_scores_forty():
    scheme = make_scheme(state="All", eligibility={"income_max": 150000})
    result = scorer.score(Profile(income_annual=100000), scheme)

    assert result.score == 40
    assert result.confidence == pytest.approx(0.4)
    assert result.passed[0].rule == "Income Limit"
    assert "₹100,000" in result.passed[0].reason


def test_income_above_limit_fails_with_fix():
    scheme = make_scheme(state="All", eligibility={"income_max": 150000})
    result = scorer.score(Profile(income_annual=200000), scheme)

    assert result.score == 0
    assert result.failed[0].rule == "Income Limit"
    assert result.failed[0].fix == "Update your income certificate or declare lower income"
    assert result.missing_fields == ["Income exceeds limit"]


def test_unknown_income_is_missing_not_failed():
    scheme = make_scheme(state="All", eligibility={"income_max": 150000})
    result = scorer.score(Profile(), scheme)

    assert result.failed == []
    assert result.missing[0].field == "Annual Income"
    assert result.missing_fields == ["Annual income"]


def test_zero_income_counts_as_known():
    scheme = make_scheme(state="All", eligibility={"income_max": 150000})
    result = scorer.score(Profile(income_annual=0), scheme)

    assert result.score == 40
    assert result.missing == []


def test_no_income_rule_means_no_income_entry():
    scheme = make_scheme(eligibility={"caste": ["OBC"]})
    result = scorer.score(up_graduate(income_annual=900000), scheme)

    rules = [o.rule for o in result.passed + result.failed]
    assert "Income Limit" not in rules
    assert all(m.field != "Annual Income" for m in result.missing)
    assert result.score == 40  # caste + state


def test_caste_match_ignores_case():
    scheme = make_scheme(state="All", eligibility={"caste": ["OBC", "SC"]})
    result = scorer.score(Profile.model_construct(caste="obc", documents=[]), scheme)

    assert result.score == 30
    assert result.passed[0].rule == "Category Match"


def test_caste_mismatch_fails():
    scheme = make_scheme(state="All", eligibility={"caste": ["SC", "ST"]})
    result = scorer.score(Profile(caste="General"), scheme)

    assert result.score == 0
    assert result.failed[0].fix == "Verify your category certificate or select the correct category"
    assert result.missing_fields == ["Caste category mismatch"]


@pytest.mark.parametrize("education", ["Post Graduate", "Higher Secondary", "graduate", "postponed my exams"])
def test_education_keywords_are_loose_substrings(education):
    scheme = make_scheme(state="All", eligibility={"student": True})
    result = scorer.score(Profile(education=education), scheme)

    assert result.score == 20


def test_education_without_keyword_fails():
    scheme = make_scheme(state="All", eligibility={"student": True})
    result = scorer.score(Profile(education="10th pass"), scheme)

    assert result.score == 0
    assert result.missing_fields == ["Education level"]


def test_required_education_substring_passes_single_scheme():
    scheme = make_scheme(state="All", eligibility={"education": "8th pass"})
    profile = Profile(education="8th Pass from UP Board")

    assert scorer.score(profile, scheme, single_scheme=True).score == 20
    # catalog matching only looks at the student flag
    assert scorer.score(profile, scheme).score == 0


def test_student_scheme_accepts_any_education_for_single_scheme():
    scheme = make_scheme(state="Bihar", eligibility={"student": True}, required_docs=["Aadhaar"])
    profile = Profile(education="Class 12", state="Bihar", documents=["Aadhaar Card"])

    result = scorer.score(profile, scheme, single_scheme=True)

    assert result.score == 40
    assert [p.rule for p in result.passed] == ["Education Level", "State Match", "Documents"]
    assert result.failed == []

    batch = scorer.score(profile, scheme)
    assert batch.score == 10
    assert batch.missing_fields == ["Education level"]


def test_missing_education_is_reported():
    scheme = make_scheme(state="All", eligibility={"student": True})
    result = scorer.score(Profile(), scheme)

    assert result.missing[0].field == "Education"
    assert result.missing_fields == ["Education details"]


def test_nationwide_scheme_passes_any_known_state():
    scheme = make_scheme(state="All", eligibility={})
    result = scorer.score(Profile(state="Kerala"), scheme)

    assert result.score == 10
    assert result.passed[0].rule == "State Match"


def test_nationwide_scheme_without_profile_state_is_silent():
    scheme = make_scheme(state="All", eligibility={})
    result = scorer.score(Profile(), scheme)

    assert result.score == 0
    assert result.missing == []
    assert result.missing_fields == []


def test_nationwide_scheme_has_no_state_rule_for_single_scheme():
    scheme = make_scheme(state="All", eligibility={"income_max": 100000}, required_docs=["Aadhaar"])
    profile = Profile(income_annual=50000, state="Bihar", documents=["Aadhaar"])

    result = scorer.score(profile, scheme, single_scheme=True)

    assert result.score == 50
    assert [p.rule for p in result.passed] == ["Income Limit", "Documents"]
    assert scorer.score(Profile(), scheme, single_scheme=True).missing_fields == ["Annual income", "Aadhaar"]


def test_state_mismatch_and_missing_state():
    scheme = make_scheme(eligibility={})

    mismatch = scorer.score(Profile(state="Bihar"), scheme)
    assert mismatch.missing_fields == ["State mismatch"]
    assert mismatch.failed[0].rule == "State Match"

    unknown = scorer.score(Profile(), scheme)
    assert unknown.missing_fields == ["State information"]
    assert unknown.missing[0].field == "State"


def test_state_match_ignores_case():
    result = scorer.score(Profile(state="uttar pradesh"), make_scheme(eligibility={}))
    assert result.score == 10


def test_documents_only_checked_when_requested():
    scheme = make_scheme(required_docs=["Aadhaar", "Income Certificate"])

    assert scorer.score(up_graduate(), scheme).missing == []

    result = scorer.score(up_graduate(documents=["aadhaar card"]), scheme, single_scheme=True)
    assert [m.field for m in result.missing] == ["Income Certificate"]
    assert result.missing[0].action == "Obtain or download Income Certificate"
    assert result.score == 100


def test_all_documents_present_adds_documents_rule():
    scheme = make_scheme(required_docs=["Aadhaar", "Income Certificate"])
    profile = up_graduate(documents=["Aadhaar Card", "Income Certificate 2024"])

    result = scorer.score(profile, scheme, single_scheme=True)

    assert result.passed[-1].rule == "Documents"
    assert result.score == 110
    assert result.confidence == 1.0


def test_empty_document_list_passes_documents_rule():
    scheme = make_scheme(state="Bihar", eligibility={"income_max": 100000, "caste": ["SC"]}, required_docs=[])
    profile = Profile(income_annual=50000, caste="SC")

    result = scorer.score(profile, scheme, single_scheme=True)

    assert result.score == 80
    assert result.passed[-1].rule == "Documents"


def test_absent_document_list_skips_documents_rule():
    scheme = make_scheme()
    assert scheme.required_docs is None

    result = scorer.score(up_graduate(), scheme, single_scheme=True)

    assert result.score == 100
    assert "Documents" not in [p.rule for p in result.passed]


@pytest.mark.parametrize("profile_data", [
    {},
    {"income_annual": 10 ** 9, "caste": "General", "state": "Goa", "education": "none"},
    {"income_annual": 0, "caste": "SC", "state": "Uttar Pradesh", "education": "postgraduate",
     "documents": ["Aadhaar", "Income Certificate"]},
])
def test_score_and_confidence_stay_in_bounds(profile_data):
    scheme = make_scheme(required_docs=["Aadhaar", "Income Certificate"])
    for single_scheme in (False, True):
        result = scorer.score(Profile.model_validate(profile_data), scheme, single_scheme=single_scheme)
        assert result.score >= 0
        assert 0.0 <= result.confidence <= 1.0


def test_rank_scores_is_stable_for_ties():
    profile = up_graduate()
    schemes = [
        make_scheme(id="low", eligibility={}, state="Bihar"),
        make_scheme(id="first_tie"),
        make_scheme(id="second_tie"),
    ]
    ranked = rank_scores([(s, scorer.score(profile, s)) for s in schemes])

    assert [s.id for s, _ in ranked] == ["first_tie", "second_tie", "low"]
