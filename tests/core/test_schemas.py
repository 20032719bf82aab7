import pytest
from pydantic import ValidationError

from factories import audit_payload, case_payload, mentor_payload, options_payload
from prompt_detective.core.schemas import (
    AuditCaseData,
    CaseData,
    MentorFeedback,
    RectificationOptionSet,
    split_sentences,
)


def test_case_reads_camel_case_and_dumps_it_back():
    case = CaseData.model_validate(case_payload())
    assert case.faulty_prompt.startswith("Write a recipe card")
    assert case.to_json()["faultyPrompt"] == case.faulty_prompt


def test_case_normalizes_element_case():
    assert CaseData.model_validate(case_payload(botchedElement="TONE")).botched_element == "tone"


def test_case_rejects_unknown_element():
    with pytest.raises(ValidationError):
        CaseData.model_validate(case_payload(botchedElement="vibe"))


def test_case_rejects_missing_fields():
    payload = case_payload()
    del payload["idealPrompt"]
    with pytest.raises(ValidationError):
        CaseData.model_validate(payload)


def test_numeric_ids_become_strings():
    assert CaseData.model_validate(case_payload(id=731)).id == "731"


def test_split_sentences_on_terminal_punctuation():
    assert split_sentences("One. Two!  Three? Four") == ["One.", "Two!", "Three?", "Four"]
    assert split_sentences("") == []


def test_audit_case_derives_sentences():
    audit = AuditCaseData.model_validate(audit_payload())
    assert audit.id == "512"
    assert audit.sentences == [
        "Pack a tent.",
        "Bring ten umbrellas!",
        "Don't forget snow boots?",
        "Add sunscreen.",
    ]


def test_audit_case_rebuilds_sentences_from_output():
    """Test that incoming sentences are replaced by the split of aiOutput."""
    audit = AuditCaseData.model_validate(
        audit_payload(sentences=["Totally different sentence."])
    )
    assert audit.sentences == split_sentences(audit.ai_output)
    assert audit.to_json()["sentences"][0] == "Pack a tent."


def test_option_set_sorts_by_id():
    option_set = RectificationOptionSet.model_validate(options_payload())
    assert [option.id for option in option_set.sorted_options()] == ["A", "B", "C", "D"]


def test_option_set_requires_exactly_one_correct():
    payload = options_payload()
    payload["options"][1]["isCorrect"] = True
    with pytest.raises(ValidationError):
        RectificationOptionSet.model_validate(payload)


def test_option_set_requires_four_options():
    payload = options_payload()
    payload["options"] = payload["options"][:3]
    with pytest.raises(ValidationError):
        RectificationOptionSet.model_validate(payload)


def test_mentor_feedback_status_is_normalized():
    feedback = MentorFeedback.model_validate(mentor_payload())
    assert feedback.feedback[0].status == "missing"
    assert feedback.is_ready is False
