"""Locally built artifacts for MOCK_CASES=1.

Same shapes and invariants as live generation; content is fixed apart from
the case number and the botched element.
"""

import random
from typing import List, Optional

from prompt_detective.core.schemas import (
    AuditCaseData,
    CaseData,
    ElementScores,
    MentorFeedback,
    PlayerPrompt,
    RectificationOption,
    VerdictData,
)
from prompt_detective.game.catalog import case_number, pick_element


def mock_case(rng: Optional[random.Random] = None) -> CaseData:
    return CaseData(
        id=case_number(rng),
        title="The Case of the Mixed-Up Message",
        backstory=(
            "Alex asked for a quick note for neighbors, but the AI replied like a "
            "courtroom announcement. Everyone laughed at how dramatic it sounded."
        ),
        faulty_prompt=(
            "Can you write a short note inviting my neighbors over for dinner tonight? "
            "Please keep it brief."
        ),
        faulty_output=(
            "By order of the household, all residents are hereby summoned to dinner at 7 PM."
        ),
        botched_element=pick_element(rng),
        botched_explanation=(
            "The prompt said 'write a short note' but didn't specify tone. As a result, "
            "the AI wrote 'By order of the household,' which sounds overly formal "
            "instead of friendly."
        ),
        ideal_prompt=(
            "Write a short, friendly note inviting my neighbors over for dinner tonight at 7 PM."
        ),
    )


def mock_audit_case(rng: Optional[random.Random] = None) -> AuditCaseData:
    ai_output = " ".join(
        [
            "We will visit the Eiffel Tower on Saturday morning.",
            "Bring warm jackets because it always snows in July.",
            "For lunch, try local seafood by the pier.",
            "On Sunday, ride bikes along the waterfront trail.",
        ]
    )
    return AuditCaseData.model_validate(
        {
            "id": case_number(rng),
            "title": "The Mixed-Up Trip",
            "originalPrompt": "Plan a kid-friendly weekend itinerary for a family trip to Seattle.",
            "keyPoints": [
                {"emoji": "📋", "label": "Task", "value": "Weekend itinerary"},
                {"emoji": "📍", "label": "About", "value": "Seattle family trip"},
                {"emoji": "⚠️", "label": "Rule", "value": "Kid-friendly activities"},
            ],
            "aiOutput": ai_output,
            "bugs": [
                {
                    "id": "bug-1",
                    "text": "We will visit the Eiffel Tower on Saturday morning.",
                    "explanation": "The Eiffel Tower is in Paris, not Seattle.",
                },
                {
                    "id": "bug-2",
                    "text": "Bring warm jackets because it always snows in July.",
                    "explanation": "Seattle does not always snow in July.",
                },
            ],
        }
    )


def mock_rectification_options(case: CaseData) -> List[RectificationOption]:
    element = case.botched_element
    return [
        RectificationOption(
            id="A",
            prompt_text=case.ideal_prompt,
            is_correct=True,
            explanation=f"This directly fixes the missing {element}.",
        ),
        RectificationOption(
            id="B",
            prompt_text=case.faulty_prompt,
            is_correct=False,
            explanation=f"Still missing a clear {element}, so the output can go wrong the same way.",
        ),
        RectificationOption(
            id="C",
            prompt_text="Create a detailed, multi-paragraph plan for a restaurant dinner.",
            is_correct=False,
            explanation="This changes the objective and doesn't address the missing element.",
        ),
        RectificationOption(
            id="D",
            prompt_text="Draft a very formal summons for a corporate dinner event.",
            is_correct=False,
            explanation="This fixes a different element and makes the original issue worse.",
        ),
    ]


def mock_verdict(case: CaseData, player_prompt: PlayerPrompt) -> VerdictData:
    # Filled-in fields score high, blanks score zero
    scores = {
        element: 80 if getattr(player_prompt, element).strip() else 0
        for element in ElementScores.model_fields
    }
    solved = scores[case.botched_element] > 0
    overall = sum(scores.values()) // len(scores)
    return VerdictData(
        success=solved,
        overall_score=overall,
        element_scores=ElementScores(**scores),
        new_output=case.ideal_prompt if solved else case.faulty_output,
        case_summary=(
            f"Case closed! The missing {case.botched_element} was restored."
            if solved
            else f"Case still open: the {case.botched_element} is still missing."
        ),
    )


def mock_mentor_feedback(prompt_text: str) -> MentorFeedback:
    status = "partial" if prompt_text.strip() else "missing"
    return MentorFeedback.model_validate(
        {
            "feedback": [
                {"element": name, "status": status, "comment": f"Say more about the {name.lower()}."}
                for name in ("Context", "Objective", "Style", "Tone", "Audience", "Response")
            ],
            "overallAssessment": "Good start; add detail for each CO-STAR element.",
            "isReady": False,
            "improvedPrompt": prompt_text.strip() or None,
        }
    )
