"""Care assessment questionnaire and recommendation band definitions."""
from typing import Dict, List, Tuple

from src.models import AssessmentOption, AssessmentQuestion, RecommendationBand
from src.match.rules import MEMORY_CARE, BOTH, ASSISTED_LIVING

SINGLE = "single"
MULTIPLE = "multiple"


def _question(question_id: str, kind: str, prompt: str, subtext: str,
              options: List[Tuple[str, str, int, str]]) -> AssessmentQuestion:
    return AssessmentQuestion(
        id=question_id,
        kind=kind,
        prompt=prompt,
        subtext=subtext,
        options=tuple(
            AssessmentOption(value=value, label=label, points=points, description=description)
            for value, label, points, description in options
        ),
    )


# Eight-question assessment, asked in this order
ASSESSMENT_QUESTIONS: Tuple[AssessmentQuestion, ...] = (
    _question(
        "primary-concern", SINGLE,
        "What's your primary concern for your loved one?",
        "This helps us understand your situation better",
        [
            ("memory", "Memory loss, confusion, or dementia", 5,
             "Signs of Alzheimer's or memory impairment"),
            ("daily-living", "Needs help with daily activities", 1,
             "Bathing, dressing, meals, medication"),
            ("safety", "Safety concerns at home", 3,
             "Falls, wandering, or unsafe behaviors"),
            ("isolation", "Loneliness or social isolation", 0,
             "Would benefit from community and activities"),
            ("multiple", "Multiple concerns / Not sure", 2,
             "Need help figuring out the right care level"),
        ],
    ),
    _question(
        "dementia-diagnosis", SINGLE,
        "Has your loved one been diagnosed with Alzheimer's, dementia, or memory impairment?",
        "This is important for determining the right care environment",
        [
            ("yes-advanced", "Yes, moderate to advanced stage", 6,
             "Requires specialized memory care"),
            ("yes-early", "Yes, early stage", 4,
             "May need memory care or assisted living with support"),
            ("suspected", "Not diagnosed, but showing signs", 3,
             "Consider evaluation and memory care options"),
            ("no", "No diagnosis", 0,
             "Assisted living may be appropriate"),
            ("unsure", "Unsure / Need professional evaluation", 2,
             "We can help connect you with resources"),
        ],
    ),
    _question(
        "mobility-falls", SINGLE,
        "How would you describe their mobility and fall risk?",
        "Understanding physical abilities helps us recommend the right level of support",
        [
            ("independent", "Fully mobile and independent", 0,
             "Walks without assistance, no fall history"),
            ("minor-assistance", "Mostly independent, occasional assistance needed", 1,
             "Uses cane or walker, rare falls"),
            ("regular-assistance", "Needs regular assistance with mobility", 2,
             "Uses walker or wheelchair, history of falls"),
            ("significant-risk", "Significant fall risk or mobility challenges", 3,
             "Frequent falls, requires close supervision"),
            ("wheelchair-bound", "Uses wheelchair full-time or bedbound", 2,
             "Requires assistance with transfers"),
        ],
    ),
    _question(
        "medical-needs", SINGLE,
        "What level of medical support is needed?",
        "This helps determine if skilled nursing care is necessary",
        [
            ("minimal", "Minimal - takes few medications independently", 0,
             "Generally healthy, rare doctor visits"),
            ("medication-management", "Medication reminders and management needed", 1,
             "Multiple medications, needs reminders"),
            ("regular-monitoring", "Regular health monitoring required", 2,
             "Chronic conditions like diabetes, heart disease"),
            ("skilled-nursing", "Skilled nursing care needed", 4,
             "Wound care, injections, or specialized medical needs"),
            ("hospice-palliative", "Hospice or palliative care", 3,
             "End-of-life or comfort care focus"),
        ],
    ),
    _question(
        "behavioral-challenges", SINGLE,
        "Are there any behavioral or psychological challenges?",
        "Specialized memory care may be needed for certain behaviors",
        [
            ("none", "No behavioral concerns", 0,
             "Calm, cooperative, follows directions"),
            ("mild-confusion", "Mild confusion or repetitive questions", 2,
             "Sometimes forgetful but manageable"),
            ("wandering", "Wandering or exit-seeking behavior", 5,
             "May try to leave, needs secure environment"),
            ("aggression", "Aggression, agitation, or combative behavior", 5,
             "Verbal or physical outbursts, resists care"),
            ("sundowning", "Sundowning or significant anxiety", 4,
             "Increased confusion and agitation in evening"),
        ],
    ),
    _question(
        "family-involvement", SINGLE,
        "How involved will family be in day-to-day care?",
        "This helps us understand your support needs and preferences",
        [
            ("very-close", "Very involved - I live nearby and will visit often", 0,
             "Within 15 minutes, can visit multiple times per week"),
            ("regular-visits", "Regular visits - I live in the area", 0,
             "Within 30-60 minutes, weekly visits planned"),
            ("occasional-visits", "Occasional visits - I live out of town", 0,
             "Long distance, monthly or holiday visits"),
            ("long-distance", "Long distance - need community to be primary support", 0,
             "Out of state, need excellent staff communication"),
            ("no-family", "Limited or no family involvement", 0,
             "Community will be primary support system"),
        ],
    ),
    _question(
        "budget-timeline", SINGLE,
        "What's your situation regarding timeline and budget?",
        "This helps us recommend the most appropriate options",
        [
            ("immediate-any", "Need care immediately, budget flexible", 0,
             "Urgent situation, cost is secondary"),
            ("immediate-budget", "Need care immediately, budget limited ($3,000-$5,000/month)", 0,
             "Looking for affordable immediate options"),
            ("planning-comfortable",
             "Planning ahead (1-6 months), comfortable budget ($5,000-$8,000/month)", 0,
             "Time to find the perfect fit"),
            ("planning-budget", "Planning ahead, concerned about costs ($3,000-$5,000/month)", 0,
             "Need to explore financial assistance options"),
            ("researching", "Just researching options, timeline flexible", 0,
             "Early in the decision process"),
        ],
    ),
    _question(
        "community-priorities", SINGLE,
        "What matters most to you in a senior living community?",
        "Help us match you with communities that fit your values",
        [
            ("specialized-care", "Specialized memory care expertise", 3,
             "Staff training, secure environment, dementia programs"),
            ("location", "Location and proximity to family", 0,
             "Close to home, familiar neighborhood"),
            ("activities", "Robust activities and social engagement", 0,
             "Daily programs, outings, entertainment"),
            ("amenities", "Luxury amenities and services", 0,
             "Fine dining, spa, fitness center, beautiful grounds"),
            ("value", "Best value and affordability", 0,
             "Quality care at reasonable cost"),
        ],
    ),
)


RECOMMENDATION_BANDS: Dict[str, RecommendationBand] = {
    MEMORY_CARE: RecommendationBand(
        recommendation=MEMORY_CARE,
        title="Memory Care",
        description=(
            "Based on your responses, specialized memory care would be most appropriate "
            "for your loved one. Memory care communities provide secure environments with "
            "trained staff specializing in dementia and Alzheimer's care."
        ),
        cost_range="$5,000 - $8,500 per month in Cleveland",
        reasons=(
            "Shows significant signs of memory impairment",
            "May require secure environment for safety",
            "Benefits from specialized dementia care programs",
            "Needs 24/7 supervision and support",
        ),
    ),
    BOTH: RecommendationBand(
        recommendation=BOTH,
        title="Assisted Living with Memory Support (or Memory Care)",
        description=(
            "Your loved one may benefit from assisted living with memory care support, "
            "or early-stage memory care. We recommend touring both types to see which "
            "feels most appropriate."
        ),
        cost_range="$3,500 - $7,000 per month in Cleveland",
        reasons=(
            "Some memory concerns present",
            "May need monitoring and assistance",
            "Could benefit from structured environment",
            "Flexible care needs that may increase",
        ),
    ),
    ASSISTED_LIVING: RecommendationBand(
        recommendation=ASSISTED_LIVING,
        title="Assisted Living",
        description=(
            "Based on your responses, assisted living appears most suitable. These "
            "communities provide help with daily activities while promoting independence "
            "and social engagement."
        ),
        cost_range="$3,200 - $6,500 per month in Cleveland",
        reasons=(
            "Needs assistance with daily living tasks",
            "Would benefit from social activities",
            "Maintenance-free lifestyle preferred",
            "Personal care services available when needed",
        ),
    ),
}


def validate_question_table(questions: Tuple[AssessmentQuestion, ...]) -> None:
    """
    Check a question table before it is used for scoring.

    Raises:
        ValueError: On duplicate question ids, duplicate option values,
            unknown question kinds or negative option points
    """
    seen_ids = set()
    for question in questions:
        if question.id in seen_ids:
            raise ValueError(f"Duplicate question id: {question.id}")
        seen_ids.add(question.id)

        if question.kind not in (SINGLE, MULTIPLE):
            raise ValueError(f"Unknown question kind {question.kind!r} for {question.id}")

        seen_values = set()
        for option in question.options:
            if option.value in seen_values:
                raise ValueError(f"Duplicate option value {option.value!r} in {question.id}")
            seen_values.add(option.value)
            if option.points < 0:
                raise ValueError(
                    f"Negative points ({option.points}) for {question.id}/{option.value}"
                )


def get_question(question_id: str):
    """Return the question with the given id, or None."""
    for question in ASSESSMENT_QUESTIONS:
        if question.id == question_id:
            return question
    return None


validate_question_table(ASSESSMENT_QUESTIONS)
