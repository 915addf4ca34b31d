"""Assessment scoring module."""
import logging
from typing import Optional, Tuple

from src.assessment.questions import ASSESSMENT_QUESTIONS, RECOMMENDATION_BANDS, SINGLE, MULTIPLE
from src.match.rules import MEMORY_CARE, BOTH, ASSISTED_LIVING, MEMORY_CARE_MIN, BOTH_MIN
from src.models import AssessmentAnswers, AssessmentQuestion, RecommendationBand, ScoreResult

logger = logging.getLogger(__name__)


def calculate_score(
    answers: AssessmentAnswers,
    questions: Optional[Tuple[AssessmentQuestion, ...]] = None
) -> int:
    """
    Sum option points for the given answers.

    Unanswered questions and values that are not among a question's options
    contribute nothing. An answer whose shape does not match the question kind
    (a list for a single-select question, a string for a multi-select one) is
    ignored the same way.

    Args:
        answers: Question id -> selected value or list of values
        questions: Question table (defaults to the assessment questionnaire)

    Returns:
        Total score
    """
    questions = ASSESSMENT_QUESTIONS if questions is None else questions
    total_score = 0

    for question in questions:
        answer = answers.get(question.id)
        if answer is None:
            continue

        if question.kind == SINGLE and isinstance(answer, str):
            option = question.find_option(answer)
            if option:
                total_score += option.points
            else:
                logger.debug(f"Ignoring unknown value {answer!r} for {question.id}")
        elif question.kind == MULTIPLE and isinstance(answer, (list, tuple, set, frozenset)):
            for value in answer:
                option = question.find_option(value)
                if option:
                    total_score += option.points

    return total_score


def get_recommendation(score: int) -> RecommendationBand:
    """
    Map a score to its recommendation band.

    Args:
        score: Assessment score

    Returns:
        Memory care at 7 and above, both from 3 to 6, assisted living below 3
    """
    if score >= MEMORY_CARE_MIN:
        return RECOMMENDATION_BANDS[MEMORY_CARE]
    elif score >= BOTH_MIN:
        return RECOMMENDATION_BANDS[BOTH]
    else:
        return RECOMMENDATION_BANDS[ASSISTED_LIVING]


def evaluate_assessment(answers: AssessmentAnswers) -> ScoreResult:
    """Score answers and attach the matching recommendation band."""
    score = calculate_score(answers)
    return ScoreResult(total_score=score, band=get_recommendation(score))
