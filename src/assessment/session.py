"""Assessment session state and persistence.

The scoring and matching functions are stateless. A caller that walks a user
through the questionnaire keeps an ``AssessmentSession`` and persists it
explicitly with ``SessionStore.save`` / ``load`` / ``clear``.
"""
import logging
from typing import Dict, List, Optional, Union

import duckdb
from pydantic import BaseModel, Field, ValidationError

from src.assessment.questions import ASSESSMENT_QUESTIONS
from src.assessment.scoring import calculate_score, get_recommendation
from src.config import settings
from src.match.matcher import match_communities
from src.models import AssessmentQuestion, Community, MatchedCommunity, RecommendationBand

logger = logging.getLogger(__name__)


class AssessmentSession(BaseModel):
    """Progress and results of one user's assessment."""

    current_question_index: int = 0
    answers: Dict[str, Union[str, List[str]]] = Field(default_factory=dict)
    is_complete: bool = False
    score: int = 0
    recommendation: Optional[RecommendationBand] = None
    matched_communities: List[MatchedCommunity] = Field(default_factory=list)
    user_zip: Optional[str] = None

    @property
    def current_question(self) -> Optional[AssessmentQuestion]:
        if 0 <= self.current_question_index < len(ASSESSMENT_QUESTIONS):
            return ASSESSMENT_QUESTIONS[self.current_question_index]
        return None

    def set_answer(self, question_id: str, answer: Union[str, List[str]]):
        self.answers[question_id] = answer

    def next_question(self, communities: Optional[List[Community]] = None) -> bool:
        """
        Advance to the next question, completing the assessment after the last one.

        Does nothing while the current question is unanswered.

        Returns:
            True if the session moved forward or completed
        """
        question = self.current_question
        if question is None or not self.answers.get(question.id):
            return False

        if self.current_question_index < len(ASSESSMENT_QUESTIONS) - 1:
            self.current_question_index += 1
        else:
            self.complete(communities or [])
        return True

    def prev_question(self):
        if self.current_question_index > 0:
            self.current_question_index -= 1

    def go_to_question(self, index: int):
        if 0 <= index < len(ASSESSMENT_QUESTIONS):
            self.current_question_index = index

    def complete(
        self,
        communities: List[Community],
        user_zip: Optional[str] = None,
        top_n: Optional[int] = None
    ):
        """Score the answers and match communities."""
        if user_zip is not None:
            self.user_zip = user_zip

        self.score = calculate_score(self.answers)
        self.recommendation = get_recommendation(self.score)
        self.matched_communities = match_communities(
            communities,
            self.recommendation,
            answers=self.answers,
            user_zip=self.user_zip,
            top_n=top_n,
        )
        self.is_complete = True
        logger.info(
            f"Assessment complete: score={self.score}, "
            f"recommendation={self.recommendation.recommendation}, "
            f"matches={len(self.matched_communities)}"
        )

    def reset(self):
        self.current_question_index = 0
        self.answers = {}
        self.is_complete = False
        self.score = 0
        self.recommendation = None
        self.matched_communities = []
        self.user_zip = None


class SessionStore:
    """DuckDB-backed storage for assessment sessions keyed by session id."""

    def __init__(self, db_path: Optional[str] = None, table: Optional[str] = None):
        self.db_path = db_path or settings.duckdb_path
        self.table = table or settings.session_table
        self._init_table()

    def _init_table(self):
        conn = duckdb.connect(self.db_path)
        conn.execute(f"""
            CREATE TABLE IF NOT EXISTS {self.table} (
                session_id VARCHAR PRIMARY KEY,
                state_json VARCHAR,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        conn.close()

    def save(self, session_id: str, session: AssessmentSession):
        conn = duckdb.connect(self.db_path)
        conn.execute(f"""
            INSERT OR REPLACE INTO {self.table} (session_id, state_json, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
        """, [session_id, session.model_dump_json()])
        conn.close()
        logger.debug(f"Saved assessment session {session_id}")

    def load(self, session_id: str) -> AssessmentSession:
        """
        Load a saved session.

        Returns:
            The saved session, or a fresh one when nothing usable is stored
        """
        conn = duckdb.connect(self.db_path)
        row = conn.execute(
            f"SELECT state_json FROM {self.table} WHERE session_id = ?",
            [session_id]
        ).fetchone()
        conn.close()

        if not row or not row[0]:
            return AssessmentSession()

        try:
            return AssessmentSession.model_validate_json(row[0])
        except ValidationError as e:
            logger.error(f"Failed to load assessment session {session_id}: {e}")
            return AssessmentSession()

    def clear(self, session_id: str):
        conn = duckdb.connect(self.db_path)
        conn.execute(f"DELETE FROM {self.table} WHERE session_id = ?", [session_id])
        conn.close()
        logger.debug(f"Cleared assessment session {session_id}")
