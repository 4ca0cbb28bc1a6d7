import logging

from diary.errors import NotFoundError, ValidationError
from diary.service.catalog import QUESTION_PROMPTS, practice_catalog, question_prompts
from diary.service.clock import utc_now_iso
from diary.service.schemas import (
    AnswerQuery,
    CreateAnswerRequest,
    CreatePracticeRequest,
    ListQuery,
    UpdateAnswerRequest,
    UpdateSettingsRequest,
    validate,
)
from diary.service.view_state import TimelineViewState, build_timeline, filter_answers

logger = logging.getLogger(__name__)


class JournalService:
    """Reflection answers, breathing practices, settings and the timeline."""

    def __init__(self, repository):
        self.repository = repository

    def list_answers(self, user_id, args=None):
        query = validate(AnswerQuery, args)
        rows = self.repository.fetch_answers(
            user_id,
            answer_type=query.type,
            search=query.search,
            limit=query.limit,
            offset=query.offset,
        )
        return [dict(row) for row in rows]

    def create_answer(self, user_id, payload):
        request = validate(CreateAnswerRequest, payload)
        row = self.repository.create_answer(
            user_id,
            request.type,
            request.question_1,
            request.question_2,
            request.question_3,
            utc_now_iso(),
        )
        logger.info("answer created", extra={"user_id": user_id, "answer_id": row["id"]})
        return dict(row)

    def update_answer(self, user_id, answer_id, payload):
        patch = validate(UpdateAnswerRequest, payload)
        row = self.repository.update_answer(user_id, answer_id, patch.changes(), utc_now_iso())
        if row is None:
            raise NotFoundError("Answer not found")
        return dict(row)

    def delete_answer(self, user_id, answer_id):
        if not self.repository.delete_answer(user_id, answer_id):
            raise NotFoundError("Answer not found")
        logger.info("answer deleted", extra={"user_id": user_id, "answer_id": answer_id})

    def list_practices(self, user_id, args=None):
        query = validate(ListQuery, args)
        return [dict(row) for row in self.repository.fetch_practices(user_id, limit=query.limit)]

    def create_practice(self, user_id, payload):
        request = validate(CreatePracticeRequest, payload)
        row = self.repository.create_practice(
            user_id, request.type, request.duration_seconds, utc_now_iso()
        )
        logger.info(
            "practice logged",
            extra={"user_id": user_id, "practice_id": row["id"], "duration_seconds": request.duration_seconds},
        )
        return dict(row)

    def delete_practice(self, user_id, practice_id):
        if not self.repository.delete_practice(user_id, practice_id):
            raise NotFoundError("Practice not found")
        logger.info("practice deleted", extra={"user_id": user_id, "practice_id": practice_id})

    def practice_catalog(self):
        return practice_catalog()

    def question_prompts(self, answer_type=None):
        if answer_type and answer_type not in QUESTION_PROMPTS:
            raise ValidationError(
                "invalid request",
                details=[{"field": "type", "message": "must be one of morning, evening"}],
            )
        return question_prompts(answer_type or None)

    def get_settings(self, user_id):
        row = self.repository.fetch_settings(user_id)
        if row is None:
            row = self.repository.create_default_settings(user_id, utc_now_iso())
            logger.info("default settings created", extra={"user_id": user_id})
        return dict(row)

    def update_settings(self, user_id, payload):
        patch = validate(UpdateSettingsRequest, payload)
        self.get_settings(user_id)
        row = self.repository.update_settings(user_id, patch.changes(), utc_now_iso())
        return dict(row)

    def timeline(self, user_id, args=None):
        state = TimelineViewState.from_args(args or {})
        answers = [
            dict(row)
            for row in self.repository.fetch_answers(user_id, search=state.search or None)
        ]
        practices = [dict(row) for row in self.repository.fetch_practices(user_id)]
        return build_timeline(answers, practices, state)

    def export_timeline(self, user_id, args=None):
        """Point-in-time snapshot of the filtered answers plus every practice."""
        state = TimelineViewState.from_args(args or {})
        answers = [
            dict(row)
            for row in self.repository.fetch_answers(user_id, search=state.search or None)
        ]
        practices = [dict(row) for row in self.repository.fetch_practices(user_id)]
        logger.info("timeline exported", extra={"user_id": user_id})
        return {
            "answers": filter_answers(answers, state),
            "practices": practices,
            "exported_at": utc_now_iso(),
        }
