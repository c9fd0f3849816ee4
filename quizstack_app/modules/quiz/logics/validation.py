# File: quizstack_app/modules/quiz/logics/validation.py
"""
Validation of admin-authored quiz JSON.

Payloads use the camelCase keys of the authoring format::

    {
      "title": "JavaScript Basics",
      "category": "JavaScript",
      "questions": [
        {"questionText": "...", "options": ["a", "b"], "correctAnswer": "a"}
      ]
    }
"""

import json
from typing import Any, Dict, Mapping, Union

from marshmallow import EXCLUDE, Schema, ValidationError as SchemaError, fields, validate, validates_schema

from quizstack_app.core.error_handlers import ValidationError
from ..schemas import QuestionDTO


class QuestionSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    question_text = fields.Str(
        data_key='questionText', required=True, validate=validate.Length(min=1),
        error_messages={'required': 'All questions must have questionText'},
    )
    options = fields.List(
        fields.Str(validate=validate.Length(min=1)), required=True,
        validate=validate.Length(min=2, error='Each question needs at least 2 options'),
    )
    correct_answer = fields.Str(data_key='correctAnswer', required=True)
    explanation = fields.Str(load_default=None, allow_none=True)
    points = fields.Int(load_default=1, validate=validate.Range(min=1, error='points must be positive'))
    original_question_source = fields.Str(data_key='originalQuestionSource', load_default=None, allow_none=True)

    @validates_schema
    def check_answer(self, data, **kwargs):
        options = data.get('options') or []
        if len(set(options)) != len(options):
            raise SchemaError('Options must be distinct', field_name='options')
        if data.get('correct_answer') not in options:
            raise SchemaError('correctAnswer must match one of the options', field_name='correctAnswer')


class QuizPayloadSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    title = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    category = fields.Str(required=True, validate=validate.Length(min=1, max=120))
    description = fields.Str(load_default=None, allow_none=True)
    authorized_users = fields.List(fields.Str(), data_key='authorizedUsers', load_default=list)
    questions = fields.List(
        fields.Nested(QuestionSchema), required=True,
        validate=validate.Length(min=1, error='At least one question is required'),
    )


class QuestionListSchema(Schema):
    """Body of an append request: only the new questions."""

    class Meta:
        unknown = EXCLUDE

    questions = fields.List(
        fields.Nested(QuestionSchema), required=True,
        validate=validate.Length(min=1, error='At least one question is required'),
    )


def _coerce(raw: Union[str, bytes, Mapping[str, Any], None]) -> Mapping[str, Any]:
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError as exc:
            raise ValidationError(f'Invalid JSON: {exc}') from exc
    if not isinstance(raw, Mapping):
        raise ValidationError('Expected a JSON object')
    return raw


def _load(schema: Schema, raw) -> Dict[str, Any]:
    try:
        return schema.load(_coerce(raw))
    except SchemaError as exc:
        raise ValidationError('Invalid quiz data', errors=exc.messages) from exc


def question_from_data(data: Mapping[str, Any], question_id: int = 0) -> QuestionDTO:
    return QuestionDTO(
        id=question_id,
        question_text=data['question_text'],
        options=list(data['options']),
        correct_answer=data['correct_answer'],
        explanation=data.get('explanation'),
        points=data.get('points', 1),
        original_question_source=data.get('original_question_source'),
    )


def validate_question_patch(raw, question_id: int = 0) -> QuestionDTO:
    """Parse one edited question; ``raw`` is the JSON text or an already decoded object."""
    return question_from_data(_load(QuestionSchema(), raw), question_id)


def validate_quiz_payload(raw) -> Dict[str, Any]:
    """Parse a whole quiz. Questions come back as snake_case dicts."""
    return _load(QuizPayloadSchema(), raw)


def validate_question_list(raw) -> list:
    return _load(QuestionListSchema(), raw)['questions']
