# SPDX-License-Identifier: AGPL-3.0-only

"""
Input validation schemas using Marshmallow for API endpoints.
"""
from marshmallow import Schema, fields, validate, validates, ValidationError, EXCLUDE


class AskRequestSchema(Schema):
    """Validation schema for legal question requests."""

    class Meta:
        unknown = EXCLUDE

    message = fields.Str(
        required=True,
        validate=validate.Length(min=1, max=4000),
        error_messages={
            'required': 'Message field is required',
            'invalid': 'Message must be a string'
        }
    )
    document_context = fields.Str(
        required=False,
        allow_none=True,
        data_key='documentContext',
        load_default='',
        validate=validate.Length(max=50000),
        error_messages={'invalid': 'Document context must be a string'}
    )

    @validates('message')
    def validate_message(self, value, **kwargs):
        if not value.strip():
            raise ValidationError('Message must not be blank')
