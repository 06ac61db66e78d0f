"""
Admin forms using Flask-WTF.
Validate the shape of admin JSON payloads.
"""

from flask_wtf import FlaskForm
from wtforms import StringField, IntegerField, TextAreaField
from wtforms.validators import DataRequired, Optional, Length, NumberRange


class AdminCancelForm(FlaskForm):
    """Administrative cancellation: reason mandatory."""

    class Meta:
        csrf = False

    reason = StringField('Reason', validators=[
        DataRequired(message='A cancellation reason is required'),
        Length(max=255)
    ])

    notes = TextAreaField('Notes', validators=[
        Optional(),
        Length(max=1000)
    ])


class SpaceForm(FlaskForm):
    """New space. capacity >= min_capacity is checked by the model."""

    class Meta:
        csrf = False

    name = StringField('Name', validators=[
        DataRequired(message='Name is required'),
        Length(max=120)
    ])

    space_type = StringField('Type', validators=[
        Optional(),
        Length(max=50)
    ], default='room')

    capacity = IntegerField('Capacity', validators=[
        DataRequired(message='Capacity is required'),
        NumberRange(min=1)
    ])

    min_capacity = IntegerField('Minimum capacity', validators=[
        Optional(),
        NumberRange(min=1)
    ], default=1)

    floor_id = IntegerField('Floor', validators=[Optional()])

    description = TextAreaField('Description', validators=[
        Optional(),
        Length(max=1000)
    ])


class UnavailabilityForm(FlaskForm):
    """Maintenance window. end_time empty means open-ended."""

    class Meta:
        csrf = False

    reason = StringField('Reason', validators=[
        DataRequired(message='A reason is required'),
        Length(max=255)
    ])

    start_time = StringField('Start', validators=[
        DataRequired(message='start_time is required')
    ])

    end_time = StringField('End', validators=[Optional()])


class SpaceUpdateForm(FlaskForm):
    """Partial space edit. Only keys present in the body are applied."""

    class Meta:
        csrf = False

    name = StringField('Name', validators=[Optional(), Length(max=120)])

    space_type = StringField('Type', validators=[Optional(), Length(max=50)])

    capacity = IntegerField('Capacity', validators=[
        Optional(),
        NumberRange(min=1)
    ])

    min_capacity = IntegerField('Minimum capacity', validators=[
        Optional(),
        NumberRange(min=1)
    ])

    floor_id = IntegerField('Floor', validators=[Optional()])

    description = TextAreaField('Description', validators=[
        Optional(),
        Length(max=1000)
    ])


class FloorForm(FlaskForm):
    """New floor."""

    class Meta:
        csrf = False

    name = StringField('Name', validators=[
        DataRequired(message='Name is required'),
        Length(max=120)
    ])

    building = StringField('Building', validators=[
        Optional(),
        Length(max=120)
    ])


class FloorUpdateForm(FlaskForm):
    """Partial floor edit."""

    class Meta:
        csrf = False

    name = StringField('Name', validators=[Optional(), Length(max=120)])

    building = StringField('Building', validators=[
        Optional(),
        Length(max=120)
    ])
