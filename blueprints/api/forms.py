"""
Reservation forms using Flask-WTF.
Validate the shape of JSON payloads; booking rules live in the models.
"""

from flask_wtf import FlaskForm
from wtforms import StringField, IntegerField, SelectField
from wtforms.validators import DataRequired, Optional, Length, NumberRange


class ReservationForm(FlaskForm):
    """Booking request. group_size is read from the raw payload."""

    class Meta:
        csrf = False

    space_id = IntegerField('Space', validators=[
        DataRequired(message='space_id is required'),
        NumberRange(min=1)
    ])

    start_time = StringField('Start', validators=[
        DataRequired(message='start_time is required')
    ])

    end_time = StringField('End', validators=[
        DataRequired(message='end_time is required')
    ])

    type = SelectField('Type', choices=[
        ('individual', 'Individual'),
        ('group', 'Group')
    ], default='individual')

    notes = StringField('Notes', validators=[
        Optional(),
        Length(max=1000)
    ])
