"""WTForms definitions for the account and comment forms."""

from wtforms import Form, PasswordField, StringField, SubmitField, TextAreaField
from wtforms.validators import EqualTo, InputRequired, Length, Regexp

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class LoginForm(Form):
    """Sign in with email and password."""

    email = StringField("Email", validators=[InputRequired(), Length(max=255)])
    password = PasswordField("Password", validators=[InputRequired()])
    submit = SubmitField("Sign in")


class RegisterForm(Form):
    """Create a new profile."""

    display_name = StringField("Display name", validators=[InputRequired(), Length(max=100)])
    email = StringField(
        "Email",
        validators=[
            InputRequired(),
            Length(max=255),
            Regexp(EMAIL_PATTERN, message="Enter a valid email address."),
        ],
    )
    biography = TextAreaField("Biography", validators=[Length(max=2000)])
    password = PasswordField("Password", validators=[InputRequired(), Length(min=8)])
    confirm = PasswordField(
        "Confirm password",
        validators=[InputRequired(), EqualTo("password", message="Passwords must match.")],
    )
    submit = SubmitField("Create account")


class CommentForm(Form):
    """Add a comment to a species.

    Emptiness is checked by the comment service so the message matches the API.
    """

    comment = TextAreaField("Comment", validators=[Length(max=2000)])
    submit = SubmitField("Add Comment")
