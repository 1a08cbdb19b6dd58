import json
import os

from flask import current_app
from flask_wtf import FlaskForm
from flask_wtf.file import FileAllowed, FileField
from wtforms import Field, SelectMultipleField, StringField, TextAreaField, widgets
from wtforms.validators import DataRequired, Length, Optional, ValidationError

from services.declarations import AI_TOOLS, DeclarationSubmission

REQUIRED_MESSAGE = "All fields except screenshot are required"
TOOLS_FORMAT_MESSAGE = "Invalid AI tools format"
IMAGE_TYPE_MESSAGE = "Only image files are allowed (jpeg, jpg, png, gif, webp)"
FILE_TOO_LARGE_MESSAGE = "File too large"

IMAGE_EXTENSIONS = ("jpeg", "jpg", "png", "gif", "webp")
IMAGE_MIMETYPES = frozenset(f"image/{ext}" for ext in IMAGE_EXTENSIONS)


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class ToolListField(Field):
    """Parses a JSON array of tool names posted as a single form value."""

    def process_formdata(self, valuelist):
        self.data = []
        if not valuelist or not (valuelist[0] or "").strip():
            return
        try:
            parsed = json.loads(valuelist[0])
        except ValueError:
            raise ValueError(TOOLS_FORMAT_MESSAGE)
        if not isinstance(parsed, list) or not all(isinstance(tool, str) for tool in parsed):
            raise ValueError(TOOLS_FORMAT_MESSAGE)
        self.data = [tool.strip() for tool in parsed if tool.strip()]

    def _value(self):
        return json.dumps(self.data or [])


class MultiCheckboxField(SelectMultipleField):
    widget = widgets.ListWidget(prefix_label=False)
    option_widget = widgets.CheckboxInput()


class _DeclarationFields(FlaskForm):
    """Text and screenshot fields shared by both declaration forms.

    Subclasses add the tool input and their own ``to_submission()``.
    """

    userName = StringField(
        "Your name",
        filters=[_strip],
        validators=[DataRequired(message=REQUIRED_MESSAGE), Length(max=255)],
    )
    assignmentTitle = StringField(
        "Assignment title",
        filters=[_strip],
        validators=[DataRequired(message=REQUIRED_MESSAGE), Length(max=255)],
    )
    usagePurpose = TextAreaField(
        "Purpose of AI usage",
        filters=[_strip],
        validators=[DataRequired(message=REQUIRED_MESSAGE)],
        render_kw={"rows": 4, "placeholder": "How did the tool help you with this assignment?"},
    )
    aiContent = TextAreaField(
        "AI-generated content",
        filters=[_strip],
        validators=[DataRequired(message=REQUIRED_MESSAGE)],
        render_kw={"rows": 4, "placeholder": "Describe or paste what the tool produced."},
    )
    screenshot = FileField(
        "Screenshot (optional)",
        validators=[Optional(), FileAllowed(IMAGE_EXTENSIONS, IMAGE_TYPE_MESSAGE)],
        render_kw={"accept": "image/*"},
    )

    def validate_screenshot(self, field):
        file_storage = field.data
        if not file_storage:
            return
        if (file_storage.mimetype or "").lower() not in IMAGE_MIMETYPES:
            raise ValidationError(IMAGE_TYPE_MESSAGE)
        stream = file_storage.stream
        stream.seek(0, os.SEEK_END)
        size = stream.tell()
        stream.seek(0)
        if size > current_app.config["MAX_SCREENSHOT_SIZE"]:
            raise ValidationError(FILE_TOO_LARGE_MESSAGE)

    def first_error(self):
        for form_field in self:
            if form_field.errors:
                return form_field.errors[0]
        return REQUIRED_MESSAGE

    def _submission(self, tools) -> DeclarationSubmission:
        return DeclarationSubmission(
            user_name=self.userName.data,
            assignment_title=self.assignmentTitle.data,
            tools=tools,
            usage_purpose=self.usagePurpose.data,
            ai_content=self.aiContent.data,
            screenshot=self.screenshot.data or None,
        )


class DeclarationForm(_DeclarationFields):
    """Multipart body accepted by ``POST /api/declarations``."""

    class Meta:
        csrf = False

    aiTools = ToolListField("AI tools")

    def validate_aiTools(self, field):
        if field.process_errors:
            return
        if not field.raw_data or not (field.raw_data[0] or "").strip():
            raise ValidationError(REQUIRED_MESSAGE)
        if not field.data:
            raise ValidationError(TOOLS_FORMAT_MESSAGE)

    def to_submission(self) -> DeclarationSubmission:
        return self._submission(list(self.aiTools.data))


class DeclarationEntryForm(_DeclarationFields):
    """The HTML form: predefined tools as checkboxes plus one custom tool."""

    aiTools = MultiCheckboxField(
        "AI tools used",
        choices=[(tool, tool) for tool in AI_TOOLS],
        validators=[Optional()],
    )
    customTool = StringField(
        "Other tool",
        filters=[_strip],
        validators=[Length(max=255)],
        render_kw={"placeholder": "e.g. Perplexity"},
    )

    def validate_customTool(self, field):
        if not self.tool_list():
            raise ValidationError("Please select at least one AI tool or enter a custom tool")

    def tool_list(self):
        tools = [tool.strip() for tool in (self.aiTools.data or []) if tool.strip()]
        if self.customTool.data:
            tools.append(self.customTool.data)
        return tools

    def to_submission(self) -> DeclarationSubmission:
        return self._submission(self.tool_list())
