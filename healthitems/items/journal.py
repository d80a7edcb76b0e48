"""Free-form notes, journal entries, messages, comments and questionnaires."""

from uuid import UUID

from pydantic import Field

from healthitems.domain.base import NonBlankStr, XmlModel
from healthitems.domain.codes import CodableValue, CodedValue
from healthitems.domain.dates import ApproximateDateTime, HealthServiceDateTime
from healthitems.domain.people import PersonItem
from healthitems.domain.ratings import Mood, RelativeRating, Wellbeing
from healthitems.items.base import HealthRecordItem, summarize
from healthitems.items.registry import register_item_type

ANNOTATION_SUMMARY_LENGTH = 50


@register_item_type
class Annotation(HealthRecordItem):
    TYPE_ID = UUID("7AB3E662-CC5B-4BE2-BF38-78F8AAD5B161")
    TYPE_NAME = "Annotation"
    ROOT_ELEMENT = "annotation"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    content: NonBlankStr | None = None
    author: PersonItem | None = None
    classification: NonBlankStr | None = None
    index: NonBlankStr | None = None
    version: NonBlankStr | None = None

    def __str__(self) -> str:
        if self.content is not None:
            if len(self.content) > ANNOTATION_SUMMARY_LENGTH:
                return self.content[:ANNOTATION_SUMMARY_LENGTH] + "..."
            return self.content
        if self.author is not None:
            return f"Annotation by {self.author}"
        return f"Annotation on {self.when}"


@register_item_type
class HealthJournalEntry(HealthRecordItem):
    TYPE_ID = UUID("21d75546-8717-4deb-8b17-a57f48917790")
    TYPE_NAME = "Health Journal Entry"
    ROOT_ELEMENT = "health-journal-entry"

    when: ApproximateDateTime
    content: NonBlankStr
    category: CodableValue | None = None

    def __str__(self) -> str:
        if self.category is None:
            return self.content
        return f"{self.content} ({self.category})"


@register_item_type
class Emotion(HealthRecordItem):
    """Mood, stress and sense of wellbeing on five-point scales."""

    TYPE_ID = UUID("4b7971d6-e427-427d-bf2c-2fbcf76606b3")
    TYPE_NAME = "Emotion"
    ROOT_ELEMENT = "emotion"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    mood: Mood | None = None
    stress: RelativeRating | None = None
    wellbeing: Wellbeing | None = None

    def __str__(self) -> str:
        return summarize(
            f"mood {self.mood.value}" if self.mood is not None else None,
            f"stress {self.stress.value}" if self.stress is not None else None,
            f"wellbeing {self.wellbeing.value}" if self.wellbeing is not None else None,
        )


@register_item_type
class QuestionAnswer(HealthRecordItem):
    TYPE_ID = UUID("55d33791-58de-4cae-8c78-819e12ba5059")
    TYPE_NAME = "Question Answer"
    ROOT_ELEMENT = "question-answer"

    when: HealthServiceDateTime
    question: CodableValue
    answer_choice: list[CodableValue] = Field(default_factory=list)
    answer: list[CodableValue] = Field(default_factory=list)

    def __str__(self) -> str:
        if not self.answer:
            return str(self.question)
        return f"{self.question}: {summarize(*self.answer)}"


@register_item_type
class Comment(HealthRecordItem):
    TYPE_ID = UUID("9f4e0fcd-10d7-416d-855a-90514ce2016b")
    TYPE_NAME = "Comment"
    ROOT_ELEMENT = "comment"

    when: ApproximateDateTime
    content: NonBlankStr
    category: CodableValue | None = None

    def __str__(self) -> str:
        if self.category is None:
            return self.content
        return f"{self.content} ({self.category})"


class MessageHeaderItem(XmlModel):
    name: NonBlankStr
    value: str

    def __str__(self) -> str:
        return f"{self.name}: {self.value}"


class MessageAttachment(XmlModel):
    name: NonBlankStr
    blob_name: NonBlankStr
    inline_display: bool
    content_id: NonBlankStr | None = None

    def __str__(self) -> str:
        return self.name


@register_item_type
class Message(HealthRecordItem):
    """
    An e-mail or other message stored with the record.

    The message bodies and attachments live in named blobs of the item; only
    their names are part of the XML.
    """

    TYPE_ID = UUID("72dc49e1-1486-4634-b651-ef560ed051e5")
    TYPE_NAME = "Message"
    ROOT_ELEMENT = "message"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    headers: list[MessageHeaderItem] = Field(default_factory=list)
    size: int = Field(ge=1, description="bytes")
    summary: NonBlankStr | None = None
    html_blob_name: NonBlankStr | None = None
    text_blob_name: NonBlankStr | None = None
    attachments: list[MessageAttachment] = Field(default_factory=list)

    def header(self, name: str) -> str | None:
        """The first header called `name`, ignoring case."""
        wanted = name.casefold()
        return next((item.value for item in self.headers if item.name.casefold() == wanted), None)

    @property
    def subject(self) -> str | None:
        return self.header("Subject")

    @property
    def sender(self) -> str | None:
        return self.header("From")

    def __str__(self) -> str:
        return summarize(self.when, self.sender, self.subject)


class Assessment(XmlModel):
    name: CodableValue
    value: CodableValue
    group: CodableValue | None = None

    def __str__(self) -> str:
        return f"{self.name}: {self.value}"


@register_item_type
class HealthAssessment(HealthRecordItem):
    """Results of a questionnaire or risk assessment."""

    TYPE_ID = UUID("58fd8ac4-6c47-41a3-94b2-478401f0e26c")
    TYPE_NAME = "Health Assessment"
    ROOT_ELEMENT = "health-assessment"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    name: NonBlankStr
    category: CodableValue
    result: list[Assessment] = Field(min_length=1)

    def __str__(self) -> str:
        return summarize(*self.result, separator="; ")


@register_item_type
class GroupMembershipActivity(HealthRecordItem):
    TYPE_ID = UUID("e75fa095-31ed-4b30-b5f7-463963b5e734")
    TYPE_NAME = "Group Membership Activity"
    ROOT_ELEMENT = "group-membership-activity"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    activity: CodedValue
    activity_info: NonBlankStr | None = None

    def __str__(self) -> str:
        return summarize(self.activity.value, self.activity_info)
