"""
Example form used by the demo and tests.

Builds a small registration form with two pages, a repeated label,
untidy whitespace, an unlabeled section, and a question group nested
three levels deep.
"""
from form_i18n.model import Schema, Page, Section, Question, AnswerOption

EXAMPLE_FORM_UUID = "c7e2a1d4-5b3f-4e8a-9d61-2f0b8c4e7a15"


def _yes_no() -> list:
    return [AnswerOption(label="Yes", concept="1065AAAA"), AnswerOption(label="No", concept="1066AAAA")]


def build_example_registration_form(uuid: str = EXAMPLE_FORM_UUID) -> Schema:
    schema = Schema(uuid=uuid, name="Patient Registration")

    demographics = Section(
        label="Demographics",
        questions=[
            Question(id="givenName", label="First  Name"),
            Question(id="familyName", label=" Family name "),
            Question(
                id="sex",
                label="Sex",
                answers=[AnswerOption(label="Male", concept="1534AAAA"), AnswerOption(label="Female", concept="1535AAAA")],
            ),
        ],
    )

    # question group: contact -> phone -> consent
    contact = Section(
        label="Contact details",
        questions=[
            Question(
                id="contactGroup",
                label="Contact",
                questions=[
                    Question(
                        id="phone",
                        label="Phone number",
                        questions=[
                            Question(id="smsConsent", label="May we send SMS reminders?", answers=_yes_no()),
                        ],
                    ),
                ],
            ),
        ],
    )

    history = Section(
        label=None,
        questions=[
            Question(id="allergies", label="Known allergies?", answers=_yes_no()),
            Question(id="notes", label=None),
        ],
    )

    schema.pages = [
        Page(label="Registration", sections=[demographics, contact]),
        Page(label="Medical\thistory", sections=[history]),
    ]
    return schema
