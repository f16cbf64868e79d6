"""Reply templates for the Contoso Cafe bot.

Fixed texts live here so the dialog and the router read as flow, not copy.
"""

from __future__ import annotations

BOT_NAME = "Contoso Cafe bot"

WELCOME_TEXT = f"Hello, I'm the {BOT_NAME}."
WELCOME_FOLLOW_UP = "How can I help you? (Type `book a table` to set up a table reservation.)"
HELP_TEXT = "Type `book a table` to make a reservation."
WHO_ARE_YOU_TEXT = f"Hi, I'm the {BOT_NAME}."
NOT_UNDERSTOOD_TEXT = "I'm sorry, I don't understand."
CANCELLED_TEXT = "Sure.. Let's start over"
TURN_ERROR_TEXT = "Sorry, it looks like something went wrong!"
TURN_ERROR_TRACE = "ContosoCafeBot exception"
QNA_FAILED_TRACE = "Call to the QnA Maker service failed."

# Reservation dialog
LOCATION_PROMPT = "Did you have a location in mind?"
LOCATION_RETRY = "Please select one of our locations."
DATE_TIME_PROMPT = "When will the reservation be for?"
DATE_TIME_RETRY = (
    "Please enter a date and time for the reservation.\n\n"
    "We take reservations within two weeks of today, and evenings only."
)
GUESTS_PROMPT = "How many guests?"
GUESTS_RETRY = (
    "Please enter the number of people that the reservation is for.\n\n"
    "We can take reservations for parties of up to {maximum}."
)
NAME_PROMPT = "What name should I book the table under?"
NAME_RETRY = "Please enter a name for the reservation."
CONFIRM_PROMPT = (
    "Ok. Should I go ahead and book a table "
    "for {guests} at {location} for {date_time} for {name}?"
)
CONFIRM_RETRY = "I'm sorry, should I make the reservation for you? Please enter `yes` or `no`."

BOOKED_TEXT = "Your table is booked. Reference number: #{reference}"
DECLINED_TEXT = "Okay. We have canceled the reservation."

SEED_TRACE = "Found '{value}' for {field}."

ECHO_TEXT = "Turn {turn}: You sent '{text}'"


def guests_retry(maximum: int) -> str:
    return GUESTS_RETRY.format(maximum=maximum)


def confirm_prompt(guests: int, location: str, date_time: str, name: str) -> str:
    return CONFIRM_PROMPT.format(
        guests=guests, location=location, date_time=date_time, name=name
    )


def booked_text(reference: str) -> str:
    return BOOKED_TEXT.format(reference=reference.lstrip("#"))


def seed_trace(value: object, field: str) -> str:
    return SEED_TRACE.format(value=value, field=field)

