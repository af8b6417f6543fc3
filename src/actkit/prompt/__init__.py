"""Prompt requests, construction functions and the responder slot."""

from actkit.prompt.api import (
    PromptAPI,
    confirm,
    form,
    multi_select,
    number,
    password,
    select,
    step_form,
    text,
    wait_for_enter,
    wait_for_key,
)
from actkit.prompt.requests import ArgMapping, Choice, FormField, FormPage, Request
from actkit.prompt.responder import (
    clear_responder,
    get_responder,
    resolve,
    set_responder,
)

__all__ = [
    "ArgMapping",
    "Choice",
    "FormField",
    "FormPage",
    "PromptAPI",
    "Request",
    "clear_responder",
    "confirm",
    "form",
    "get_responder",
    "multi_select",
    "number",
    "password",
    "resolve",
    "select",
    "set_responder",
    "step_form",
    "text",
    "wait_for_enter",
    "wait_for_key",
]
