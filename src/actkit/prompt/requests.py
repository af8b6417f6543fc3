"""Prompt request model.

A closed set of frozen request types, each tagged by ``type``. Responders
dispatch on the tag; nothing here resolves a value.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

Validator = Callable[[Any], "bool | str"]
TextFormat = Union[
    Literal["lowercase", "uppercase", "trim", "kebab-case"], Callable[[str], str]
]


@dataclass(frozen=True)
class ArgMapping:
    """Association between a prompt and a CLI flag or position."""

    arg: str | None = None
    arg_short: str | None = None
    arg_index: int | None = None

    def __bool__(self) -> bool:
        return bool(self.arg or self.arg_short or self.arg_index is not None)

    @property
    def name(self) -> str:
        """Raw name used in validation messages."""
        if self.arg:
            return self.arg
        if self.arg_short:
            return self.arg_short
        return f"position {self.arg_index}"

    @property
    def label(self) -> str:
        """Human form used in 'missing argument' messages."""
        if self.arg:
            return f"--{self.arg}"
        if self.arg_short:
            return f"-{self.arg_short}"
        if self.arg_index is not None:
            return f"argument at position {self.arg_index}"
        return "argument"


@dataclass(frozen=True)
class Choice:
    label: str
    value: Any
    description: str = ""


def normalize_choices(choices: list[Any] | tuple[Any, ...]) -> tuple[Choice, ...]:
    """Turn raw values or label/value dicts into Choice objects, keeping order."""
    normalized: list[Choice] = []
    for item in choices:
        if isinstance(item, Choice):
            normalized.append(item)
        elif isinstance(item, dict) and "label" in item and "value" in item:
            normalized.append(Choice(
                label=str(item["label"]),
                value=item["value"],
                description=item.get("description", "") or "",
            ))
        else:
            normalized.append(Choice(label=str(item), value=item))
    return tuple(normalized)


def apply_text_format(
    value: str,
    fmt: TextFormat | None = None,
    prefix: str = "",
    suffix: str = "",
) -> str:
    """Wrap with prefix/suffix, then apply the submit-time format rule."""
    value = f"{prefix}{value}{suffix}"
    if fmt is None:
        return value
    if callable(fmt):
        return fmt(value)
    if fmt == "lowercase":
        return value.lower()
    if fmt == "uppercase":
        return value.upper()
    if fmt == "trim":
        return value.strip()
    if fmt == "kebab-case":
        value = re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", value.strip())
        value = re.sub(r"[\s_]+", "-", value)
        return re.sub(r"-{2,}", "-", value).lower().strip("-")
    raise ValueError(f"Unknown text format: {fmt!r}")


# ── Single-value requests ────────────────────────────────────


@dataclass(frozen=True)
class TextRequest:
    message: str
    default: str | None = None
    placeholder: str = ""
    validate: Validator | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: re.Pattern | None = None
    format: TextFormat | None = None
    prefix: str = ""
    suffix: str = ""
    multiline: bool = False
    required: bool = False
    mapping: ArgMapping = field(default_factory=ArgMapping)
    type: Literal["text"] = "text"


@dataclass(frozen=True)
class NumberRequest:
    message: str
    default: float | None = None
    min: float | None = None
    max: float | None = None
    integer: bool = False
    required: bool = True
    validate: Validator | None = None
    mapping: ArgMapping = field(default_factory=ArgMapping)
    type: Literal["number"] = "number"


@dataclass(frozen=True)
class PasswordRequest:
    message: str
    min_length: int | None = None
    validate: Validator | None = None
    mapping: ArgMapping = field(default_factory=ArgMapping)
    type: Literal["password"] = "password"


@dataclass(frozen=True)
class ConfirmRequest:
    message: str
    default: bool | None = None
    mapping: ArgMapping = field(default_factory=ArgMapping)
    type: Literal["confirm"] = "confirm"


@dataclass(frozen=True)
class SelectRequest:
    message: str
    choices: tuple[Choice, ...]
    default: Any = None
    mapping: ArgMapping = field(default_factory=ArgMapping)
    type: Literal["select"] = "select"


@dataclass(frozen=True)
class MultiSelectRequest:
    message: str
    choices: tuple[Choice, ...]
    default: tuple[Any, ...] | None = None
    min: int | None = None
    max: int | None = None
    mapping: ArgMapping = field(default_factory=ArgMapping)
    type: Literal["multi_select"] = "multi_select"


@dataclass(frozen=True)
class WaitForEnterRequest:
    message: str = ""
    type: Literal["wait_for_enter"] = "wait_for_enter"


@dataclass(frozen=True)
class WaitForKeyRequest:
    message: str = ""
    keys: tuple[str, ...] | None = None
    case_insensitive: bool = False
    timeout: float | None = None  # advisory; responders may ignore it
    type: Literal["wait_for_key"] = "wait_for_key"


# ── Forms ────────────────────────────────────────────────────

FieldType = Literal["text", "number", "password", "confirm", "select", "multi_select"]


class FormField(BaseModel):
    """A single field of a form page.

    ``validator`` receives ``(value, values)`` where ``values`` holds every
    field resolved so far, including earlier steps.
    """

    type: FieldType
    message: str
    description: str = ""
    default: Any = None
    required: bool = True
    validator: Callable[..., Any] | None = None
    choices: tuple[Choice, ...] = ()
    min: float | None = None
    max: float | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: re.Pattern | None = None
    format: Any = None
    prefix: str = ""
    suffix: str = ""
    arg: str | None = None
    arg_short: str | None = None
    arg_index: int | None = None

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            if "validate" in data:
                data["validator"] = data.pop("validate")
            if isinstance(data.get("pattern"), str):
                data["pattern"] = re.compile(data["pattern"])
            if "choices" in data:
                data["choices"] = normalize_choices(data["choices"] or [])
        return data

    @model_validator(mode="after")
    def _check_choices(self) -> "FormField":
        if self.type in ("select", "multi_select") and not self.choices:
            raise ValueError(f"{self.type} field requires at least one choice")
        return self

    @property
    def mapping(self) -> ArgMapping:
        return ArgMapping(arg=self.arg, arg_short=self.arg_short, arg_index=self.arg_index)

    def to_request(self, validate: Validator | None = None) -> "Request":
        """Equivalent single-value request; ``validate`` replaces the field validator."""
        common = {"message": self.message, "mapping": self.mapping}
        if self.type == "text":
            return TextRequest(
                default=self.default,
                validate=validate,
                min_length=self.min_length,
                max_length=self.max_length,
                pattern=self.pattern,
                format=self.format,
                prefix=self.prefix,
                suffix=self.suffix,
                required=self.required,
                **common,
            )
        if self.type == "number":
            return NumberRequest(
                default=self.default,
                min=self.min,
                max=self.max,
                required=self.required,
                validate=validate,
                **common,
            )
        if self.type == "password":
            return PasswordRequest(min_length=self.min_length, validate=validate, **common)
        if self.type == "confirm":
            return ConfirmRequest(default=self.default, **common)
        if self.type == "select":
            return SelectRequest(choices=self.choices, default=self.default, **common)
        return MultiSelectRequest(
            choices=self.choices,
            default=tuple(self.default) if self.default is not None else None,
            min=int(self.min) if self.min is not None else None,
            max=int(self.max) if self.max is not None else None,
            **common,
        )


class FormPage(BaseModel):
    """One page (step) of a form; ``validator`` checks the page's values together."""

    title: str = ""
    description: str = ""
    fields: dict[str, FormField] = Field(default_factory=dict)
    submit_label: str = ""
    validator: Callable[..., Any] | None = None

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if isinstance(data, dict) and "validate" in data:
            data = dict(data)
            data["validator"] = data.pop("validate")
        return data


@dataclass(frozen=True)
class FormRequest:
    page: FormPage
    type: Literal["form"] = "form"

    @property
    def message(self) -> str:
        return self.page.title


@dataclass(frozen=True)
class StepFormRequest:
    steps: tuple[FormPage, ...]
    validate: Validator | None = None
    type: Literal["step_form"] = "step_form"

    @property
    def message(self) -> str:
        return self.steps[0].title if self.steps else ""


Request = Union[
    TextRequest,
    NumberRequest,
    PasswordRequest,
    ConfirmRequest,
    SelectRequest,
    MultiSelectRequest,
    WaitForEnterRequest,
    WaitForKeyRequest,
    FormRequest,
    StepFormRequest,
]

REQUEST_TYPES = (
    "text",
    "number",
    "password",
    "confirm",
    "select",
    "multi_select",
    "wait_for_enter",
    "wait_for_key",
    "form",
    "step_form",
)


def check_validator(validate: Callable[..., Any] | None, *args: Any) -> str | None:
    """Run a user validator; return an error message or None when valid."""
    if validate is None:
        return None
    result = validate(*args)
    if result is True or result is None:
        return None
    if isinstance(result, str):
        return result
    return "Invalid value" if result is False else None
