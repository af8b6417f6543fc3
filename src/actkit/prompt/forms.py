"""Field-by-field form resolution shared by responders.

A responder subclasses :class:`FormWalker` and implements ``answer`` for
single-value requests; forms and step forms are then walked one field at a
time, with field, page and final validators applied in that order. A failed
validator re-asks when the values involved can be asked again, and raises
otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from actkit.errors import ArgValidationError, FormValidationError
from actkit.prompt.requests import (
    FormField,
    FormPage,
    FormRequest,
    Request,
    StepFormRequest,
    check_validator,
)


@dataclass
class Answer:
    value: Any
    source: str
    retryable: bool = True


class FormWalker:
    async def answer(self, request: Request) -> Answer:
        raise NotImplementedError

    def show_error(self, message: str) -> None:
        raise NotImplementedError

    def show_page(self, page: FormPage, step: int = 1, total: int = 1) -> None:
        pass

    async def resolve_form(self, request: FormRequest) -> dict[str, Any]:
        values, _ = await self._page(request.page, {})
        return values

    async def resolve_step_form(self, request: StepFormRequest) -> dict[str, Any]:
        total = len(request.steps)
        while True:
            values: dict[str, Any] = {}
            retryable = False
            for i, step in enumerate(request.steps, 1):
                step_values, step_retryable = await self._page(step, values, i, total)
                values.update(step_values)
                retryable = retryable or step_retryable

            error = check_validator(request.validate, values)
            if error is None:
                return values
            if not retryable:
                raise FormValidationError(error)
            self.show_error(error)

    async def _page(
        self,
        page: FormPage,
        earlier: dict[str, Any],
        step: int = 1,
        total: int = 1,
    ) -> tuple[dict[str, Any], bool]:
        while True:
            self.show_page(page, step, total)
            values: dict[str, Any] = {}
            retryable = False
            for key, field in page.fields.items():
                answer = await self._field(field, {**earlier, **values})
                values[key] = answer.value
                retryable = retryable or answer.retryable

            error = check_validator(page.validator, values)
            if error is None:
                return values, retryable
            if not retryable:
                raise FormValidationError(error)
            self.show_error(error)

    async def _field(self, field: FormField, context: dict[str, Any]) -> Answer:
        validate = None
        if field.validator is not None:
            validate = lambda value: field.validator(value, context)  # noqa: E731
        request = field.to_request(validate=validate)
        if validate is None or hasattr(request, "validate"):
            return await self.answer(request)

        # confirm/select requests carry no validator; check after answering
        while True:
            answer = await self.answer(request)
            error = check_validator(validate, answer.value)
            if error is None:
                return answer
            if not answer.retryable:
                name = field.mapping.name if field.mapping else field.message
                raise ArgValidationError(name, str(answer.value), error)
            self.show_error(error)
