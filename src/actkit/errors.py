"""Exception taxonomy for the action engine."""

from __future__ import annotations


class ActkitError(Exception):
    """Base class for all engine errors."""


class NoResponderConfigured(ActkitError):
    """A prompt was requested while no responder was installed."""

    def __init__(self, request_type: str = ""):
        self.request_type = request_type
        detail = f" (request: {request_type})" if request_type else ""
        super().__init__(
            "No responder configured. Install one with set_responder() "
            f"before running an action{detail}."
        )


class ResponderBusy(ActkitError):
    """The responder slot was swapped while a request was still pending."""


class EmptyChoiceSet(ActkitError):
    """select / multi_select was called with zero choices."""


class EmptyStepList(ActkitError):
    """step_form was called with zero steps."""


class ActionDefinitionError(ActkitError):
    """define_action() received an invalid definition."""


class ActionNotFoundError(ActkitError):
    """No action matched the requested name or path."""

    def __init__(self, ref: str, available: list[str] | None = None):
        self.ref = ref
        self.available = available or []
        super().__init__(f'Action "{ref}" not found')


class ArgValidationError(ActkitError):
    """A CLI-supplied value failed type, range, pattern or choice validation."""

    def __init__(
        self,
        arg_name: str,
        value: str,
        reason: str,
        valid_options: list[str] | None = None,
    ):
        self.arg_name = arg_name
        self.value = value
        self.reason = reason
        self.valid_options = valid_options
        hint = f" Valid: {', '.join(valid_options)}" if valid_options else ""
        super().__init__(f"Invalid value '{value}' for --{arg_name}. {reason}{hint}")


class FormValidationError(ActkitError):
    """A page or step-form validator rejected values that cannot be re-asked."""


class MissingArgumentError(ActkitError):
    """A mapped prompt had no flag, no default and no interactive stdin."""

    def __init__(self, arg_label: str):
        self.arg_label = arg_label
        super().__init__(
            f"Required argument {arg_label} is missing (non-interactive mode)"
        )


class ShellCommandError(ActkitError):
    """A shell command run through ctx.shell exited non-zero."""

    def __init__(self, command: str, exit_code: int, stderr: str = ""):
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(f"Command failed with exit code {exit_code}: {command}")


def format_error(error: BaseException) -> str:
    """One-line diagnostic for an exception."""
    message = str(error)
    name = type(error).__name__
    return f"{name}: {message}" if message else name
