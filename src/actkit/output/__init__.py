"""Structured action output and its renderers."""

from actkit.output.channel import OutputChannel, OutputMessage, OutputSink, OutputType
from actkit.output.render import PlainTextRenderer, RichRenderer

__all__ = [
    "OutputChannel",
    "OutputMessage",
    "OutputSink",
    "OutputType",
    "PlainTextRenderer",
    "RichRenderer",
]
