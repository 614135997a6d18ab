"""Error kinds raised while decoding, validating and dispatching events.

Everything the dispatcher raises derives from DispatchError so the HTTP
boundary can map the whole family onto a single 400 response.
"""

from __future__ import annotations


class DispatchError(Exception):
    """Base class for payload processing failures."""


class MalformedJSON(DispatchError):
    """The request body is not a JSON payload of the expected shape."""


class UnsupportedEvent(DispatchError):
    """The event name has no processing rule."""

    def __init__(self, name: str) -> None:
        super().__init__(f'event name "{name}" is not supported')
        self.name = name


class InvalidPayload(DispatchError):
    """A required event or action field is missing or has a bad value."""


def describe_value(value: object, limit: int = 64) -> str:
    try:
        text = repr(value)
    except ValueError:
        # int too large for str conversion
        return "<out of range integer>"
    return text if len(text) <= limit else text[:limit] + "..."


class InvalidInterval(DispatchError):
    """``action.params.interval`` is not a number."""

    def __init__(self, value: object) -> None:
        super().__init__(f"interval is not a number: {describe_value(value)}")
        self.value = value


class CommandFailed(DispatchError):
    """The action command exited non-zero or could not be run."""

    def __init__(self, exit_code: int, output: str) -> None:
        super().__init__(
            f"running command failed with code {exit_code}, output: {output}"
        )
        self.exit_code = exit_code
        self.output = output
