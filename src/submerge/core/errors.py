from __future__ import annotations


class SubmergeError(Exception):
    """Base class for every failure raised by the merge core."""


class TimestampFormatError(SubmergeError, ValueError):
    def __init__(self, text: str) -> None:
        super().__init__(f'Invalid SRT or VTT time format: "{text}"')
        self.text = text


class CueParseError(SubmergeError, ValueError):
    def __init__(self, expected: str, row: int, content: str) -> None:
        super().__init__(f"expected {expected} at row {row}, but received {content}")
        self.expected = expected
        self.row = row
        self.content = content


class InvalidAttributeError(SubmergeError, ValueError):
    def __init__(self, token: str) -> None:
        super().__init__(f"Cannot parse attribute '{token}'")
        self.token = token


class InputTypeError(SubmergeError, TypeError):
    pass
