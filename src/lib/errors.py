"""
Exceptions raised by linemark

Rule mismatches are never errors. These exceptions cover the few conditions
that are reported to the caller, either raised (strict mode) or recorded
as diagnostics on the processing context.
"""


class LinemarkError(Exception):
    """Base class for all linemark errors"""
    pass


class UnterminatedFrontMatterError(LinemarkError):
    """Raised when a front matter block is opened but never closed"""

    def __init__(self, open_tag: str, close_tag: str, consumed: int):
        self.open_tag = open_tag
        self.close_tag = close_tag
        self.consumed = consumed
        super().__init__(
            f"Front matter opened with '{open_tag}' has no closing '{close_tag}' "
            f"({consumed} line(s) read before end of input)"
        )


class MalformedPatternError(LinemarkError):
    """Raised when the ordered list renumbering pattern fails to compile"""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Ordered list pattern {pattern!r} does not compile: {reason}")


class RuleFileError(LinemarkError):
    """Raised when a YAML rule file cannot be loaded or validated"""
    pass
