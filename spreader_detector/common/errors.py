"""
Error hierarchy for the Spreader Detector.

Every failure the pipeline can raise derives from SpreaderDetectorError and
carries the single diagnostic line the CLI prints to stderr. Parse failures,
lookup failures and configuration problems collapse into the resource
category, so they share its message.
"""


class SpreaderDetectorError(Exception):
    """Base class for all pipeline failures."""

    message = "ERROR: Library error."

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.message)
        self.detail = detail

    @property
    def diagnostic(self) -> str:
        """Fixed user-facing line (no internal detail)."""
        return self.message


class ArgumentError(SpreaderDetectorError):
    message = "Usage: spreader-detector <Path to People.in> <Path to Meetings.in>"


class InputOpenError(SpreaderDetectorError):
    message = "Error in input files."


class OutputOpenError(SpreaderDetectorError):
    message = "Error in output file."


class ResourceError(SpreaderDetectorError):
    message = "ERROR: Library error."


class InputFormatError(ResourceError):
    """A record in one of the datasets does not match its line format."""

    def __init__(self, path, line_number: int, reason: str):
        super().__init__(f"{path}:{line_number}: {reason}")
        self.path = path
        self.line_number = line_number
        self.reason = reason


class PersonNotFoundError(ResourceError, LookupError):
    """A meeting references an identifier absent from the registry."""

    def __init__(self, person_id: int):
        super().__init__(f"Person {person_id} not found in registry")
        self.person_id = person_id


class RegistryOrderError(ResourceError):
    """Identifier lookup attempted on a registry not sorted by identifier."""


class ConfigError(ResourceError):
    """Missing or invalid configuration value."""
