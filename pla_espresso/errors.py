"""Exception types raised by the Espresso wrapper."""

from typing import Optional


class EspressoError(Exception):
    """Base class for every error raised by this package."""


class InvalidValue(EspressoError, ValueError):
    """An element lies outside the recognized code domain for its role."""

    def __init__(self, role: str, detail: str):
        self.role = role
        self.detail = detail
        super().__init__(f"Invalid {role} value: {detail}")


class InvalidName(EspressoError, ValueError):
    pass


class NotUnique(InvalidName):
    pass


class EmptyName(InvalidName):
    pass


class InvalidIdentifier(InvalidName):
    pass


class NameCountMismatch(InvalidName):
    pass


class RowCountMismatch(EspressoError, ValueError):
    pass


class EmptyTable(EspressoError, ValueError):
    pass


class NotPowerOfTwo(EspressoError, ValueError):
    pass


class TooLong(EspressoError, ValueError):
    pass


class MalformedResult(EspressoError):
    """The solver ran but its output could not be parsed."""


class InvalidOption(EspressoError, ValueError):
    pass


class UnknownOption(InvalidOption):
    pass


class DuplicateOption(InvalidOption):
    pass


class ConflictingFlags(InvalidOption):
    pass


class SolverTransportFailure(EspressoError):
    """The external solver could not be run at all."""


class SolverReportedFailure(EspressoError):
    """The solver ran and reported failure through its exit status."""

    def __init__(self, message: str, status: Optional[int] = None, output: str = ""):
        self.status = status
        self.output = output
        super().__init__(message)


class SolverLogicError(SolverReportedFailure):
    pass


class SolverAccessError(SolverReportedFailure):
    pass


class SolverTerminated(SolverReportedFailure):
    pass


class SolverEmptyOutput(SolverReportedFailure):
    pass


class SolverUnknownStatus(SolverReportedFailure):
    pass
