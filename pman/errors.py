class PmanError(Exception):
    """Base class for PMAN-specific errors."""


# Malformed archive or member bytes
class FormatError(PmanError):
    pass


class BadMagic(FormatError):
    pass


class UnterminatedCopyright(FormatError):
    pass


class TruncatedInput(FormatError):
    pass


class UnexpectedNonZeroField(FormatError):
    pass


class OverlappingEntries(FormatError):
    pass


class TruncatedPayload(FormatError):
    pass


class TruncatedZlib(FormatError):
    pass


class NotZlibMember(FormatError):
    pass


# Caller supplied values the format cannot represent
class ContractError(PmanError):
    pass


class CopyrightTooLong(ContractError):
    pass


class ArchiveTooLarge(ContractError):
    pass
