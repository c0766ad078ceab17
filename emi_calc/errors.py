"""Exceptions raised while turning user input into a loan request."""


class InvalidLoanInput(ValueError):
    """Raised when a calculation request carries an out-of-domain value.

    The engine itself never raises for numeric edge cases; callers validate
    with this exception before building a ``LoanRequest``.
    """
