"""
Domain Errors
"""


class InvalidBasisError(ValueError):
    """
    Raised when the total basis weight of an allocation is zero or negative
    while at least one candidate target exists.
    """

    DEFAULT_MESSAGE = (
        "Basis total is zero or negative; provide nonzero datapoints "
        "before calculating allocations."
    )

    def __init__(self, message: str = DEFAULT_MESSAGE):
        super().__init__(message)
