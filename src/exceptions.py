class ReconstructionError(Exception):
    """Raised when a normal map reconstruction cannot be completed."""

    def __init__(self, message: str):
        super().__init__(message)


class UnderconstrainedSystemError(ReconstructionError):
    """Raised when the normal equations of a least-squares system are singular."""

    def __init__(self, message: str, rank: int | None = None):
        self.rank = rank
        super().__init__(message)


class InsufficientSamplesError(ReconstructionError):
    """Raised when fewer radiance samples are given than a well-posed solve needs."""

    def __init__(self, count: int, required: int):
        self.count = count
        self.required = required
        super().__init__(
            f"At least {required} radiance samples are required, but got {count}"
        )


class ImageShapeMismatchError(ReconstructionError):
    """Raised when input images do not share the same dimensions."""
