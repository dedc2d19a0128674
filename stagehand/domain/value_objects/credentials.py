from dataclasses import dataclass, field


@dataclass(frozen=True)
class Credentials:
    """
    Value Object holding the principal used for every remote action in a run.
    The secret never appears in repr() or str().
    """
    username: str
    secret: str = field(repr=False)

    def __post_init__(self):
        if not self.username:
            raise ValueError("Credentials username cannot be empty")

    def __str__(self):
        return self.username
