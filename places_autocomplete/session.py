import uuid
from dataclasses import dataclass, field


def _new_token() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class SessionToken:
    """Groups autocomplete keystrokes with the detail lookup that ends them.

    Google bills a session as one unit, so the same token must be sent with every
    autocomplete request and with the final place-details request. A new token is
    issued once a prediction has been selected.
    """
    value: str = field(default_factory=_new_token)

    @classmethod
    def new(cls) -> 'SessionToken':
        return cls()

    def __str__(self) -> str:
        return self.value
