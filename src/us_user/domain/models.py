"""Domain model for user records, plus the JSON codec used for cache values."""

import json
from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class User:
    id: int  # store-assigned, never used as a cache key
    username: str
    email: str

    def to_json(self) -> str:
        return json.dumps(asdict(self))

    @classmethod
    def from_json(cls, raw: str) -> "User":
        """Decode a cached value. Raises ValueError on anything malformed."""
        try:
            payload = json.loads(raw)
            return cls(
                id=int(payload["id"]),
                username=str(payload["username"]),
                email=str(payload["email"]),
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed cached user: {exc}") from exc
