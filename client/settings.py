import os
from dataclasses import dataclass


@dataclass(frozen=True)
class ClientSettings:
    api_url: str = "http://127.0.0.1:5002"
    timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "ClientSettings":
        return cls(
            api_url=os.getenv("SCREENADS_API_URL", cls.api_url).rstrip("/"),
            timeout=float(os.getenv("SCREENADS_TIMEOUT", str(cls.timeout))),
        )
