"""EmailProvider protocol - services depend on this, not the concrete implementation."""

from typing import Optional, Protocol


class EmailProvider(Protocol):
    async def send_password_reset_email(
        self, email: str, user_name: Optional[str], code: str
    ) -> bool: ...
