"""
Per-user secret components and their rotation.

Rotating both components is the "log out everywhere" primitive: once the new
pair is stored, every auth and refresh token minted under the old pair stops
verifying, without any record of which tokens were ever issued.
"""

from __future__ import annotations

from typing import NamedTuple

from errors import NotFoundError
from repositories.user_repository import UserRepository
from shared.crypto import derive_secret_component
from shared.logging import get_logger

log = get_logger(__name__)


class SecretComponents(NamedTuple):
    auth: str
    refresh: str


class SecretService:
    def __init__(self, users: UserRepository) -> None:
        self._users = users

    @staticmethod
    def generate_component() -> str:
        return derive_secret_component()

    def new_components(self) -> SecretComponents:
        return SecretComponents(
            auth=self.generate_component(), refresh=self.generate_component()
        )

    async def rotate_both(self, email: str) -> SecretComponents:
        """Generate and store a fresh pair for *email* in a single write."""
        components = self.new_components()
        user = await self._users.set_secret_components(
            email, components.auth, components.refresh
        )
        if user is None:
            raise NotFoundError("user not found")
        log.info("secret_components_rotated", email=email)
        return components
