# This project was developed with assistance from AI tools.
"""Persona factories for functional tests.

A persona pairs the token-level ``UserContext`` with the resolved local
``Actor`` for one user of the shared in-memory registry.
"""

from typing import NamedTuple

from src.core.ports import Actor, UserProfile
from src.schemas.auth import UserContext


class Persona(NamedTuple):
    user: UserContext
    actor: Actor


def persona(profile: UserProfile) -> Persona:
    return Persona(
        user=UserContext(
            user_id=f"kc-{profile.id}",
            role=profile.role,
            email=profile.email,
            name=profile.full_name,
        ),
        actor=Actor(user_id=profile.id, role=profile.role, client_id=profile.client_id),
    )
