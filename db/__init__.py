"""
db - Database layer.

Public API:
    init_db()       → create engine + tables
    get_session()   → new Session
    transaction()   → session scoped to one commit-or-rollback
    WorldConfig, Entity, Mob, MovementComponent,
    Player, Message, KeyedMessage → ORM models
    Vector3, Identity, Timestamp  → domain value objects
"""

from db.engine import init_db, get_session, transaction   # noqa: F401
from db.models import (                             # noqa: F401
    Base,
    WorldConfig,
    Entity,
    Mob,
    MovementComponent,
    Player,
    Message,
    KeyedMessage,
)
from db.types import Vector3, Identity, Timestamp   # noqa: F401
