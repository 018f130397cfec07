"""
db.models - SQLAlchemy ORM declarations.

Tables
------
config              - world configuration singleton, always id 0
entity              - positioned entity
mob                 - mobile entity with a speed
movement_component  - direction + speed for a moving entity
player              - player keyed by identity
message             - chat message, no natural primary key (append only)
messages            - chat message keyed by id
"""

from __future__ import annotations

from sqlalchemy import Column, Float, Integer, BigInteger, String, Text
from sqlalchemy.orm import DeclarativeBase, composite

from db.types import (
    IdentityType, TimestampType, UnsignedBigInteger, Vector3,
)


class Base(DeclarativeBase):
    pass


class WorldConfig(Base):
    __tablename__ = "config"

    id         = Column(BigInteger, primary_key=True, autoincrement=False)
    world_size = Column(UnsignedBigInteger, nullable=False)

    def to_dict(self) -> dict:
        return {"id": self.id, "world_size": self.world_size}


class Entity(Base):
    __tablename__ = "entity"

    entity_id = Column(BigInteger, primary_key=True, autoincrement=False)

    # ── Position (Vector3 composite) ───────────────────────────────────
    pos_x = Column(Float, nullable=False)
    pos_y = Column(Float, nullable=False)
    pos_z = Column(Float, nullable=False)
    position = composite(Vector3, pos_x, pos_y, pos_z)

    def to_dict(self) -> dict:
        return {"entity_id": self.entity_id, "position": self.position.to_list()}


class Mob(Base):
    __tablename__ = "mob"

    entity_id = Column(BigInteger, primary_key=True, autoincrement=False)
    speed     = Column(Float, nullable=False)

    def to_dict(self) -> dict:
        return {"entity_id": self.entity_id, "speed": self.speed}


class MovementComponent(Base):
    __tablename__ = "movement_component"

    entity_id = Column(BigInteger, primary_key=True, autoincrement=False)

    # ── Direction (Vector3 composite) ──────────────────────────────────
    dir_x = Column(Float, nullable=False)
    dir_y = Column(Float, nullable=False)
    dir_z = Column(Float, nullable=False)
    direction = composite(Vector3, dir_x, dir_y, dir_z)

    speed = Column(Float, nullable=False)

    def to_dict(self) -> dict:
        return {
            "entity_id": self.entity_id,
            "direction": self.direction.to_list(),
            "speed": self.speed,
        }


class Player(Base):
    __tablename__ = "player"

    identity  = Column(IdentityType, primary_key=True)
    player_id = Column(BigInteger, nullable=False)
    name      = Column(String(200), nullable=False)
    entity_id = Column(BigInteger, nullable=True)     # optional foreign key

    def to_dict(self) -> dict:
        return {
            "identity": self.identity.to_hex(),
            "player_id": self.player_id,
            "name": self.name,
            "entity_id": self.entity_id,
        }


class Message(Base):
    """
    Chat message without a natural key.  ``seq`` is a storage-only row
    handle: it is never decoded, exported, or used to clear the table.
    """
    __tablename__ = "message"

    seq         = Column(Integer, primary_key=True, autoincrement=True)
    sender      = Column(IdentityType, nullable=False)
    sent        = Column(TimestampType, nullable=False)
    text        = Column(Text, nullable=False)
    sender_name = Column(String(200), nullable=False)

    def to_dict(self) -> dict:
        return {
            "sender": self.sender.to_hex(),
            "sent": self.sent.micros_since_epoch,
            "text": self.text,
            "sender_name": self.sender_name,
        }


class KeyedMessage(Base):
    __tablename__ = "messages"

    id          = Column(UnsignedBigInteger, primary_key=True, autoincrement=False)
    sender      = Column(IdentityType, nullable=False)
    sent        = Column(TimestampType, nullable=False)
    text        = Column(Text, nullable=False)
    sender_name = Column(String(200), nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sender": self.sender.to_hex(),
            "sent": self.sent.micros_since_epoch,
            "text": self.text,
            "sender_name": self.sender_name,
        }
