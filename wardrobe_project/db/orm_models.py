# wardrobe_project/db/orm_models.py
import uuid
from sqlalchemy import (
    Column, String, Text, Boolean, Integer, DateTime, Enum, ForeignKey, JSON, TypeDecorator
)
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from .database import Base
from ..models.user_models import Role
from ..models.item_models import (
    GarmentType, Occasion, Season, LaundryStatus, HistoryAction, UNTITLED_ITEM_NAME
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GUID(TypeDecorator):
    """
    Platform-independent GUID type.
    Uses PostgreSQL's UUID type, and otherwise uses
    CHAR(32), storing as stringified hex values.
    """
    impl = String(32)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            from sqlalchemy.dialects.postgresql import UUID
            return dialect.type_descriptor(UUID(as_uuid=True))
        else:
            return dialect.type_descriptor(String(32))

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        elif dialect.name == 'postgresql':
            return str(value)
        else:
            if not isinstance(value, uuid.UUID):
                return "%.32x" % uuid.UUID(str(value)).int
            return "%.32x" % value.int

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        if not isinstance(value, uuid.UUID):
            value = uuid.UUID(value)
        return value


class User(Base):
    __tablename__ = "users"
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, index=True, nullable=False)  # always lower-cased
    name = Column(String, nullable=True)
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(Role), nullable=False, default=Role.USER)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    items = relationship("Item", back_populates="owner", cascade="all, delete-orphan")
    outfits = relationship("Outfit", back_populates="owner", cascade="all, delete-orphan")


class Item(Base):
    __tablename__ = "items"
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    user_id = Column(GUID, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False, default=UNTITLED_ITEM_NAME)
    colors = Column(JSON, nullable=False, default=list)
    type = Column(Enum(GarmentType), nullable=False, index=True)
    occasion = Column(Enum(Occasion), nullable=False, default=Occasion.CASUAL)
    occasions = Column(JSON, nullable=False, default=list)
    season = Column(Enum(Season), nullable=False, default=Season.ALL_SEASON)

    filename = Column(String, nullable=False)
    object_url = Column(String, nullable=False)
    thumbnail_url = Column(String, nullable=True)
    processed_url = Column(String, nullable=True)

    laundry_status = Column(Enum(LaundryStatus), nullable=False, default=LaundryStatus.IN_WARDROBE, index=True)
    usage_count = Column(Integer, nullable=False, default=0)
    is_favorite = Column(Boolean, nullable=False, default=False)

    # Reserved for a moderation workflow; nothing reads or writes these yet.
    moderated = Column(Boolean, nullable=False, default=False)
    moderation_notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    owner = relationship("User", back_populates="items")


class ItemHistory(Base):
    __tablename__ = "item_history"
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    # No foreign key: history outlives the item it describes.
    item_id = Column(GUID, nullable=False, index=True)
    action = Column(Enum(HistoryAction), nullable=False, index=True)
    performed_by = Column(GUID, nullable=False)
    notes = Column(Text, nullable=True)
    timestamp = Column(DateTime, default=utcnow, index=True)


class AuditLog(Base):
    __tablename__ = "audit_logs"
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    user_id = Column(GUID, nullable=True, index=True)
    action = Column(String, nullable=False, index=True)
    payload = Column(Text, nullable=True)  # JSON-serialised
    ip_address = Column(String, nullable=False, default="unknown")
    timestamp = Column(DateTime, default=utcnow)


class Outfit(Base):
    __tablename__ = "outfits"
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    user_id = Column(GUID, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    thumbnail_url = Column(String, nullable=True)
    is_public = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    owner = relationship("User", back_populates="outfits")
    items = relationship(
        "OutfitItem",
        back_populates="outfit",
        cascade="all, delete-orphan",
        order_by="OutfitItem.position",
        lazy="selectin",
    )


class OutfitItem(Base):
    __tablename__ = "outfit_items"
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    outfit_id = Column(GUID, ForeignKey("outfits.id"), nullable=False, index=True)
    item_id = Column(GUID, nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    outfit = relationship("Outfit", back_populates="items")
