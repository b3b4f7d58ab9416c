import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, JSON, Uuid, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship
from media_importer.core.database.base import Base
from media_importer.core.common.enums import RecordStatus

def utc_now():
    return datetime.now(timezone.utc)

class MediaRecordModel(Base):
    __tablename__ = "media_records"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    mime_type = Column(String, nullable=False)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False, default="")
    status = Column(SQLEnum(RecordStatus), nullable=False, default=RecordStatus.ACTIVE, index=True)
    public_url = Column(String, nullable=False)
    meta = Column(JSON, default=dict)
    created_at = Column(DateTime(timezone=True), default=utc_now)

    attributes = relationship(
        "MediaAttributeModel",
        back_populates="record",
        cascade="all, delete-orphan"
    )

    def get_attribute(self, key: str):
        for attr in self.attributes:
            if attr.key == key:
                return attr.value
        return None

class MediaAttributeModel(Base):
    """
    Key/value attributes of a record. The stored path lives here under
    the "attached_file" key, the path the file was planned under before
    collision numbering under "source_file". Duplicate detection queries both.
    """
    __tablename__ = "media_attributes"
    __table_args__ = (UniqueConstraint("record_id", "key", name="uq_media_attribute_key"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    record_id = Column(Uuid(as_uuid=True), ForeignKey("media_records.id"), nullable=False, index=True)
    key = Column(String, nullable=False)
    value = Column(Text, nullable=True, index=True)

    record = relationship("MediaRecordModel", back_populates="attributes")
