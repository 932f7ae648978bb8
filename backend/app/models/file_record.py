"""File model: metadata only, the payload lives in the upload directory."""

from sqlalchemy import BigInteger, Column, Enum, ForeignKey, Index, String, Text, DateTime
from ..database import Base
from .folder import utcnow

# Extensions accepted for upload; also the values of FileRecord.type.
FILE_TYPES = ("pdf", "png", "docx", "jpg", "svg", "gif", "txt")


class FileRecord(Base):
    """An uploaded file, optionally placed inside a folder."""

    __tablename__ = "files"
    __table_args__ = (
        Index("ix_files_folder_id", "folder_id"),
        Index("ix_files_folder_name", "folder_id", "name"),
        Index("ix_files_updated_at", "updated_at"),
    )

    id = Column(String(50), primary_key=True)  # file-{uuid hex}

    name = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=True)
    type = Column(Enum(*FILE_TYPES, name="file_type", native_enum=False), nullable=False)

    # Stored payload location and size in bytes
    file_path = Column(Text, nullable=False)
    size = Column(BigInteger, nullable=False, default=0)

    # NULL folder = root-level file
    folder_id = Column(String(50), ForeignKey("folders.id", ondelete="CASCADE"), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<FileRecord {self.id} {self.name!r}>"
