"""
RefreshToken model: stores opaque refresh tokens so they can be looked up and revoked.
Fields:
- token (primary key) - the opaque value handed to the client
- user_id (String(36)) - FK to users.id
- expires_at
- revoked_at (null while the token has not been revoked)
- created_at, updated_at
"""
from datetime import datetime

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from models.base_model import TimestampMixin, Base, as_utc


class RefreshToken(TimestampMixin, Base):
    __tablename__ = "refresh_tokens"

    token = Column(String(64), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    revoked_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="refresh_tokens")

    def is_revoked(self) -> bool:
        """Revoked while still live. A revoke stamped after expiry leaves the token Expired."""
        if self.revoked_at is None:
            return False
        return as_utc(self.revoked_at) < as_utc(self.expires_at)

    def is_expired(self, now: datetime) -> bool:
        return now >= as_utc(self.expires_at)

    def __repr__(self):
        return f"<RefreshToken user={self.user_id} expires_at={self.expires_at}>"
