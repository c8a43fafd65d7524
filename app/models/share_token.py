# app/models/share_token.py
import uuid
from app.extensions import db
from app.helpers import utcnow, iso


class ShareToken(db.Model):
    __tablename__ = "share_tokens"

    id = db.Column(db.Integer, primary_key=True)
    token = db.Column(db.String(32), unique=True, index=True, nullable=False, default=lambda: uuid.uuid4().hex)
    patient_id = db.Column(db.Integer, db.ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = db.Column(db.DateTime, nullable=False)  # naive UTC
    revoked_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    patient = db.relationship("Patient", back_populates="share_tokens")

    def is_expired(self, now):
        return self.expires_at < now

    def to_dict(self):
        return {
            "token": self.token,
            "expires_at": iso(self.expires_at),
            "created_at": iso(self.created_at),
            "revoked_at": iso(self.revoked_at),
        }
