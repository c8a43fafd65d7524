# app/models/patient.py
import uuid
from werkzeug.security import generate_password_hash, check_password_hash
from app.extensions import db
from app.helpers import utcnow, iso


class Patient(db.Model):
    __tablename__ = "patients"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    user_id = db.Column(db.String(32), unique=True, index=True, nullable=False, default=lambda: uuid.uuid4().hex)

    # self-registered accounts
    email = db.Column(db.String(255), unique=True, index=True, nullable=True)
    password_hash = db.Column(db.String(255), nullable=True)

    # clinic enrollment
    clinic_id = db.Column(db.String(40), index=True, nullable=True)
    patient_code = db.Column(db.String(60), unique=True, index=True, nullable=True)  # e.g. C001-4827
    name_or_initial = db.Column(db.String(120), nullable=True)
    phone = db.Column(db.String(40), nullable=True)
    weekly_day = db.Column(db.String(3), nullable=False, default="MON")
    consent = db.Column(db.Boolean, nullable=False, default=False)
    status = db.Column(db.String(20), nullable=False, default="active")  # active/paused/discharged

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    daily_logs = db.relationship("DailyLog", back_populates="patient", cascade="all,delete-orphan")
    weekly_logs = db.relationship("WeeklyLog", back_populates="patient", cascade="all,delete-orphan")
    share_tokens = db.relationship("ShareToken", back_populates="patient", cascade="all,delete-orphan")

    def set_password(self, raw: str):
        self.password_hash = generate_password_hash(raw)

    def check_password(self, raw: str) -> bool:
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, raw)

    def in_clinic(self, clinic_id: str) -> bool:
        wanted = (clinic_id or "").strip().upper()
        if not wanted:
            return False
        if (self.clinic_id or "").strip().upper() == wanted:
            return True
        # enrollment codes carry the clinic as a prefix (C001-4827)
        code = (self.patient_code or "").strip().upper()
        return bool(code) and code.startswith(wanted + "-")

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "email": self.email,
            "clinic_id": self.clinic_id,
            "patient_code": self.patient_code,
            "name_or_initial": self.name_or_initial,
            "phone": self.phone,
            "weekly_day": self.weekly_day,
            "consent": bool(self.consent),
            "status": self.status,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }
