# app/models/weekly_log.py
from app.extensions import db
from app.helpers import utcnow, iso


class WeeklyLog(db.Model):
    __tablename__ = "weekly_logs"

    id = db.Column(db.Integer, primary_key=True)
    patient_id = db.Column(db.Integer, db.ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    timestamp = db.Column(db.DateTime, nullable=False, index=True)

    weight_kg = db.Column(db.Float, nullable=False)             # 20-400
    body_fat_percent = db.Column(db.Float, nullable=True)
    appetite_change = db.Column(db.String(20), nullable=False, default="maintained")
    exercise_frequency = db.Column(db.String(20), nullable=False, default="none")

    source = db.Column(db.String(20), nullable=False, default="app")
    created_at = db.Column(db.DateTime, default=utcnow)

    patient = db.relationship("Patient", back_populates="weekly_logs")

    @classmethod
    def for_patient(cls, patient_id, since=None):
        query = cls.query.filter(cls.patient_id == patient_id)
        if since is not None:
            query = query.filter(cls.timestamp >= since)
        return query.order_by(cls.timestamp.desc()).all()

    def to_entry(self):
        return {
            "timestamp": self.timestamp,
            "weight_kg": self.weight_kg,
            "body_fat_percent": self.body_fat_percent,
            "appetite_change": self.appetite_change,
            "exercise_frequency": self.exercise_frequency,
        }

    def to_dict(self):
        data = self.to_entry()
        data["id"] = self.id
        data["timestamp"] = iso(self.timestamp)
        data["source"] = self.source
        return data
