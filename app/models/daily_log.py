# app/models/daily_log.py
from app.extensions import db
from app.helpers import utcnow, iso


class DailyLog(db.Model):
    __tablename__ = "daily_logs"

    id = db.Column(db.Integer, primary_key=True)
    patient_id = db.Column(db.Integer, db.ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    timestamp = db.Column(db.DateTime, nullable=False, index=True)  # naive UTC

    medication_taken = db.Column(db.Boolean, nullable=False, default=False)
    nausea_level = db.Column(db.Integer, nullable=False, default=0)  # 0-10
    vomiting = db.Column(db.Boolean, nullable=False, default=False)
    weight_kg = db.Column(db.Float, nullable=True)
    dizziness = db.Column(db.Boolean, nullable=True)
    abdominal_discomfort = db.Column(db.Boolean, nullable=True)
    overall_condition = db.Column(db.Integer, nullable=True)  # 0-10

    source = db.Column(db.String(20), nullable=False, default="app")  # app | import
    created_at = db.Column(db.DateTime, default=utcnow)

    patient = db.relationship("Patient", back_populates="daily_logs")

    @classmethod
    def for_patient(cls, patient_id, since=None):
        query = cls.query.filter(cls.patient_id == patient_id)
        if since is not None:
            query = query.filter(cls.timestamp >= since)
        return query.order_by(cls.timestamp.desc()).all()

    def to_entry(self):
        return {
            "timestamp": self.timestamp,
            "medication_taken": bool(self.medication_taken),
            "nausea_level": int(self.nausea_level or 0),
            "vomiting": bool(self.vomiting),
            "weight_kg": self.weight_kg,
            "dizziness": self.dizziness,
            "abdominal_discomfort": self.abdominal_discomfort,
            "overall_condition": self.overall_condition,
        }

    def to_dict(self):
        data = self.to_entry()
        data["id"] = self.id
        data["timestamp"] = iso(self.timestamp)
        data["source"] = self.source
        return data
