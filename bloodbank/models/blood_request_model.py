from datetime import datetime

from bloodbank.extensions import db
from bloodbank.lifecycle import INITIAL_STATUS, RequestStatus


class BloodRequest(db.Model):
    __tablename__ = 'blood_request'

    id = db.Column(db.Integer, primary_key=True)
    recipient_id = db.Column(db.Integer, db.ForeignKey('recipient.id'), nullable=False)
    blood_group = db.Column(db.String(3), nullable=False)
    request_date = db.Column(db.Date, nullable=False)
    units = db.Column(db.Float, nullable=False)
    status = db.Column(db.Enum(*[s.value for s in RequestStatus], name='request_status'),
                       nullable=False, default=INITIAL_STATUS.value)
    fulfilled_by = db.Column(db.Integer, db.ForeignKey('admin.id'), nullable=False)
    bank_id = db.Column(db.Integer, db.ForeignKey('bank.id'), nullable=False)
    status_updated_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'requestId': self.id,
            'recipientId': self.recipient_id,
            'fullName': self.recipient.full_name if self.recipient else None,
            'requestedBloodGroup': self.blood_group,
            'requestDate': self.request_date.isoformat(),
            'units': self.units,
            'requestStatus': self.status,
            'fulfilledBy': self.fulfilled_by,
            'bankId': self.bank_id,
        }

    def __repr__(self):
        return f'<BloodRequest {self.id} {self.status}>'
