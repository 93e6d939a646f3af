from datetime import datetime

from bloodbank.extensions import db


class BloodStock(db.Model):
    __tablename__ = 'blood_stock'
    __table_args__ = (db.UniqueConstraint('bank_id', 'blood_group', name='uq_stock_bank_group'),)

    id = db.Column(db.Integer, primary_key=True)
    bank_id = db.Column(db.Integer, db.ForeignKey('bank.id'), nullable=False)
    blood_group = db.Column(db.String(3), nullable=False)
    units_available = db.Column(db.Float, nullable=False, default=0)
    last_updated = db.Column(db.DateTime, default=datetime.utcnow)

    bank = db.relationship('Bank', backref='stock')

    def to_dict(self):
        return {
            'bloodGroup': self.blood_group,
            'unitsAvailable': self.units_available,
            'lastUpdated': self.last_updated.isoformat() if self.last_updated else None,
            'bankName': self.bank.name,
            'bankId': self.bank_id,
            'location': self.bank.location,
        }
