from datetime import datetime

from sqlalchemy import event

from bloodbank.extensions import db
from bloodbank.models.blood_stock_model import BloodStock


class Donation(db.Model):
    __tablename__ = 'donation'

    id = db.Column(db.Integer, primary_key=True)
    donor_id = db.Column(db.Integer, db.ForeignKey('donor.id'), nullable=False)
    blood_group = db.Column(db.String(3), nullable=False)
    donation_date = db.Column(db.Date, nullable=False)
    units = db.Column(db.Float, nullable=False)
    collected_by = db.Column(db.Integer, db.ForeignKey('admin.id'), nullable=False)
    bank_id = db.Column(db.Integer, db.ForeignKey('bank.id'), nullable=False)

    def to_dict(self):
        return {
            'donationId': self.id,
            'donorId': self.donor_id,
            'fullName': self.donor.full_name if self.donor else None,
            'bloodGroup': self.blood_group,
            'donationDate': self.donation_date.isoformat(),
            'bloodUnits': self.units,
            'collectedBy': self.collected_by,
            'bankId': self.bank_id,
        }

    def __repr__(self):
        return f'<Donation {self.id}>'


@event.listens_for(Donation, 'after_insert')
def add_donation_to_stock(mapper, connection, target):
    """Runs inside the insert's transaction, like a store trigger would"""
    stock = BloodStock.__table__
    now = datetime.utcnow()
    result = connection.execute(
        stock.update()
        .where(stock.c.bank_id == target.bank_id, stock.c.blood_group == target.blood_group)
        .values(units_available=stock.c.units_available + target.units, last_updated=now)
    )
    if result.rowcount == 0:
        connection.execute(
            stock.insert().values(
                bank_id=target.bank_id,
                blood_group=target.blood_group,
                units_available=target.units,
                last_updated=now,
            )
        )
