from bloodbank.extensions import db


class Donor(db.Model):
    __tablename__ = 'donor'

    id = db.Column(db.Integer, primary_key=True)
    full_name = db.Column(db.String(100), nullable=False)
    age = db.Column(db.Integer, nullable=False)
    gender = db.Column(db.Enum('Male', 'Female', 'Other', name='donor_gender'), nullable=False)
    blood_group = db.Column(db.String(3), nullable=False)
    contact_number = db.Column(db.String(10), nullable=False, unique=True)
    email = db.Column(db.String(100), nullable=False, unique=True)
    address = db.Column(db.String(200), nullable=False)
    last_donation_date = db.Column(db.Date)
    bank_id = db.Column(db.Integer, db.ForeignKey('bank.id'), nullable=False)

    bank = db.relationship('Bank')
    donations = db.relationship('Donation', backref='donor', lazy=True,
                                order_by='Donation.donation_date.desc()')

    def to_dict(self):
        return {
            'donorId': self.id,
            'fullName': self.full_name,
            'age': self.age,
            'gender': self.gender,
            'bloodGroup': self.blood_group,
            'contactNumber': self.contact_number,
            'email': self.email,
            'address': self.address,
            'lastDonationDate': self.last_donation_date.isoformat() if self.last_donation_date else None,
            'bankId': self.bank_id,
        }

    def __repr__(self):
        return f'<Donor {self.full_name}>'
