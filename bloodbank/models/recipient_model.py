from bloodbank.extensions import db


class Recipient(db.Model):
    __tablename__ = 'recipient'

    id = db.Column(db.Integer, primary_key=True)
    full_name = db.Column(db.String(100), nullable=False)
    age = db.Column(db.Integer, nullable=False)
    gender = db.Column(db.Enum('Male', 'Female', 'Other', name='recipient_gender'), nullable=False)
    blood_group = db.Column(db.String(3), nullable=False)
    contact_number = db.Column(db.String(10), nullable=False, unique=True)
    email = db.Column(db.String(100), nullable=False, unique=True)
    address = db.Column(db.String(200), nullable=False)
    bank_id = db.Column(db.Integer, db.ForeignKey('bank.id'), nullable=False)

    bank = db.relationship('Bank')
    requests = db.relationship('BloodRequest', backref='recipient', lazy=True,
                               order_by='BloodRequest.request_date.desc()')

    def to_dict(self):
        return {
            'recipientId': self.id,
            'fullName': self.full_name,
            'age': self.age,
            'gender': self.gender,
            'bloodGroup': self.blood_group,
            'contactNumber': self.contact_number,
            'email': self.email,
            'address': self.address,
            'bankId': self.bank_id,
        }

    def __repr__(self):
        return f'<Recipient {self.full_name}>'
