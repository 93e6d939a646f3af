from bloodbank.extensions import db


class Bank(db.Model):
    __tablename__ = 'bank'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, unique=True)
    location = db.Column(db.String(150), nullable=False)

    def to_dict(self):
        return {
            'bankId': self.id,
            'bankName': self.name,
            'location': self.location,
        }

    def __repr__(self):
        return f'<Bank {self.name}>'
