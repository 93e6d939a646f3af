from bloodbank.extensions import bcrypt, db
from bloodbank.validators import ADMIN_ROLES


class Admin(db.Model):
    __tablename__ = 'admin'

    id = db.Column(db.Integer, primary_key=True)
    full_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(100), nullable=False)
    contact_number = db.Column(db.String(10), nullable=False)
    role = db.Column(db.Enum(*ADMIN_ROLES, name='admin_role'), nullable=False)
    username = db.Column(db.String(50), nullable=False, unique=True)
    password_hash = db.Column(db.String(128), nullable=False)
    bank_id = db.Column(db.Integer, db.ForeignKey('bank.id'), nullable=False)

    bank = db.relationship('Bank')

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        # The password hash never leaves the server
        return {
            'adminId': self.id,
            'fullName': self.full_name,
            'email': self.email,
            'contactNumber': self.contact_number,
            'role': self.role,
            'username': self.username,
            'bankId': self.bank_id,
        }

    def __repr__(self):
        return f'<Admin {self.username}>'
