from bloodbank.models.bank_model import Bank
from bloodbank.models.admin_model import Admin
from bloodbank.models.donor_model import Donor
from bloodbank.models.recipient_model import Recipient
from bloodbank.models.blood_stock_model import BloodStock
from bloodbank.models.donation_model import Donation
from bloodbank.models.blood_request_model import BloodRequest

__all__ = ['Bank', 'Admin', 'Donor', 'Recipient', 'BloodStock', 'Donation', 'BloodRequest']
