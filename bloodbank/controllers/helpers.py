from werkzeug.exceptions import NotFound

from bloodbank.authorization import can_modify, enforce, is_editable
from bloodbank.extensions import db
from bloodbank.models import Admin

CONTACT_FIELDS = {
    'contactNumber': 'contact_number',
    'email': 'email',
    'address': 'address',
    'bankId': 'bank_id',
}


def with_editable(rows, actor):
    """Serialize rows, flagging the ones the acting admin may change"""
    result = []
    for row in rows:
        data = row.to_dict()
        data['editable'] = is_editable(actor.bank_id, row.bank_id)
        result.append(data)
    return result


def update_contact_details(entity, cleaned, actor):
    """Apply a scoped update of the mutable donor/recipient fields"""
    enforce(can_modify(actor.bank_id, entity.bank_id, cleaned.get('bankId')), actor=actor, target=entity)
    for key, attribute in CONTACT_FIELDS.items():
        if key in cleaned:
            setattr(entity, attribute, cleaned[key])


def resolve_handler(admin_id, actor):
    """Admin recorded as collector/fulfiller, the acting admin unless given"""
    if admin_id is None or admin_id == actor.id:
        return actor
    handler = db.session.get(Admin, admin_id)
    if not handler:
        raise NotFound('Admin not found')
    return handler
