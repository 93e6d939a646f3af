import click
from flask import current_app
from flask.cli import with_appcontext

from bloodbank.errors import ValidationFailed
from bloodbank.extensions import db
from bloodbank.models import Admin, Bank, BloodStock
from bloodbank.validators import ADMIN_ROLES, BLOOD_GROUPS, clean_admin


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Create all tables."""
    db.create_all()
    current_app.logger.info('Database tables created')
    click.echo('Initialized the database.')


@click.command('add-bank')
@click.argument('name')
@click.argument('location')
@with_appcontext
def add_bank_command(name, location):
    """Register a blood bank with an empty stock row per blood group."""
    if Bank.query.filter_by(name=name).first():
        raise click.ClickException(f'Bank {name!r} already exists')

    bank = Bank(name=name, location=location)
    db.session.add(bank)
    db.session.flush()
    for group in BLOOD_GROUPS:
        db.session.add(BloodStock(bank_id=bank.id, blood_group=group, units_available=0))
    db.session.commit()

    current_app.logger.info('Bank %s created with id %s', name, bank.id)
    click.echo(f'Created bank {bank.id}: {name}')


@click.command('create-admin')
@click.option('--username', prompt=True)
@click.option('--full-name', prompt=True)
@click.option('--email', prompt=True)
@click.option('--contact-number', prompt=True)
@click.option('--role', prompt=True, type=click.Choice(ADMIN_ROLES), default='Manager')
@click.option('--bank-id', prompt=True, type=int)
@click.password_option()
@with_appcontext
def create_admin_command(username, full_name, email, contact_number, role, bank_id, password):
    """Bootstrap an admin account, used before anyone can sign in."""
    try:
        cleaned = clean_admin({
            'fullName': full_name,
            'email': email,
            'contactNumber': contact_number,
            'roleName': role,
            'username': username,
            'password': password,
            'bankId': bank_id,
        })
    except ValidationFailed as e:
        raise click.ClickException('; '.join(f'{field}: {message}' for field, message in e.fields.items()))

    if not db.session.get(Bank, cleaned['bankId']):
        raise click.ClickException(f'Bank {bank_id} does not exist')
    if Admin.query.filter_by(username=cleaned['username']).first():
        raise click.ClickException('Username already exists.')

    admin = Admin(
        full_name=cleaned['fullName'],
        email=cleaned['email'],
        contact_number=cleaned['contactNumber'],
        role=cleaned['roleName'],
        username=cleaned['username'],
        bank_id=cleaned['bankId'],
    )
    admin.set_password(cleaned['password'])
    db.session.add(admin)
    db.session.commit()

    current_app.logger.info('Admin %s created from the command line', admin.username)
    click.echo(f'Created admin {admin.id}: {admin.username}')


def register_commands(app):
    app.cli.add_command(init_db_command)
    app.cli.add_command(add_bank_command)
    app.cli.add_command(create_admin_command)
