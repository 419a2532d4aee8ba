# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/stockdesk/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Idempotent bootstrap: creates tables and the default admin account.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Users:
# - python -m flask users list
#   List all users with their roles.
# - python -m flask users create --email m@shop.local --name "Mary" --role manager --password "secret1"
#   Create a user (prompts if options are omitted).
#
# Permissions:
# - python -m flask perms list --role salesgirl
#   Show the role to permission table.
#
# Maintenance:
# - python -m flask maintenance cleanup-sessions
#   Delete expired and long-revoked session tokens.

import click
from flask import current_app
from flask.cli import with_appcontext

from .errors import StockdeskError
from .extensions import db
from .models import User
from .permissions import PERMISSION_DEFINITIONS, DEFAULT_ROLE_PERMISSIONS
from .services import auth_service, session_service
from .validation import USER_ROLES


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Create tables and the default admin account if missing.

    Default credentials come from DEFAULT_ADMIN_EMAIL / DEFAULT_ADMIN_PASSWORD.
    Change the password immediately in production!
    """
    click.echo("START Initializing stockdesk...")

    db.create_all()
    click.echo("PASS Tables ready")

    email = auth_service.normalize_email(current_app.config["DEFAULT_ADMIN_EMAIL"])
    existing = db.session.query(User).filter_by(email=email).first()
    if existing:
        click.echo(f"PASS Using existing admin: {existing.email} (ID: {existing.id})")
        return

    admin = auth_service.create_user({
        "email": email,
        "name": current_app.config["DEFAULT_ADMIN_NAME"],
        "role": "admin",
        "password": current_app.config["DEFAULT_ADMIN_PASSWORD"],
    })
    click.echo(f"PASS Created admin: {admin.email} (ID: {admin.id})")
    click.echo("WARN Change the default admin password before going live.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to initialize.")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('create')
@click.option('--email', prompt=True, help='Email address')
@click.option('--name', prompt=True, help='Display name')
@click.option('--role', type=click.Choice(list(USER_ROLES)), prompt=True, help='Role')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@with_appcontext
def create_user_cli(email, name, role, password):
    """Create a user account."""
    try:
        user = auth_service.create_user({"email": email, "name": name, "role": role, "password": password})
    except StockdeskError as e:
        raise click.ClickException(str(e))

    click.echo(f"PASS Created user {user.email} (ID: {user.id}, role: {user.role})")


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with their roles."""
    users = auth_service.list_users()

    click.echo("\n" + "="*80)
    click.echo(f"{'ID':<5} {'Name':<25} {'Email':<35} {'Role'}")
    click.echo("="*80)

    for user in users:
        click.echo(f"{user.id:<5} {user.name:<25} {user.email:<35} {user.role}")

    click.echo("="*80 + "\n")


@click.group('perms')
def perms_group():
    """Permission inspection commands."""


@perms_group.command('list')
@click.option('--role', type=click.Choice(list(USER_ROLES)), help='Only show permissions for this role')
def list_perms(role):
    """List permissions and which roles hold them."""
    for code, name, _description, category in PERMISSION_DEFINITIONS:
        holders = [r for r, codes in DEFAULT_ROLE_PERMISSIONS.items() if code in codes]
        if role and role not in holders:
            continue
        click.echo(f"{category:<10} {code:<18} {name:<20} {', '.join(holders)}")


@click.group('maintenance')
def maintenance_group():
    """Housekeeping commands."""


@maintenance_group.command('cleanup-sessions')
@with_appcontext
def cleanup_sessions():
    """Delete expired and long-revoked session tokens."""
    deleted = session_service.cleanup_expired_sessions()
    click.echo(f"PASS Deleted {deleted} session tokens")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(perms_group)
    app.cli.add_command(maintenance_group)
