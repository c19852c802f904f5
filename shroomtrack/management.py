"""
Management commands for seeding, operator setup and the spreadsheet mirror
"""
import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .models import Organization, User, UserRole
from .services import InventoryService, RateSettingsService, RecipeService, SheetSyncService
from .services.repository import SqlAlchemyRepository


def _workspace_repository(organization_id: int) -> SqlAlchemyRepository:
    organization = db.session.get(Organization, organization_id)
    if organization is None:
        raise click.ClickException(f"Organization {organization_id} not found")
    return SqlAlchemyRepository(organization.id)


organization_option = click.option(
    '--organization-id', type=int, default=1, show_default=True, help='Workspace to operate on'
)


@click.command('seed-recipes')
@organization_option
@with_appcontext
def seed_recipes_command(organization_id):
    """Add the default recipes to a workspace"""
    result = RecipeService(_workspace_repository(organization_id)).seed_default_recipes()
    if not result.success:
        raise click.ClickException(result.message)
    click.echo(f"✅ Seeded {len(result.data)} recipe(s)")


@click.command('seed-packaging')
@organization_option
@with_appcontext
def seed_packaging_command(organization_id):
    """Add starter pouch, tin and sticker stock to a workspace"""
    result = InventoryService(_workspace_repository(organization_id)).seed_packaging()
    if not result.success:
        raise click.ClickException(result.message)
    click.echo(f"✅ Seeded {len(result.data)} packaging item(s)")


@click.command('create-operator')
@click.option('--username', required=True)
@click.option('--password', required=True, prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--role', type=click.Choice([r.value for r in UserRole]), default=UserRole.ADMIN.value,
              show_default=True)
@click.option('--organization-name', default='Main Facility', show_default=True)
@click.option('--email', default=None)
@with_appcontext
def create_operator_command(username, password, role, organization_name, email):
    """Create an operator account, creating its workspace if needed"""
    if User.query.filter_by(username=username).first():
        raise click.ClickException(f"User {username} already exists")

    organization = Organization.query.filter_by(name=organization_name).first()
    if organization is None:
        organization = Organization(name=organization_name, is_active=True)
        db.session.add(organization)
        db.session.flush()
        click.echo(f"✅ Created organization {organization.name} (id {organization.id})")

    user = User(username=username, email=email, organization_id=organization.id, role=role, is_active=True)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    click.echo(f"✅ Created {role} operator {username} in organization {organization.id}")


def _sync_service(repository) -> SheetSyncService:
    url = RateSettingsService(repository).sheet_sync_url()
    return SheetSyncService(url, timeout=current_app.config.get('SHEET_SYNC_TIMEOUT_SECONDS', 15.0))


@click.command('sync-push')
@organization_option
@with_appcontext
def sync_push_command(organization_id):
    """Send a full workspace snapshot to the spreadsheet endpoint"""
    repository = _workspace_repository(organization_id)
    result = _sync_service(repository).push_full_database(repository)
    if not result.success:
        raise click.ClickException(result.message)
    click.echo(f"✅ {result.message} {result.data}")


@click.command('sync-pull')
@organization_option
@click.confirmation_option(prompt='This overwrites batches, inventory, finished goods and costs. Continue?')
@with_appcontext
def sync_pull_command(organization_id):
    """Overwrite workspace collections from the spreadsheet endpoint"""
    repository = _workspace_repository(organization_id)
    result = _sync_service(repository).pull_full_database(repository)
    if not result.success:
        raise click.ClickException(result.message)
    click.echo(f"✅ {result.message} {result.data}")


def register_commands(app):
    """Register CLI commands"""
    app.cli.add_command(seed_recipes_command)
    app.cli.add_command(seed_packaging_command)
    app.cli.add_command(create_operator_command)
    app.cli.add_command(sync_push_command)
    app.cli.add_command(sync_pull_command)
