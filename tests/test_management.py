from shroomtrack.config import EnvReader
from shroomtrack.models import InventoryItem, Recipe, User
from shroomtrack.services import SqlAlchemyRepository


def test_seed_commands_populate_a_workspace(app, runner, organization_id):
    recipes = runner.invoke(args=['seed-recipes', '--organization-id', str(organization_id)])
    packaging = runner.invoke(args=['seed-packaging', '--organization-id', str(organization_id)])

    assert recipes.exit_code == 0, recipes.output
    assert 'Seeded 3 recipe(s)' in recipes.output
    assert packaging.exit_code == 0, packaging.output
    with app.app_context():
        repository = SqlAlchemyRepository(organization_id)
        assert len(repository.list(Recipe)) == 3
        assert len(repository.list(InventoryItem)) == 3

    again = runner.invoke(args=['seed-recipes', '--organization-id', str(organization_id)])
    assert 'Seeded 0 recipe(s)' in again.output


def test_seed_unknown_workspace_fails(runner):
    result = runner.invoke(args=['seed-recipes', '--organization-id', '999'])

    assert result.exit_code != 0
    assert 'Organization 999 not found' in result.output


def test_create_operator(app, runner):
    result = runner.invoke(args=[
        'create-operator', '--username', 'dock', '--password', 'secret-pass',
        '--role', 'PROCESSING_WORKER', '--organization-name', 'North Facility',
    ])

    assert result.exit_code == 0, result.output
    with app.app_context():
        user = User.query.filter_by(username='dock').first()
        assert user.role == 'PROCESSING_WORKER'
        assert user.organization.name == 'North Facility'
        assert user.check_password('secret-pass')

    duplicate = runner.invoke(args=['create-operator', '--username', 'dock', '--password', 'x'])
    assert duplicate.exit_code != 0


def test_sync_push_without_url(runner, organization_id):
    result = runner.invoke(args=['sync-push', '--organization-id', str(organization_id)])

    assert result.exit_code != 0
    assert 'No API URL configured' in result.output


class TestEnvReader:

    def test_typed_values(self):
        reader = EnvReader({'A': ' 5 ', 'B': '2.5', 'C': 'yes', 'D': '  '})

        assert reader.int('A') == 5
        assert reader.float('B') == 2.5
        assert reader.bool('C') is True
        assert reader.str('D', 'fallback') == 'fallback'
        assert reader.warnings == []

    def test_bad_values_fall_back_with_warning(self):
        reader = EnvReader({'A': 'five', 'C': 'maybe'})

        assert reader.int('A', 3) == 3
        assert reader.bool('C', False) is False
        assert len(reader.warnings) == 2
