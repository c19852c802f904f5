import logging

logger = logging.getLogger(__name__)


def register_blueprints(app):
    """Register all blueprints with the Flask app."""

    successful_registrations = []

    def register(import_path, url_prefix, description):
        module_path, bp_name = import_path.rsplit('.', 1)
        module = __import__(module_path, fromlist=[bp_name])
        app.register_blueprint(getattr(module, bp_name), url_prefix=url_prefix)
        successful_registrations.append(description)

    register('shroomtrack.blueprints.auth.auth_bp', '/auth', 'Authentication')
    register('shroomtrack.blueprints.receiving.receiving_bp', '/receiving', 'Receiving')
    register('shroomtrack.blueprints.processing.processing_bp', '/processing', 'Processing')
    register('shroomtrack.blueprints.packing.packing_bp', '/packing', 'Packing')
    register('shroomtrack.blueprints.inventory.inventory_bp', '/inventory', 'Inventory')
    register('shroomtrack.blueprints.finance.finance_bp', '/finance', 'Finance')
    register('shroomtrack.blueprints.settings.settings_bp', '/settings', 'Settings')
    register('shroomtrack.blueprints.overview.overview_bp', '/overview', 'Overview')

    logger.info(f"Registered blueprints: {', '.join(successful_registrations)}")
    return successful_registrations
