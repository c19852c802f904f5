from flask import Blueprint

settings_bp = Blueprint('settings', __name__, url_prefix='/settings')

# Import routes to register them with the blueprint
from . import routes
