from flask import Blueprint

overview_bp = Blueprint('overview', __name__, url_prefix='/overview')

# Import routes to register them with the blueprint
from . import routes
