from flask import Blueprint

receiving_bp = Blueprint('receiving', __name__, url_prefix='/receiving')

# Import routes to register them with the blueprint
from . import routes
