from flask import Blueprint

finance_bp = Blueprint('finance', __name__, url_prefix='/finance')

# Import routes to register them with the blueprint
from . import routes
