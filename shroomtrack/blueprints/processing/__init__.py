from flask import Blueprint

processing_bp = Blueprint('processing', __name__, url_prefix='/processing')

# Import routes to register them with the blueprint
from . import routes
