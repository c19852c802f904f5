from flask import Blueprint

packing_bp = Blueprint('packing', __name__, url_prefix='/packing')

# Import routes to register them with the blueprint
from . import routes
