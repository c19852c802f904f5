from ..extensions import db
from .mixins import ScopedModelMixin, SerializableMixin

RECIPE_TYPES = ('CHIPS', 'DRIED', 'POWDER', 'OTHER')
DEFAULT_BASE_WEIGHT_KG = 0.5


class Recipe(ScopedModelMixin, SerializableMixin, db.Model):
    __tablename__ = 'recipe'

    SERIALIZED_FIELDS = (
        ('id', 'id'),
        ('name', 'name'),
        ('type', 'type'),
        ('base_weight_kg', 'baseWeightKg'),
        ('cook_time_minutes', 'cookTimeMinutes'),
        ('temperature', 'temperature'),
        ('notes', 'notes'),
        ('image_url', 'imageUrl'),
        ('yield_ratio', 'yieldRatio'),
        ('default_pack_size_kg', 'defaultPackSizeKg'),
    )

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    type = db.Column(db.String(16), nullable=False, default='OTHER')
    base_weight_kg = db.Column(db.Float, nullable=False, default=DEFAULT_BASE_WEIGHT_KG)
    cook_time_minutes = db.Column(db.Float, nullable=False, default=0.0)
    temperature = db.Column(db.Float, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    image_url = db.Column(db.String(512), nullable=True)
    yield_ratio = db.Column(db.Float, nullable=True)
    default_pack_size_kg = db.Column(db.Float, nullable=True)

    __table_args__ = (
        db.UniqueConstraint('organization_id', 'name', name='uq_recipe_org_name'),
    )

    @property
    def effective_base_weight_kg(self) -> float:
        return self.base_weight_kg or DEFAULT_BASE_WEIGHT_KG

    def __repr__(self):
        return f'<Recipe {self.name}>'
