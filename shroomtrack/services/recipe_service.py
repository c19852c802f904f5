from __future__ import annotations

from ..models import RECIPE_TYPES, Recipe
from ..utils.code_generator import generate_record_id
from ..utils.validation_helpers import finite_number
from .base_service import BaseService
from .errors import NotFound, ValidationError
from .results import service_operation

DEFAULT_RECIPES = (
    {
        'name': 'Original Sea Salt Chips',
        'type': 'CHIPS',
        'base_weight_kg': 0.5,
        'cook_time_minutes': 10,
        'temperature': 160,
        'notes': 'Classic crispy fried oyster mushroom chips with sea salt.',
    },
    {
        'name': 'Spicy Mala Chips',
        'type': 'CHIPS',
        'base_weight_kg': 0.5,
        'cook_time_minutes': 12,
        'temperature': 155,
        'notes': 'Fried chips tossed in mala seasoning.',
    },
    {
        'name': 'Premium Whole Dried',
        'type': 'DRIED',
        'base_weight_kg': 0.5,
        'cook_time_minutes': 20,
        'temperature': 45,
        'notes': 'Low temperature dehydration, whole caps.',
    },
)

_NUMERIC_FIELDS = ('base_weight_kg', 'cook_time_minutes', 'temperature', 'yield_ratio', 'default_pack_size_kg')
_TEXT_FIELDS = ('notes', 'image_url')


class RecipeService(BaseService):

    def find_by_name(self, name: str):
        for recipe in self.repository.list(Recipe):
            if recipe.name == name:
                return recipe
        return None

    def _validated(self, fields: dict) -> dict:
        values = {}
        if 'name' in fields:
            name = (fields.get('name') or '').strip()
            if not name:
                raise ValidationError('Recipe name is required')
            values['name'] = name
        if 'type' in fields:
            recipe_type = (fields.get('type') or '').upper()
            if recipe_type not in RECIPE_TYPES:
                raise ValidationError(f"Recipe type must be one of {', '.join(RECIPE_TYPES)}")
            values['type'] = recipe_type
        for field in _NUMERIC_FIELDS:
            if field not in fields or fields[field] is None:
                continue
            values[field] = finite_number(
                field, fields[field], minimum=0, positive=field == 'base_weight_kg'
            )
        for field in _TEXT_FIELDS:
            if field in fields:
                values[field] = fields[field]
        return values

    @service_operation
    def list_recipes(self):
        return sorted(self.repository.list(Recipe), key=lambda r: r.name.lower())

    @service_operation
    def add_recipe(self, name, type='OTHER', base_weight_kg=0.5, cook_time_minutes=0.0, temperature=None,
                   notes=None, image_url=None, yield_ratio=None, default_pack_size_kg=None):
        values = self._validated({
            'name': name,
            'type': type,
            'base_weight_kg': base_weight_kg,
            'cook_time_minutes': cook_time_minutes,
            'temperature': temperature,
            'notes': notes,
            'image_url': image_url,
            'yield_ratio': yield_ratio,
            'default_pack_size_kg': default_pack_size_kg,
        })
        if self.find_by_name(values['name']):
            raise ValidationError(f"Recipe '{values['name']}' already exists")

        recipe = Recipe(
            id=generate_record_id('recipe'),
            organization_id=self.organization_id,
            **values,
        )
        self.repository.add(recipe)
        self.log_operation('add_recipe', {'recipe_id': recipe.id, 'name': recipe.name})
        return recipe

    @service_operation
    def update_recipe(self, recipe_id: str, fields: dict):
        recipe = self.repository.get(Recipe, recipe_id)
        if recipe is None:
            raise NotFound(f"Recipe {recipe_id} not found")
        values = self._validated(fields or {})
        new_name = values.get('name')
        if new_name and new_name != recipe.name:
            clash = self.find_by_name(new_name)
            if clash is not None and clash.id != recipe.id:
                raise ValidationError(f"Recipe '{new_name}' already exists")
        for attribute, value in values.items():
            setattr(recipe, attribute, value)
        self.repository.save(recipe)
        self.log_operation('update_recipe', {'recipe_id': recipe.id, 'fields': sorted(values)})
        return recipe

    @service_operation
    def delete_recipe(self, recipe_id: str):
        recipe = self.repository.get(Recipe, recipe_id)
        if recipe is None:
            raise NotFound(f"Recipe {recipe_id} not found")
        self.repository.delete(recipe)
        self.log_operation('delete_recipe', {'recipe_id': recipe_id})
        return recipe_id

    @service_operation
    def seed_default_recipes(self):
        """Add the stock recipes that are missing; existing names are left alone."""
        created = []
        for template in DEFAULT_RECIPES:
            if self.find_by_name(template['name']):
                continue
            recipe = Recipe(id=generate_record_id('recipe'), organization_id=self.organization_id,
                            yield_ratio=None, default_pack_size_kg=None, image_url=None, **template)
            self.repository.add(recipe)
            created.append(recipe)
        if created:
            self.log_operation('seed_default_recipes', {'created': [r.name for r in created]})
        return created
