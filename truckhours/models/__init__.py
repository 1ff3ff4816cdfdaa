"""
SQLAlchemy models for truckhours.
"""
from truckhours.models.food_truck import FoodTruck


__all__ = [
    "FoodTruck",
]
