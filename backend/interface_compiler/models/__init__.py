"""Import all models so SQLAlchemy metadata knows about them."""
from interface_compiler.models.base import Base
from interface_compiler.models.ui_schema import UISchema

__all__ = ["Base", "UISchema"]
