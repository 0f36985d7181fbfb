from app.repositories.base import Repository
from app.repositories.category import CategoryRepository
from app.repositories.identity import RoleRepository, UserRepository
from app.repositories.product import ProductRepository
from app.repositories.tag import TagRepository
from app.repositories.unit_of_work import UnitOfWork

__all__ = [
    "Repository",
    "CategoryRepository",
    "RoleRepository",
    "UserRepository",
    "ProductRepository",
    "TagRepository",
    "UnitOfWork",
]
