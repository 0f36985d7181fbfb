from app.specifications.base import Specification, clamp_page, contains_text
from app.specifications.category import (
    CategoryByNameInParentSpecification,
    CategoryBySlugSpecification,
    CategoryListSpecification,
    ChildCategoriesSpecification,
)
from app.specifications.identity import (
    RoleByNameSpecification,
    RoleListSpecification,
    UserByUsernameSpecification,
    UserListSpecification,
)
from app.specifications.product import (
    FeaturedProductsSpecification,
    OutOfStockProductsSpecification,
    ProductBySkuSpecification,
    ProductFilter,
    ProductListSpecification,
    ProductsInCategorySpecification,
    PublishedProductsSpecification,
)
from app.specifications.tag import (
    TagByNameSpecification,
    TagBySlugSpecification,
    TagListSpecification,
)
