# app/models/__init__.py
# Import all models here so SQLAlchemy registers them into Base.metadata.

from app.models.admin_user import AdminUser  # noqa: F401

from app.models.discount import Discount  # noqa: F401
from app.models.discount_limit import DiscountLimit  # noqa: F401
from app.models.discount_usage import DiscountUsage  # noqa: F401
