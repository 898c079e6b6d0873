# Import every model so Base.metadata knows all tables (used by init_db, alembic, tests)
from classbook.db.base_class import Base  # noqa: F401
from classbook.models import gradable_item, submission, user  # noqa: F401
