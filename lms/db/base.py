# import models so SQLAlchemy registers them on Base.metadata
from lms.db.base_class import Base  # noqa: F401
from lms.models import (  # noqa: F401
    assignment,
    course,
    enrollment,
    lesson,
    progress,
    submission,
    subscription,
    user,
)
