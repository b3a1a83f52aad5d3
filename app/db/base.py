# /app/db/base.py

# Central registry for all SQLAlchemy models. Importing them here makes sure
# Base.metadata knows about every table before create_all or an Alembic
# autogenerate scan runs.

from .base_class import Base

from .models.roster_models import Student, Teacher, TeacherSubject
from .models.rating_models import Rating
from .models.auth_models import User, OtpCode
