# /app/db/base_class.py

"""
The declarative Base every ORM model inherits from.

Table names are derived from the class name (`Student` -> `students`) unless a
model sets `__tablename__` itself.
"""

from sqlalchemy.orm import DeclarativeBase, declared_attr


class Base(DeclarativeBase):
    @declared_attr.directive
    def __tablename__(cls) -> str:
        return f"{cls.__name__.lower()}s"
