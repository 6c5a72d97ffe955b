"""
Index Column SQLAlchemy Models
==============================

ORM model for wide-column rows stored in a relational table.

One SQL row per (row_key, column_name), so a wide-column row is the set of
SQL rows sharing row_key, ordered by column_name. Separate tables per
environment:
- location_index_test
- location_index_prod
"""

from typing import Dict, Type

from sqlalchemy import BigInteger, Column, LargeBinary, PrimaryKeyConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Cache of dynamic models (a table can only be mapped once per metadata)
_model_cache: Dict[str, Type["IndexColumnBase"]] = {}


class IndexColumnBase:
    """
    Columns shared by every index table model.

    Do NOT use directly, call get_index_column_model().
    """

    row_key = Column(LargeBinary, nullable=False)
    column_name = Column(LargeBinary, nullable=False)
    column_value = Column(LargeBinary, nullable=False)
    write_time = Column(BigInteger, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<IndexColumn(row_key={self.row_key[:16]!r}..., "
            f"column_name={self.column_name[:16]!r}..., "
            f"write_time={self.write_time})>"
        )


def get_index_column_model(table_name: str = "location_index") -> Type[IndexColumnBase]:
    """
    Return the ORM model mapped to table_name, creating it on first use.

    Example:
        >>> TestModel = get_index_column_model("location_index_test")
        >>> ProdModel = get_index_column_model("location_index_prod")
    """
    if table_name in _model_cache:
        return _model_cache[table_name]

    model_class = type(
        f"IndexColumn_{table_name}",
        (IndexColumnBase, Base),
        {
            "__tablename__": table_name,
            "__table_args__": (
                PrimaryKeyConstraint("row_key", "column_name", name=f"{table_name}_pkey"),
            ),
        },
    )

    _model_cache[table_name] = model_class
    return model_class
