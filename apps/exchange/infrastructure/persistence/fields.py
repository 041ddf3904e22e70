"""
Custom model fields for persistence.
"""

from django.db import models


class ExactDecimalField(models.DecimalField):
    """
    DecimalField that keeps every declared digit on every backend.

    SQLite stores numeric columns as 8-byte floats, which hold about 15
    significant digits, so a wide decimal comes back rounded. On SQLite this
    field uses a text column holding the plain decimal string instead.
    Other backends get the usual ``numeric(max_digits, decimal_places)``.

    Text columns compare as strings on SQLite, so do not order or range
    filter on this field there.
    """

    def get_internal_type(self):
        # Not "DecimalField", so the SQLite backend does not attach its
        # 15-digit float converter to this column.
        return "ExactDecimalField"

    def db_type(self, connection):
        if connection.vendor == "sqlite":
            return "text"
        return connection.data_types["DecimalField"] % self.db_type_parameters(connection)

    def get_db_prep_value(self, value, connection, prepared=False):
        if connection.vendor != "sqlite":
            return super().get_db_prep_value(value, connection, prepared)
        if not prepared:
            value = self.get_prep_value(value)
        if value is None:
            return None
        return format(value, "f")

    def get_db_prep_save(self, value, connection):
        if hasattr(value, "as_sql"):
            return value
        return self.get_db_prep_value(value, connection)

    def from_db_value(self, value, expression, connection):
        return self.to_python(value)
