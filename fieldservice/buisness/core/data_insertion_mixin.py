"""
Generic data insertion mixin for SQLAlchemy models
Provides from_dict and to_dict methods keyed by mapped attribute names.

Several tables keep their legacy Portuguese column names (``nome``,
``quantidade``...) behind English attributes, so everything here works on
``mapper.column_attrs`` and never on raw column names.
"""

from fieldservice import db
from datetime import datetime
from enum import Enum
from sqlalchemy import inspect
from fieldservice.utils.logger import get_logger

logger = get_logger("fieldservice.buisness.core.data_insertion")


class DataInsertionMixin:
    """
    Mixin that provides generic data insertion capabilities for SQLAlchemy models

    This mixin adds:
    - from_dict(): Create model instance from dictionary
    - to_dict(): Convert model instance to dictionary
    - create_from_dict(): Create and save model instance from dictionary
    """

    @classmethod
    def _attribute_keys(cls):
        return [attr.key for attr in inspect(cls).column_attrs]

    @classmethod
    def from_dict(cls, data_dict, skip_fields=None):
        """
        Create a model instance from a dictionary

        Args:
            data_dict (dict): Dictionary containing model data
            skip_fields (list, optional): Fields to skip during creation

        Returns:
            Model instance (not saved to database)
        """
        if skip_fields is None:
            skip_fields = []

        attribute_keys = set(cls._attribute_keys())

        filtered_data = {}
        for key, value in data_dict.items():
            if key not in attribute_keys or key in skip_fields:
                continue
            if key == 'created_at' and value is None:
                continue
            filtered_data[key] = value

        instance = cls(**filtered_data)

        # Passwords never map to a column directly
        if 'password' in data_dict and hasattr(instance, 'set_password'):
            instance.set_password(data_dict['password'])

        return instance

    def to_dict(self, exclude=None):
        """
        Convert model instance to dictionary

        Args:
            exclude (iterable, optional): Attribute names left out of the result

        Returns:
            dict: Dictionary representation of the model
        """
        exclude = set(exclude or ())
        result = {}

        for key in self._attribute_keys():
            if key in exclude:
                continue
            value = getattr(self, key)

            if isinstance(value, datetime):
                result[key] = value.isoformat()
            elif isinstance(value, Enum):
                # Enum members serialize as their stored value
                result[key] = value.value
            else:
                result[key] = value

        return result

    @classmethod
    def create_from_dict(cls, data_dict, skip_fields=None, commit=True):
        """
        Create and save a model instance from dictionary

        Args:
            data_dict (dict): Dictionary containing model data
            skip_fields (list, optional): Fields to skip during creation
            commit (bool): Whether to commit the transaction

        Returns:
            Model instance (saved to database)
        """
        instance = cls.from_dict(data_dict, skip_fields)

        try:
            db.session.add(instance)
            if commit:
                db.session.commit()
                logger.info(f"Created {cls.__name__}: {instance}")
            return instance
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error creating {cls.__name__}: {e}")
            raise
