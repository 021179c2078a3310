"""Key transformers applied to every container."""

from abc import ABC, abstractmethod
from typing import Optional

from api_transform.transform.inflector import InflectionInflector, Inflector
from api_transform.transform.values import (
    AssociationShape,
    Container,
    association_shape,
    is_record,
)


class KeyTransformer(ABC):
    """Rewrites the keys of a container.

    Called for records and lists alike. Lists have no string keys, so
    implementations return them unchanged.
    """

    @abstractmethod
    def apply(self, container: Container) -> Container:
        """Transform the keys of a container."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class AssociationKeyRename(KeyTransformer):
    """Renames association keys to API style field names.

    Given the associations:

        User hasMany Comment
        Comment belongsTo Post

    the keys are replaced as follows:

        Comment -> comments (list value, plural)
          Post -> post (record value, singular)

    Keys holding scalar values are primary fields and are left alone.
    """

    def __init__(self, inflector: Optional[Inflector] = None):
        self.inflector = inflector or InflectionInflector()

    def rename(self, key: str, value) -> str:
        """Return the API name for an association key."""
        name = self.inflector.tableize(key)
        if association_shape(value) is AssociationShape.SINGLE:
            name = self.inflector.singularize(name)
        return name

    def apply(self, container: Container) -> Container:
        if not is_record(container):
            return container

        keys = list(container.keys())
        replaced = False

        for i, key in enumerate(keys):
            value = container[key]
            if not isinstance(key, str) or association_shape(value) is None:
                continue
            keys[i] = self.rename(key, value)
            replaced = True

        if not replaced:
            return container

        return dict(zip(keys, container.values()))
