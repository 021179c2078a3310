"""Inflection adapter used for association key names."""

from typing import Protocol, runtime_checkable

import inflection


@runtime_checkable
class Inflector(Protocol):
    """English word inflection needed by the key transformers."""

    def tableize(self, name: str) -> str:
        ...

    def singularize(self, name: str) -> str:
        ...


class InflectionInflector:
    """Inflector backed by the ``inflection`` package.

    Example:
        >>> inflector = InflectionInflector()
        >>> inflector.tableize("BlogPost")
        'blog_posts'
        >>> inflector.singularize("blog_posts")
        'blog_post'
    """

    def tableize(self, name: str) -> str:
        return inflection.tableize(name)

    def singularize(self, name: str) -> str:
        return inflection.singularize(name)
