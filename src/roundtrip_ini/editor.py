"""Structural edits on a Document, addressed by "section/key" paths.

A path without a separator targets the global scope. Property and section
names live in separate namespaces: a property path never matches a section
and a section name never matches a property.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterator, Sequence, TypeVar

from pydantic import TypeAdapter

from roundtrip_ini.config import PATH_SEPARATOR
from roundtrip_ini.schemas import NumberValue, Property, Section, StringValue, Value

if TYPE_CHECKING:
    from roundtrip_ini.document import Document

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

_VALUE_ADAPTER: TypeAdapter[StringValue | NumberValue] = TypeAdapter(Value)


def split_path(path: str) -> tuple[str, str]:
    """Split ``path`` into ``(section, key)``.

    The split happens at the last separator, so "key" and "/key" both give
    an empty section (global scope).
    """
    section, _, key = path.rpartition(PATH_SEPARATOR)
    return section, key


def _property_index(properties: Sequence[Property], key: str) -> int | None:
    for index, prop in enumerate(properties):
        if prop.key == key:
            return index
    return None


def _section_index(sections: Sequence[Section], name: str) -> int | None:
    for index, section in enumerate(sections):
        if section.name == name:
            return index
    return None


def _remove_at(items: list[_T], index: int) -> _T:
    if not 0 <= index < len(items):
        raise IndexError(f"index {index} out of range for {len(items)} items")
    return items.pop(index)


def _scope(document: Document, section: str) -> list[Property] | None:
    """Return the property list a path's section part refers to."""
    if not section:
        return document.properties
    index = _section_index(document.sections, section)
    if index is None:
        return None
    return document.sections[index].properties


def lookup(document: Document, path: str) -> Property | None:
    """Return the first property matching ``path``, or None."""
    section, key = split_path(path)
    properties = _scope(document, section)
    if properties is None:
        return None
    index = _property_index(properties, key)
    if index is None:
        return None
    return properties[index]


def lookup_section(document: Document, name: str) -> Section | None:
    """Return the first section called ``name``, or None."""
    index = _section_index(document.sections, name)
    if index is None:
        return None
    return document.sections[index]


def add(document: Document, path: str, value: StringValue | NumberValue) -> Property:
    """Set the value of ``path``.

    An existing property keeps its comments and blank lines and only has its
    value replaced; the new value may be of a different type. A missing
    property is appended to its scope. A missing section is appended to the
    document holding just the new property. The tree stores a copy of
    ``value``, so one value object can be added at several paths.

    Returns:
        The property holding the new value.

    Raises:
        ValueError: If the key part of ``path`` is empty.
        pydantic.ValidationError: If ``value`` is not a string or number value.
    """
    section, key = split_path(path)
    if not key:
        raise ValueError(f"path {path!r} has an empty key")
    value = _VALUE_ADAPTER.validate_python(value).model_copy()
    properties = _scope(document, section)

    if properties is None:
        prop = Property(key=key, value=value)
        document.sections.append(Section(name=section, properties=[prop]))
        logger.debug("Created section %r for %r", section, path)
        return prop

    index = _property_index(properties, key)
    if index is not None:
        prop = properties[index]
        prop.value = value
        logger.debug("Replaced value of %r", path)
        return prop

    prop = Property(key=key, value=value)
    properties.append(prop)
    logger.debug("Appended %r", path)
    return prop


def remove(document: Document, path: str) -> None:
    """Delete the first property matching ``path`` with its comments and blank lines."""
    section, key = split_path(path)
    properties = _scope(document, section)
    if properties is None:
        return
    index = _property_index(properties, key)
    if index is None:
        return
    _remove_at(properties, index)
    logger.debug("Removed %r", path)


def remove_section(document: Document, name: str) -> None:
    """Delete the first section called ``name`` and everything it holds."""
    index = _section_index(document.sections, name)
    if index is None:
        return
    removed = _remove_at(document.sections, index)
    logger.debug("Removed section %r with %d properties", name, len(removed.properties))


def iter_properties(document: Document) -> Iterator[tuple[str, Property]]:
    """Yield ``(path, property)`` for every property in file order."""
    for prop in document.properties:
        yield prop.key, prop
    for section in document.sections:
        for prop in section.properties:
            yield f"{section.name}{PATH_SEPARATOR}{prop.key}", prop
