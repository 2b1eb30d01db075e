"""Shared schemas for roundtrip_ini."""

from roundtrip_ini.schemas.tree import NumberValue, Property, Section, StringValue, Value

__all__ = ["NumberValue", "Property", "Section", "StringValue", "Value"]
