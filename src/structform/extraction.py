#!/usr/bin/env python3
"""
Structform Field Extraction

Resolve the ordered field descriptors of a record from its annotations.
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
import sys
import types
from typing import (
    Annotated, Any, Dict, Iterable, List, Optional, Union,
    get_args, get_origin, get_type_hints,
)

from pydantic import BaseModel

from .exceptions import InvalidInputError
from .models import DescribesFields, FieldDescriptor, FormField


logger = logging.getLogger(__name__)

# Dataclass field metadata keys
FORM_KEY = "form"
FILENAME_KEY = "filename"


# ============================================================================
# Annotation Lookup
# ============================================================================

def find_form_field(metadata: Iterable[Any]) -> Optional[FormField]:
    """
    Return the first FormField among annotation metadata.

    FormField may appear as a class (bare marker) or as an instance.
    """
    for item in metadata:
        if isinstance(item, FormField):
            return item
        if item is FormField:
            return FormField()
    return None


def form_field_from_hint(hint: Any) -> Optional[FormField]:
    """
    Find a FormField inside a type hint.

    Looks at Annotated metadata, descending into Optional/Union members.
    """
    origin = get_origin(hint)
    if origin is Annotated:
        # args[0] is the actual type, args[1:] are metadata
        return find_form_field(get_args(hint)[1:])
    if origin is Union or origin is types.UnionType:
        for member in get_args(hint):
            found = form_field_from_hint(member)
            if found is not None:
                return found
    return None


def _annotated_hints(cls: type) -> Optional[Dict[str, Any]]:
    try:
        return get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as e:
        # Some forward reference is unresolvable; fields get resolved one by one
        logger.debug(f"Could not resolve type hints for {cls.__name__}: {e}")
        return None


def _resolve_field_hint(cls: type, field_info: dataclasses.Field) -> Any:
    """
    Resolve the annotation of a single dataclass field.

    String annotations are evaluated in the namespaces of the class that
    declares the field, as get_type_hints() does.

    Raises:
        InvalidInputError: If an unresolvable annotation carries FormField
    """
    hint = field_info.type
    if not isinstance(hint, str):
        return hint

    owner = next(
        (base for base in cls.__mro__ if field_info.name in inspect.get_annotations(base)),
        cls,
    )
    module = sys.modules.get(owner.__module__)
    try:
        return eval(hint, dict(getattr(module, '__dict__', {})), dict(vars(owner)))
    except Exception as e:
        if FormField.__name__ in hint:
            raise InvalidInputError(
                f"cannot resolve FormField annotation of "
                f"{cls.__name__}.{field_info.name}: {e}"
            ) from e
        logger.debug(f"Could not resolve type hint of {cls.__name__}.{field_info.name}: {e}")
        return None


# ============================================================================
# Descriptor Extraction
# ============================================================================

def descriptors_from_dataclass(record: Any) -> List[FieldDescriptor]:
    """
    Build descriptors for a dataclass instance.

    Annotated FormField metadata wins over dataclasses.field(metadata=...)
    keys "form" and "filename".
    """
    hints = _annotated_hints(type(record))
    descriptors = []

    for field_info in dataclasses.fields(record):
        if field_info.name.startswith('_'):
            continue

        if hints is not None:
            hint = hints.get(field_info.name)
        else:
            hint = _resolve_field_hint(type(record), field_info)

        form = form_field_from_hint(hint) or FormField()
        descriptors.append(FieldDescriptor.resolve(
            field_info.name,
            name=form.name or field_info.metadata.get(FORM_KEY),
            filename=form.filename or field_info.metadata.get(FILENAME_KEY),
        ))

    return descriptors


def descriptors_from_model(record: BaseModel) -> List[FieldDescriptor]:
    """
    Build descriptors for a pydantic model instance.

    A field alias acts as the wire name when FormField gives none.
    """
    descriptors = []

    for field_name, info in type(record).model_fields.items():
        if field_name.startswith('_'):
            continue

        # Pydantic keeps unknown Annotated metadata in FieldInfo.metadata
        form = (
            find_form_field(info.metadata)
            or form_field_from_hint(info.annotation)
            or FormField()
        )
        descriptors.append(FieldDescriptor.resolve(
            field_name,
            name=form.name or info.serialization_alias or info.alias,
            filename=form.filename,
        ))

    return descriptors


def extract_descriptors(record: Any) -> List[FieldDescriptor]:
    """
    Resolve the field descriptors of a record, in declaration order.

    Args:
        record: A dataclass instance, a pydantic model instance, or an object
                implementing describe_fields()

    Returns:
        List of FieldDescriptor, skipped fields included

    Raises:
        InvalidInputError: If the record is not a supported structure
    """
    if isinstance(record, type):
        raise InvalidInputError(
            f"record must be an instance, got class {record.__name__}"
        )

    if isinstance(record, DescribesFields):
        return list(record.describe_fields())

    if isinstance(record, BaseModel):
        return descriptors_from_model(record)

    if dataclasses.is_dataclass(record):
        return descriptors_from_dataclass(record)

    raise InvalidInputError(
        "record must be a dataclass, a pydantic model or implement "
        f"describe_fields(), got {type(record).__name__}"
    )
