"""Field codec adapter for transforming between records and NetBox payloads.

This adapter implements IFieldCodec for any record type described by a
ResourceSchema. All per-kind knowledge lives in the schema table; the codec
itself only knows how each FieldKind is validated, encoded, and decoded.
"""

import dataclasses
from collections.abc import Mapping
from typing import Any, Optional

from ...api.exceptions import InvalidValueError, UnknownReferenceError, ValidationError
from ..domain.entities import (
    UNSET,
    FieldChange,
    FieldKind,
    FieldSpec,
    ResourceSchema,
    is_empty,
)
from ..domain.ports import IFieldCodec


class FieldCodec(IFieldCodec):
    """Maps declarative records to NetBox payloads and back.

    This class handles:
    - Required-field, type, choice, and length validation
    - Default values for unset optional fields
    - Reference fields sent as bare ids (or null when explicitly cleared)
    - Nested object flattening on decode (``{"id": ..}``, ``{"value": ..}``)
    - Tag name resolution via a caller-supplied name -> id mapping
    - Whitespace-insensitive comparison for free-text fields
    """

    def __init__(self, schema: ResourceSchema, resource_type: str = "resource"):
        """Initialize the codec.

        Args:
            schema: Field table for the record type
            resource_type: Human-readable kind name used in error messages
        """
        self.schema = schema
        self.resource_type = resource_type

    # ----------------------------------------
    # Validation
    # ----------------------------------------

    def validate(self, record: Any) -> None:
        """Validate a record before it is encoded.

        Raises:
            ValidationError: If the record has the wrong type, a required field
                is missing, or a value has the wrong type or length
            InvalidValueError: If a choice field is outside its allowed set
        """
        self._check_type(record)

        for spec in self.schema.writable:
            value = getattr(record, spec.name)

            if spec.required and is_empty(value):
                raise ValidationError(
                    f"{spec.name} is required for {self.resource_type}",
                    field=spec.name,
                )

            if value is UNSET:
                continue

            if value is None:
                if spec.kind != FieldKind.REFERENCE:
                    raise ValidationError(
                        f"{spec.name} cannot be null",
                        field=spec.name,
                    )
                continue

            self._validate_value(spec, value)

    def _check_type(self, record: Any) -> None:
        if not isinstance(record, self.schema.record_type):
            raise ValidationError(
                f"expected {self.schema.record_type.__name__}, got {type(record).__name__}",
            )

    def _validate_value(self, spec: FieldSpec, value: Any) -> None:
        kind = spec.kind

        if kind in (FieldKind.STRING, FieldKind.CHOICE):
            if not isinstance(value, str):
                raise ValidationError(f"{spec.name} must be a string", field=spec.name)
        elif kind in (FieldKind.INT, FieldKind.REFERENCE):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(f"{spec.name} must be an integer", field=spec.name)
        elif kind == FieldKind.FLOAT:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValidationError(f"{spec.name} must be a number", field=spec.name)
        elif kind == FieldKind.BOOL:
            if not isinstance(value, bool):
                raise ValidationError(f"{spec.name} must be a boolean", field=spec.name)
        elif kind == FieldKind.TAGS:
            if isinstance(value, str) or not all(isinstance(name, str) for name in value):
                raise ValidationError(f"{spec.name} must be a list of tag names", field=spec.name)

        if kind == FieldKind.REFERENCE and value <= 0:
            raise ValidationError(
                f"{spec.name} must be a positive id, use None to clear it",
                field=spec.name,
            )

        if kind == FieldKind.CHOICE and spec.choices and value not in spec.choices:
            raise InvalidValueError(spec.name, value, allowed=list(spec.choices))

        if isinstance(value, str):
            if spec.min_length is not None and len(value) < spec.min_length:
                raise ValidationError(
                    f"{spec.name} must be at least {spec.min_length} characters",
                    field=spec.name,
                )
            if spec.max_length is not None and len(value) > spec.max_length:
                raise ValidationError(
                    f"{spec.name} must be at most {spec.max_length} characters",
                    field=spec.name,
                )

    # ----------------------------------------
    # Encode / Decode
    # ----------------------------------------

    def normalize(self, record: Any) -> Any:
        """Return the record with tag lists frozen into tuples.

        Raises:
            ValidationError: If the record is not of the schema's record type
        """
        self._check_type(record)

        changes = {}
        for spec in self.schema.fields:
            value = getattr(record, spec.name)
            if spec.kind == FieldKind.TAGS and isinstance(value, list):
                changes[spec.name] = tuple(value)
        return dataclasses.replace(record, **changes) if changes else record

    def tag_names(self, record: Any) -> list[str]:
        """All tag names a record refers to, in declaration order."""
        names: list[str] = []
        for spec in self.schema.writable:
            if spec.kind != FieldKind.TAGS:
                continue
            value = getattr(record, spec.name)
            if is_empty(value):
                continue
            for name in value:
                if name not in names:
                    names.append(name)
        return names

    def encode(self, record: Any, tag_ids: Optional[Mapping[str, int]] = None) -> dict[str, Any]:
        """Transform a record to a NetBox write payload.

        Unset optional fields are sent with their declared default, or
        derived from other fields, or left out entirely. Computed fields are
        never sent.

        Args:
            record: Record of the schema's record type
            tag_ids: Tag name -> id mapping for TAGS fields

        Returns:
            JSON-ready payload dictionary

        Raises:
            ValidationError: See validate()
            InvalidValueError: See validate()
            UnknownReferenceError: If a tag name has no id in tag_ids
        """
        self.validate(record)

        payload: dict[str, Any] = {}
        for spec in self.schema.writable:
            value = getattr(record, spec.name)
            if value is UNSET:
                if spec.derive is not None:
                    value = spec.derive(record)
                    if is_empty(value):
                        raise ValidationError(
                            f"{spec.name} could not be generated, set it explicitly",
                            field=spec.name,
                        )
                    self._validate_value(spec, value)
                elif spec.default is not UNSET:
                    value = spec.default
                else:
                    continue
            payload[spec.key] = self._encode_value(spec, value, tag_ids)
        return payload

    def _encode_value(
        self,
        spec: FieldSpec,
        value: Any,
        tag_ids: Optional[Mapping[str, int]],
    ) -> Any:
        if value is None:
            return None
        if spec.kind == FieldKind.FLOAT:
            return float(value)
        if spec.kind == FieldKind.TAGS:
            tag_ids = tag_ids or {}
            missing = [name for name in value if name not in tag_ids]
            if missing:
                raise UnknownReferenceError("tag", missing)
            return [{"id": tag_ids[name], "name": name} for name in value]
        return value

    def decode(self, payload: Mapping[str, Any]) -> Any:
        """Transform a NetBox payload to a record.

        Keys missing from the payload decode to UNSET.

        Args:
            payload: Entity dictionary from the API

        Returns:
            Record of the schema's record type
        """
        values = {}
        for spec in self.schema.fields:
            if spec.key not in payload:
                continue
            values[spec.name] = self._decode_value(spec, payload[spec.key])
        return self.schema.record_type(**values)

    @staticmethod
    def _decode_value(spec: FieldSpec, raw: Any) -> Any:
        if raw is None:
            return () if spec.kind == FieldKind.TAGS else None

        kind = spec.kind
        if kind == FieldKind.REFERENCE:
            if isinstance(raw, Mapping):
                return raw.get("id")
            return int(raw)
        if kind == FieldKind.CHOICE:
            if isinstance(raw, Mapping):
                return raw.get("value")
            return raw
        if kind == FieldKind.TAGS:
            return tuple(tag["name"] if isinstance(tag, Mapping) else str(tag) for tag in raw)
        if kind == FieldKind.FLOAT:
            return float(raw)
        if kind == FieldKind.INT:
            return int(raw)
        return raw

    # ----------------------------------------
    # Comparison
    # ----------------------------------------

    @staticmethod
    def values_equal(spec: FieldSpec, old: Any, new: Any) -> bool:
        """Compare two values of a field, honouring diff suppression."""
        if spec.trim_equal and isinstance(old, str) and isinstance(new, str):
            return old.strip() == new.strip()
        if spec.kind == FieldKind.TAGS and not isinstance(old, str) and not isinstance(new, str):
            try:
                return set(old or ()) == set(new or ())
            except TypeError:
                return False
        if spec.kind == FieldKind.FLOAT and old is not None and new is not None \
                and old is not UNSET and new is not UNSET:
            return float(old) == float(new)
        return old == new

    def diff(self, old: Optional[Any], new: Any) -> list[FieldChange]:
        """Fields whose desired value differs from the stored value.

        A desired UNSET is never a change unless the field declares a
        default, in which case the default is the desired value.
        """
        changes = []
        for spec in self.schema.writable:
            new_value = getattr(new, spec.name)
            if new_value is UNSET:
                if spec.default is UNSET:
                    continue
                new_value = spec.default
            old_value = getattr(old, spec.name) if old is not None else UNSET
            if not self.values_equal(spec, old_value, new_value):
                changes.append(FieldChange(spec.name, old_value, new_value))
        return changes

    def reconcile(self, prior: Optional[Any], remote: Any) -> Any:
        """Merge a freshly decoded remote record into the prior record.

        The remote value wins, except that a trim-equal text field keeps the
        prior spelling when it differs only by surrounding whitespace, tags
        keep the prior order when they hold the same names, and a field the
        prior record left UNSET stays UNSET while the remote value is empty.
        """
        values = {}
        for spec in self.schema.fields:
            remote_value = getattr(remote, spec.name)
            prior_value = getattr(prior, spec.name) if prior is not None else UNSET

            if prior_value is UNSET and is_empty(remote_value):
                values[spec.name] = UNSET
            elif prior_value is not UNSET and self.values_equal(spec, prior_value, remote_value) \
                    and spec.kind in (FieldKind.STRING, FieldKind.TAGS):
                values[spec.name] = prior_value
            else:
                values[spec.name] = remote_value
        return self.schema.record_type(**values)
