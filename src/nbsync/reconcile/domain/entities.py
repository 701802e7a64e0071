"""Domain entities for resource reconciliation.

These are pure data structures with no infrastructure dependencies.
They describe the declarative records managed against NetBox and the
field schema the codec uses to translate them.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class _Unset:
    """Marker for an optional field the caller did not set.

    Distinct from ``None`` (explicitly cleared) and ``""`` (explicitly empty).
    """

    _instance: Optional["_Unset"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return (_Unset, ())


UNSET: Any = _Unset()


def is_set(value: Any) -> bool:
    """True unless the value is the UNSET marker."""
    return value is not UNSET


def is_empty(value: Any) -> bool:
    """True for values that carry no information (unset, None, "", [])."""
    return value is UNSET or value is None or value == "" or value == [] or value == ()


# ============================================
# Field Schema
# ============================================


class FieldKind(str, Enum):
    """Value kinds a schema field can hold."""

    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    CHOICE = "choice"  # string restricted to an allowed set
    REFERENCE = "reference"  # integer id of another NetBox object
    TAGS = "tags"  # ordered list of tag names


@dataclass(frozen=True)
class FieldSpec:
    """Declaration of one record field and its API counterpart.

    Attributes:
        name: Attribute name on the record dataclass
        kind: Value kind
        api_name: Key in the API payload (defaults to name)
        required: Must be set before encode
        default: Value sent when the field is UNSET (UNSET = no default)
        choices: Allowed values for CHOICE fields
        trim_equal: Compare with surrounding whitespace ignored
        computed: Populated by the service only; never sent
        min_length: Minimum string length when set
        max_length: Maximum string length when set
        derive: Computes the value sent when the field is UNSET, from the
            whole record (takes precedence over default)
    """

    name: str
    kind: FieldKind = FieldKind.STRING
    api_name: Optional[str] = None
    required: bool = False
    default: Any = UNSET
    choices: tuple[str, ...] = ()
    trim_equal: bool = False
    computed: bool = False
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    derive: Optional[Callable[[Any], Any]] = None

    @property
    def key(self) -> str:
        """Payload key for this field."""
        return self.api_name or self.name


@dataclass(frozen=True)
class ResourceSchema:
    """Ordered field table for one record type."""

    record_type: type
    fields: tuple[FieldSpec, ...]

    def field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(name)

    @property
    def writable(self) -> tuple[FieldSpec, ...]:
        return tuple(spec for spec in self.fields if not spec.computed)

    @property
    def required(self) -> tuple[FieldSpec, ...]:
        return tuple(spec for spec in self.fields if spec.required)


# ============================================
# Declarative Records
# ============================================


@dataclass(frozen=True)
class IPRangeRecord:
    """Desired state of a NetBox IP range.

    Addresses use NetBox notation, usually with a prefix length
    (e.g., "10.0.0.1/24").
    """

    start_address: str = UNSET
    end_address: str = UNSET
    status: str = UNSET
    tenant_id: Optional[int] = UNSET
    role_id: Optional[int] = UNSET
    vrf_id: Optional[int] = UNSET
    description: str = UNSET
    comments: str = UNSET
    tags: tuple[str, ...] = UNSET


@dataclass(frozen=True)
class DeviceTypeRecord:
    """Desired state of a NetBox device type (a hardware make and model)."""

    model: str = UNSET
    manufacturer_id: int = UNSET
    slug: str = UNSET
    part_number: str = UNSET
    u_height: float = UNSET
    is_full_depth: bool = UNSET
    tags: tuple[str, ...] = UNSET


@dataclass(frozen=True)
class VlanGroupRecord:
    """A NetBox VLAN group as resolved by a lookup."""

    name: str = UNSET
    slug: str = UNSET
    scope_type: Optional[str] = UNSET
    scope_id: Optional[int] = UNSET
    min_vid: int = UNSET
    max_vid: int = UNSET
    vlan_count: int = UNSET
    description: str = UNSET


# ============================================
# Tracked State
# ============================================


@dataclass(frozen=True)
class ResourceState:
    """Last-known state of one managed resource.

    Attributes:
        id: Identifier assigned by NetBox (None until created)
        record: Last reconciled record (None right after an import seed)
    """

    id: Optional[int] = None
    record: Any = None

    @property
    def exists(self) -> bool:
        """Business rule: a state with an id is believed to exist remotely."""
        return self.id is not None


@dataclass
class FieldChange:
    """One field that differs between stored and desired state."""

    name: str
    old: Any
    new: Any


@dataclass
class ResourceDiff:
    """Changes needed to bring a stored record to the desired record."""

    key: str
    changes: list[FieldChange] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.changes)

    @property
    def changed_fields(self) -> list[str]:
        return [c.name for c in self.changes]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging and reports."""
        return {
            "key": self.key,
            "changes": {c.name: {"old": c.old, "new": c.new} for c in self.changes},
        }
