"""Schema data models.

This module defines the structures produced by schema construction:
- FieldDescriptor / ArgumentDescriptor: one field or filter argument of a type
- ObjectTypeDefinition: a node type with a lazily computed field set
- SingularField / TypeField: the lookup field and cross-reference field of a type
- TypeDescriptor: everything built for one type tag
- TypeRegistry: the finished mapping from camel-cased type name to descriptor
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from nodeschema.core.enums import FieldKind
from nodeschema.core.nodes import Node
from nodeschema.core.utils import camel_case

if TYPE_CHECKING:
    from .resolver import ResolveContext

FieldResolver = Callable[[Node, str, "ResolveContext"], Any]
FieldMap = Dict[str, "FieldDescriptor"]


@dataclass(frozen=True)
class FieldDescriptor:
    """Description of one field of a node type.

    Attributes:
        kind: Value-type classification of the field.
        description: Human-readable description.
        non_null: True if the field always has a value.
        of_kind: Item kind for LIST fields.
        target_type: Linked type tag for NODE fields (or NODE list items).
        fields: Nested structure for OBJECT fields (or OBJECT list items).
        resolver: Optional callable ``(node, field_name, context)`` producing
            the field value; None means the raw attribute is returned.

    Examples:
        >>> title = FieldDescriptor(kind=FieldKind.STRING, description="The title")
        >>> title.type_label()
        'String'
    """

    kind: FieldKind
    description: str = ""
    non_null: bool = False
    of_kind: Optional[FieldKind] = None
    target_type: Optional[str] = None
    fields: Optional[Dict[str, "FieldDescriptor"]] = None
    resolver: Optional[FieldResolver] = None

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if self.kind == FieldKind.LIST and self.of_kind is None:
            raise ValueError("LIST fields require of_kind")
        if self.kind != FieldKind.LIST and self.of_kind is not None:
            raise ValueError(f"of_kind is only valid for LIST fields, not {self.kind.value}")

    def type_label(self) -> str:
        """Return a compact type label such as ``[Person]`` or ``ID!``."""
        if self.kind == FieldKind.LIST:
            item = self.target_type if self.of_kind == FieldKind.NODE and self.target_type else None
            label = f"[{item or self.of_kind.value}]"
        elif self.kind == FieldKind.NODE and self.target_type:
            label = self.target_type
        else:
            label = self.kind.value
        return f"{label}!" if self.non_null else label


@dataclass(frozen=True)
class ArgumentDescriptor:
    """Filter argument accepted by a type's singular lookup field.

    Attributes:
        name: Dotted path of the field the argument filters on.
        kind: Value-type classification of the filtered field.
        operators: Operators accepted for this argument (e.g. ``eq``, ``regex``).
        fields: Nested arguments for OBJECT fields.
    """

    name: str
    kind: FieldKind
    operators: Tuple[str, ...] = ()
    fields: Optional[Dict[str, "ArgumentDescriptor"]] = None


@dataclass(frozen=True)
class NodeInterface:
    """Capability tag implemented by every node object type."""

    name: str = "Node"
    description: str = "An object with an id, a type, a parent and children."


NODE_INTERFACE = NodeInterface()


@dataclass(frozen=True)
class ObjectTypeDefinition:
    """Object type of one node type tag.

    The field set is produced by a thunk so that it can reference types that
    are registered after this one.
    """

    name: str
    fields_thunk: Callable[[], FieldMap] = field(repr=False, compare=False)
    description: str = ""
    interfaces: Tuple[NodeInterface, ...] = (NODE_INTERFACE,)

    def get_fields(self) -> FieldMap:
        """Compute the merged field set. Safe to call repeatedly."""
        return dict(self.fields_thunk())

    def is_type_of(self, value: Any) -> bool:
        """Return True if ``value`` is a node of this type."""
        if isinstance(value, Mapping):
            return value.get("type") == self.name
        return getattr(value, "type", None) == self.name


@dataclass(frozen=True)
class SingularField:
    """Lookup field returning the first node of a type matching filter arguments."""

    name: str
    type: ObjectTypeDefinition
    args: Dict[str, ArgumentDescriptor]
    resolver: Callable[[Dict[str, Any]], Optional[Node]] = field(repr=False, compare=False)

    def resolve(self, args: Optional[Dict[str, Any]] = None) -> Optional[Node]:
        return self.resolver(args or {})


@dataclass(frozen=True)
class TypeField:
    """Generic cross-reference field of a type.

    Any field whose value may point at another node can be resolved through
    ``resolve(node, field_name, context)``.
    """

    name: str
    type: ObjectTypeDefinition
    resolver: FieldResolver = field(repr=False, compare=False)

    def resolve(self, node: Node, field_name: str, context: "ResolveContext") -> Optional[Node]:
        return self.resolver(node, field_name, context)


@dataclass
class TypeDescriptor:
    """Everything built for one type tag.

    Attributes:
        name: Type tag as found on the nodes.
        nodes: Nodes carrying the tag.
        fields_from_plugins: Merged plugin field map for the type.
        object_type: Object type definition (lazy field set).
        node: Singular lookup field.
        field: Generic cross-reference field.
    """

    name: str
    nodes: List[Node]
    fields_from_plugins: FieldMap = field(default_factory=dict)
    object_type: Optional[ObjectTypeDefinition] = None
    node: Optional[SingularField] = None
    field: Optional[TypeField] = None

    @property
    def camel_name(self) -> str:
        return camel_case(self.name)

    @property
    def fields(self) -> FieldMap:
        """Merged field set of the type, computed on access."""
        if self.object_type is None:
            raise ValueError(f"Type '{self.name}' has no object type yet")
        return self.object_type.get_fields()


class TypeRegistry(Mapping[str, TypeDescriptor]):
    """Read-only mapping from camel-cased type name to TypeDescriptor.

    Attributes:
        context: Resolve context (config and node collection) of the build pass.
        tags: Closed set of type tags discovered in the build pass.
    """

    def __init__(self, descriptors: Dict[str, TypeDescriptor], context: "ResolveContext") -> None:
        self._descriptors = MappingProxyType(dict(descriptors))
        self._by_tag = MappingProxyType({d.name: d for d in descriptors.values()})
        self.context = context

    def __getitem__(self, key: str) -> TypeDescriptor:
        return self._descriptors[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    @property
    def tags(self) -> frozenset:
        return frozenset(self._by_tag)

    def by_tag(self, type_name: str) -> Optional[TypeDescriptor]:
        """Return the descriptor of a raw type tag, or None."""
        return self._by_tag.get(type_name)

    def summary(self) -> List[str]:
        """Return one line per type: name, node count and field count.

        Examples:
            >>> registry.summary()
            ['markdownRemark (MarkdownRemark): 3 nodes, 9 fields']
        """
        lines = []
        for key in sorted(self._descriptors):
            descriptor = self._descriptors[key]
            lines.append(
                f"{key} ({descriptor.name}): {len(descriptor.nodes)} nodes, "
                f"{len(descriptor.fields)} fields"
            )
        return lines
