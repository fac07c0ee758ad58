"""Pydantic models for legacy (version 1-3) Terraform JSON state."""

from typing import Any, Dict, Iterator, List, Tuple

from pydantic import BaseModel, Field

from terraconf.state import flatmap


class InstanceState(BaseModel):
    """The primary instance of a resource.

    Attributes:
        id: Provider-assigned identifier, may contain "." characters
        attributes: Flat attribute map (dotted keys, string values)
        meta: Provider metadata (schema version, timeouts)
        tainted: Whether the instance is marked for recreation
    """

    id: str = ""
    attributes: Dict[str, str] = Field(default_factory=dict)
    meta: Dict[str, Any] = Field(default_factory=dict)
    tainted: bool = False

    model_config = {"frozen": True}


class ResourceState(BaseModel):
    """A single resource as recorded in state."""

    type: str
    primary: InstanceState = Field(default_factory=InstanceState)
    dependencies: List[str] = Field(
        default_factory=list,
        alias="depends_on",
        description="Dependency identifiers in recorded order",
    )
    provider: str = ""

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def primary_id(self) -> str:
        return self.primary.id

    @property
    def attributes(self) -> Dict[str, str]:
        return self.primary.attributes

    def overwrite_list(self, name: str, values: List[Any]) -> "ResourceState":
        """Return a copy whose attribute `name` is replaced by `values`.

        The values are flattened into the flat attribute encoding; every key
        previously stored under `name` is dropped first.

        Examples:
            >>> updated = resource.overwrite_list("security_groups", ["sg-1", "sg-2"])
            >>> updated.attributes["security_groups.#"]
            '2'
        """
        attributes = flatmap.FlatMap(self.attributes)
        attributes.delete(name)
        attributes.merge(flatmap.flatten({name: values}))
        primary = self.primary.model_copy(update={"attributes": dict(attributes)})
        return self.model_copy(update={"primary": primary})


class ModuleState(BaseModel):
    """A module's resources keyed by address (e.g. "aws_instance.web")."""

    path: List[str] = Field(default_factory=lambda: ["root"])
    outputs: Dict[str, Any] = Field(default_factory=dict)
    resources: Dict[str, ResourceState] = Field(default_factory=dict)
    depends_on: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class StateDocument(BaseModel):
    """Top-level state document."""

    version: int
    terraform_version: str = ""
    serial: int = 0
    lineage: str = ""
    modules: List[ModuleState] = Field(default_factory=list)

    model_config = {"frozen": True}

    def iter_resources(self) -> Iterator[Tuple[str, ResourceState]]:
        """Yield (address, resource) pairs.

        Modules are visited in document order; resources within a module
        are yielded sorted by address so repeated runs print identically.
        Addresses of non-root modules are prefixed with "module.<name>.".
        """
        for module in self.modules:
            prefix = "".join(f"module.{name}." for name in module.path[1:])
            for address in sorted(module.resources):
                yield prefix + address, module.resources[address]

    def is_empty(self) -> bool:
        """Check if this state contains zero resources."""
        return not any(module.resources for module in self.modules)
