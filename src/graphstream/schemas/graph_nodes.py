"""Node registry schemas.

The registry tells the progress state machine which emitters to track and how
each one should be presented. Keys are the emitter names exactly as they
appear in the stream's `name` field.

Both snake_case field names and the camelCase keys used by front-end node
configs (`actionText`, `formattedName`, `isGraphNode`, `isFinalOutput`) are
accepted, so an existing config can be loaded unchanged::

    registry = NodeRegistry.from_mapping({
        "Product Vision Graph": {
            "formattedName": "Product Vision Graph",
            "actionText": "Analyzing your message",
            "isGraphNode": True,
        },
        "vision_rewriter": {
            "actionText": "Rewriting the vision statement",
            "isFinalOutput": True,
        },
    })
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from graphstream.core.exceptions import RegistryConfigError


class NodeRole(str, Enum):
    TOP_LEVEL = "top_level"
    FINAL_OUTPUT = "final_output"
    INTERMEDIATE = "intermediate"


class NodeMetadata(BaseModel):
    """Presentation metadata for one observed node."""

    display_text: str = Field(
        validation_alias=AliasChoices("display_text", "actionText", "action_text"),
        description="Status text shown while this node is active",
    )
    formatted_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("formatted_name", "formattedName"),
        description="Human-readable node name",
    )
    is_top_level_node: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_top_level_node", "isGraphNode"),
    )
    is_final_output_node: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_final_output_node", "isFinalOutput"),
    )

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def role(self) -> NodeRole:
        # A node flagged as both is treated as the graph boundary
        if self.is_top_level_node:
            return NodeRole.TOP_LEVEL
        if self.is_final_output_node:
            return NodeRole.FINAL_OUTPUT
        return NodeRole.INTERMEDIATE


class NodeRegistry(BaseModel):
    """Immutable mapping of emitter name to `NodeMetadata`."""

    nodes: dict[str, NodeMetadata] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="forbid")

    def get(self, name: str | None) -> NodeMetadata | None:
        if name is None:
            return None
        return self.nodes.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def display_name(self, name: str | None) -> str | None:
        """Formatted name for a node, falling back to the raw emitter name."""
        meta = self.get(name)
        if meta is None:
            return name
        return meta.formatted_name or name

    def top_level_names(self) -> frozenset[str]:
        return frozenset(
            name for name, meta in self.nodes.items() if meta.is_top_level_node
        )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> NodeRegistry:
        """Build a registry from a plain mapping of name -> metadata dict."""
        if isinstance(mapping, NodeRegistry):
            return mapping
        if not isinstance(mapping, Mapping):
            raise RegistryConfigError("Node registry must be a mapping of node names")
        try:
            return cls(
                nodes={
                    str(name): (
                        meta
                        if isinstance(meta, NodeMetadata)
                        else NodeMetadata.model_validate(meta)
                    )
                    for name, meta in mapping.items()
                }
            )
        except ValidationError as e:
            raise RegistryConfigError(f"Invalid node metadata: {e}") from e

    @classmethod
    def from_json_file(cls, path: str | Path) -> NodeRegistry:
        """Load a registry from a JSON object keyed by emitter name."""
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise RegistryConfigError(f"Could not read node registry {path}: {e}") from e
        return cls.from_mapping(raw)
