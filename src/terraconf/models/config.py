"""Configuration models for terraconf."""

from pydantic import BaseModel, Field
from pathlib import Path
from typing import Any
import yaml

from terraconf.models.overlay import AttributeOverlay


class RenderOptions(BaseModel):
    """Options controlling how attribute values are rendered."""

    strict: bool = Field(
        default=True,
        description="Raise on unknown value kinds and mixed lists instead of degrading"
    )

    skip_empty_collections: bool = Field(
        default=False,
        description="Omit empty lists and maps found in state"
    )

    model_config = {"frozen": True}


class OverlayConfig(BaseModel):
    """Overlay settings for one resource type."""

    excludes: list[str] = Field(
        default_factory=list,
        description="Attribute names never rendered (e.g. computed values)"
    )

    defaults: dict[str, Any] = Field(
        default_factory=dict,
        description="Values rendered when state has no value for the attribute"
    )

    model_config = {"frozen": True}

    def to_overlay(self) -> AttributeOverlay:
        return AttributeOverlay(defaults=dict(self.defaults), excludes=set(self.excludes))


class Config(BaseModel):
    """Root configuration for terraconf."""

    render: RenderOptions = Field(default_factory=RenderOptions, description="Render settings")
    overlays: dict[str, OverlayConfig] = Field(
        default_factory=dict,
        description="Per resource type overlays, keyed by resource type"
    )

    model_config = {"frozen": True}

    def overlay_for(self, resource_type: str) -> AttributeOverlay:
        """Return a fresh overlay for a resource type (empty if not configured)."""
        overlay = self.overlays.get(resource_type)
        if overlay is None:
            return AttributeOverlay()
        return overlay.to_overlay()

    @classmethod
    def load(cls, path: Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            path: Path to config.yaml file

        Returns:
            Validated Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If YAML is invalid or validation fails
        """
        if not path.exists():
            raise FileNotFoundError(
                f"Configuration file not found at {path}\n\n"
                f"Example format:\n\n"
                f"render:\n"
                f"  strict: true\n"
                f"  skip_empty_collections: false\n\n"
                f"overlays:\n"
                f"  aws_instance:\n"
                f"    excludes: [arn, private_ip]\n"
                f"    defaults:\n"
                f"      monitoring: false\n"
            )

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {path} must contain a mapping")

        return cls(**data)
