"""Editor settings loaded from JSON and validated with pydantic."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field, ValidationError, model_validator

from .errors import ConfigError
from .units import set_dpi_provider

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DRAFTBOARD_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".draftboard" / "settings.json"


class OverlayTheme(BaseModel):
    grid: str = Field("#eeeeee", description="Grid line colour.")
    bounding_box: str = Field("#888888", description="Per-shape bounding box colour.")
    group_box: str = Field("#0078D7", description="Group selection box and resize handle outline.")
    handle_fill: str = Field("#ffffff", description="Resize handle fill.")
    rotation_handle: str = Field("#ff8800", description="Rotation handle outline.")
    rotation_handle_fill: str = Field("#ffffee", description="Rotation handle fill.")
    selected: str = Field("#ff0000", description="Outline drawn over selected shapes.")
    hover: str = Field("#00aaff", description="Outline drawn over the hovered shape.")
    marquee: str = Field("#0078D7", description="Drag-select rectangle colour.")
    crosshair: str = Field("#99000000", description="Crosshair colour (ARGB).")


class EditorSettings(BaseModel):
    dpi: Optional[float] = Field(None, gt=0.0, description="Fixed DPI; when unset the host display decides.")
    drag_threshold_px: float = Field(4.0, ge=0.0, description="Screen distance before a press becomes a drag.")
    wheel_zoom_in: float = Field(1.1, gt=1.0, description="Zoom factor for a wheel step towards the user.")
    wheel_zoom_out: float = Field(0.9, gt=0.0, lt=1.0, description="Zoom factor for a wheel step away from the user.")
    keyboard_zoom_step: float = Field(1.2, gt=1.0, description="Zoom factor for Ctrl +/- shortcuts.")
    min_scale: Optional[float] = Field(None, gt=0.0, description="Lower zoom clamp; unbounded when unset.")
    max_scale: Optional[float] = Field(None, gt=0.0, description="Upper zoom clamp; unbounded when unset.")
    rotate_step_deg: float = Field(15.0, description="Rotation applied by the r / R shortcuts.")
    grid_spacing_mm: float = Field(1.0, gt=0.0, description="Spacing of the background grid.")
    show_grid: bool = True
    show_bounding_boxes: bool = False
    background: Optional[str] = Field("#ffffff", description="Canvas background colour; None leaves it clear.")
    theme: OverlayTheme = Field(default_factory=OverlayTheme)

    @model_validator(mode="after")
    def _check_scale_clamp(self) -> "EditorSettings":
        if self.min_scale is not None and self.max_scale is not None and self.min_scale > self.max_scale:
            raise ValueError("min_scale must not exceed max_scale")
        return self

    def apply_dpi(self) -> bool:
        """Install a constant DPI provider when ``dpi`` is configured."""
        if self.dpi is None:
            return False
        value = float(self.dpi)
        set_dpi_provider(lambda: value)
        logger.debug("DPI fixed at %s by settings", value)
        return True


def _resolve_path(path: Optional[Union[str, Path]]) -> tuple[Optional[Path], bool]:
    if path is not None:
        return Path(path), True
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env), True
    return DEFAULT_CONFIG_PATH, False


def load_settings(path: Optional[Union[str, Path]] = None) -> EditorSettings:
    """Read settings from ``path``, ``$DRAFTBOARD_CONFIG`` or the per-user default.

    A missing per-user default yields the built-in defaults. An explicitly
    named file that is missing, unreadable or invalid raises ConfigError.
    """
    config_path, explicit = _resolve_path(path)
    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Settings file not found: {config_path}")
        return EditorSettings()
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Could not read settings from {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Settings in {config_path} must be a JSON object")
    try:
        settings = EditorSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings in {config_path}: {exc}") from exc
    logger.info("Loaded editor settings from %s", config_path)
    return settings
