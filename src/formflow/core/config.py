# src/formflow/core/config.py
"""
Configuration schema and loading for the form builder engine.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction. Every section has
defaults, so ``FormflowSettings()`` is a complete configuration.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from formflow.contracts.enums import DuplicateIdPolicy


class LayoutSettings(BaseModel):
    """Grid used when a flat field array is turned into a linear graph.

    Field nodes are placed left to right, ``columns`` per row. Structural
    nodes sit in their own column at ``structural_x`` with start on top and
    end/submit below the last field row.

    Example YAML:
        layout:
          columns: 4
          step_x: 220
    """

    model_config = {"frozen": True}

    origin_x: float = Field(default=50.0, description="X of the first field node")
    origin_y: float = Field(default=50.0, description="Y of the first field node")
    step_x: float = Field(default=250.0, gt=0, description="Horizontal distance between field nodes")
    step_y: float = Field(default=150.0, gt=0, description="Vertical distance between field rows")
    columns: int = Field(default=3, gt=0, description="Field nodes per row")
    structural_x: float = Field(default=40.0, description="X of start/end/submit")
    structural_y: float = Field(default=40.0, description="Y of start")
    structural_gap: float = Field(default=120.0, gt=0, description="Per-field vertical offset for end/submit")


class OrderingSettings(BaseModel):
    """Ordering engine tuning."""

    model_config = {"frozen": True}

    iteration_slack: int = Field(
        default=10,
        ge=0,
        description="Extra walk steps allowed beyond node count before a branch walk is cut off",
    )


class ImportSettings(BaseModel):
    model_config = {"frozen": True}

    duplicate_ids: DuplicateIdPolicy = Field(
        default=DuplicateIdPolicy.REJECT,
        description="What to do when an imported payload repeats a node id",
    )


class NoticeSettings(BaseModel):
    model_config = {"frozen": True}

    dismiss_after_seconds: float = Field(
        default=2.0,
        gt=0,
        description="How long a rejected-edit notice stays visible",
    )


class LoggingSettings(BaseModel):
    model_config = {"frozen": True}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    json_output: bool = False

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v: object) -> object:
        """Accept ``debug`` as well as ``DEBUG``."""
        return v.upper() if isinstance(v, str) else v


class FormflowSettings(BaseModel):
    """Top-level configuration for a builder session."""

    model_config = {"frozen": True}

    layout: LayoutSettings = Field(default_factory=LayoutSettings)
    ordering: OrderingSettings = Field(default_factory=OrderingSettings)
    imports: ImportSettings = Field(default_factory=ImportSettings)
    notice: NoticeSettings = Field(default_factory=NoticeSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_settings(config_path: Path) -> FormflowSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (FORMFLOW_*) - highest priority
    2. Config file
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: FORMFLOW_NOTICE__DISMISS_AFTER_SECONDS for nested keys.

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="FORMFLOW",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; Pydantic fields are lowercase
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): _lower_keys(v) for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    return FormflowSettings(**raw_config)


def _lower_keys(value: object) -> object:
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    return value
