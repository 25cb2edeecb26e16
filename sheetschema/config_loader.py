"""
Configuration Loader

Loads export configuration from YAML: detection markers, per-output source
profiles (column layout and boundary detection modes), the placeholder
layout grid, and output settings.
"""

import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Dict, Optional, Any

from .parsing.detection import (
    DEFAULT_NO_COLOR,
    ENUM_BOUNDARY_DETECTORS,
    TABLE_START_DETECTORS,
    EnumBoundaryDetector,
    TableStartDetector,
    enum_boundary_detector,
    table_start_detector,
)
from .parsing.table_parser import ColumnLayout


@dataclass
class SourceProfile:
    """How a source workbook is laid out for one output format."""
    name: str
    table_start: str = "color_boundary"
    enum_boundary: str = "color"
    require_tab_color: bool = True
    columns: ColumnLayout = field(default_factory=ColumnLayout)


@dataclass
class LayoutConfig:
    """Placeholder grid used to position tables and areas."""
    table_width: int = 450
    spacing_x: int = 500
    spacing_y: int = 480
    tables_per_row: int = 5
    area_height: int = 2000
    area_gap: int = 100
    default_area_color: str = "#e1e1e1"


@dataclass
class OutputConfig:
    """Serializer settings."""
    database_type: str = "postgresql"
    default_name: str = "Imported Schema"
    numeric_precision: int = 10
    numeric_scale: int = 2
    dbml_qualify_schema: bool = False


def _default_profiles() -> Dict[str, SourceProfile]:
    return {
        "chartdb": SourceProfile(name="chartdb"),
        "dbml": SourceProfile(
            name="dbml",
            table_start="header_lookahead",
            enum_boundary="text",
            require_tab_color=False,
        ),
    }


@dataclass
class ExportConfig:
    """Complete export configuration."""
    version: str = "1.0"
    config_name: str = "default"

    # Detection
    no_color: str = DEFAULT_NO_COLOR
    enum_sheet_keyword: str = "enum"

    profiles: Dict[str, SourceProfile] = field(default_factory=_default_profiles)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def get_profile(self, name: str) -> SourceProfile:
        if name not in self.profiles:
            raise KeyError(f"Unknown profile: {name} (available: {', '.join(self.profiles)})")
        return self.profiles[name]

    def table_detector(self, profile: SourceProfile) -> TableStartDetector:
        return table_start_detector(profile.table_start, self.no_color)

    def enum_detector(self, profile: SourceProfile) -> EnumBoundaryDetector:
        return enum_boundary_detector(profile.enum_boundary, self.no_color)


class ConfigLoader:
    """
    Loads and validates export configuration.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize with optional custom config directory."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent / "config"
        self.config_dir = Path(config_dir)

    def load_config(self, config_file: str = "export_config.yaml") -> ExportConfig:
        """Load the main configuration file."""
        config_path = self.config_dir / config_file

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path) as f:
            raw_config = yaml.safe_load(f) or {}

        return self.parse_config(raw_config)

    def parse_config(self, raw_config: Dict[str, Any]) -> ExportConfig:
        """Build an ExportConfig from an already-loaded mapping."""
        detection = raw_config.get("detection", {})
        layout = raw_config.get("layout", {})
        output = raw_config.get("output", {})

        defaults = LayoutConfig()
        output_defaults = OutputConfig()

        profiles = _default_profiles()
        for name, raw_profile in (raw_config.get("profiles") or {}).items():
            profiles[name] = self._parse_profile(name, raw_profile or {}, profiles.get(name))

        return ExportConfig(
            version=str(raw_config.get("version", "1.0")),
            config_name=raw_config.get("config_name", "default"),

            no_color=str(detection.get("no_color", DEFAULT_NO_COLOR)).lower(),
            enum_sheet_keyword=str(detection.get("enum_sheet_keyword", "enum")).lower(),

            profiles=profiles,

            layout=LayoutConfig(
                table_width=int(layout.get("table_width", defaults.table_width)),
                spacing_x=int(layout.get("spacing_x", defaults.spacing_x)),
                spacing_y=int(layout.get("spacing_y", defaults.spacing_y)),
                tables_per_row=int(layout.get("tables_per_row", defaults.tables_per_row)),
                area_height=int(layout.get("area_height", defaults.area_height)),
                area_gap=int(layout.get("area_gap", defaults.area_gap)),
                default_area_color=layout.get("default_area_color", defaults.default_area_color),
            ),

            output=OutputConfig(
                database_type=output.get("database_type", output_defaults.database_type),
                default_name=output.get("default_name", output_defaults.default_name),
                numeric_precision=int(output.get("numeric_precision", output_defaults.numeric_precision)),
                numeric_scale=int(output.get("numeric_scale", output_defaults.numeric_scale)),
                dbml_qualify_schema=bool(output.get("dbml_qualify_schema", output_defaults.dbml_qualify_schema)),
            ),
        )

    def _parse_profile(
        self,
        name: str,
        raw_profile: Dict[str, Any],
        base: Optional[SourceProfile] = None
    ) -> SourceProfile:
        """Parse one profile, filling gaps from ``base`` (the built-in profile of that name)."""
        if base is None:
            base = SourceProfile(name=name)

        table_start = raw_profile.get("table_start", base.table_start)
        enum_boundary = raw_profile.get("enum_boundary", base.enum_boundary)

        if table_start not in TABLE_START_DETECTORS:
            raise ValueError(f"Profile '{name}': unknown table_start '{table_start}'")
        if enum_boundary not in ENUM_BOUNDARY_DETECTORS:
            raise ValueError(f"Profile '{name}': unknown enum_boundary '{enum_boundary}'")

        raw_columns = raw_profile.get("columns", {})
        columns = ColumnLayout(**{
            key: int(raw_columns.get(key, getattr(base.columns, key)))
            for key in ("name", "optional", "type", "relation", "constraints", "description")
        })

        return SourceProfile(
            name=name,
            table_start=table_start,
            enum_boundary=enum_boundary,
            require_tab_color=bool(raw_profile.get("require_tab_color", base.require_tab_color)),
            columns=columns,
        )


if __name__ == "__main__":
    # Test loading
    loader = ConfigLoader()
    config = loader.load_config()

    print(f"Loaded config: {config.config_name}")
    for profile in config.profiles.values():
        print(f"  Profile {profile.name}: tables={profile.table_start}, enums={profile.enum_boundary}")
