"""
Export Pipeline

Runs one export: selects enum and table regions from a workbook, parses
them with the profile's detection strategies, resolves foreign keys,
assembles the model and serializes it. Every run gets a fresh BuildContext,
so identities restart at 1 and no state leaks between runs.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Union

from .config_loader import ExportConfig, SourceProfile
from .conversion.chartdb_serializer import ChartDBSerializer
from .conversion.dbml_serializer import DbmlSerializer
from .model.assembler import ModelAssembler
from .model.build_context import BuildContext, Diagnostic
from .model.schema_model import SchemaModel
from .parsing.enum_parser import EnumSheetParser
from .parsing.relationship_resolver import RelationshipResolver
from .parsing.table_parser import TableSheetParser
from .sheets.grid import SheetGrid, WorkbookGrid, load_grid_document
from .sheets.xlsx_reader import load_xlsx

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("chartdb", "dbml")


@dataclass
class BuildResult:
    """The assembled model plus what was skipped or defaulted on the way."""
    model: SchemaModel
    diagnostics: List[Diagnostic] = field(default_factory=list)
    processed_sheets: List[str] = field(default_factory=list)


@dataclass
class ExportResult:
    """Serialized output of one run."""
    output_format: str
    text: str
    model: SchemaModel
    diagnostics: List[Diagnostic] = field(default_factory=list)
    processed_sheets: List[str] = field(default_factory=list)

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.level.value == "warning"]

    def summary(self) -> Dict[str, int]:
        return {
            "tables": len(self.model.tables),
            "fields": sum(len(t.fields) for t in self.model.tables),
            "relationships": len(self.model.relationships),
            "enums": len(self.model.enums),
            "areas": len(self.model.areas),
            "warnings": len(self.warnings),
        }


def load_workbook_grid(path: Union[Path, str]) -> WorkbookGrid:
    """Load a workbook from .xlsx or a JSON/YAML grid document."""
    path = Path(path)
    if path.suffix.lower() in (".xlsx", ".xlsm"):
        return load_xlsx(path)
    if path.suffix.lower() in (".json", ".yaml", ".yml"):
        return load_grid_document(path)
    raise ValueError(f"Unsupported workbook type: {path.suffix}")


class SchemaExporter:
    """
    Builds schema models from workbooks and serializes them.

    The profile decides how regions are read (column layout, boundary
    detection); it defaults to the profile named after the output format.
    """

    def __init__(self, config: Optional[ExportConfig] = None, now: Optional[datetime] = None):
        self.config = config or ExportConfig()
        self.now = now

    def is_enum_sheet(self, sheet: SheetGrid) -> bool:
        return self.config.enum_sheet_keyword in sheet.name.lower()

    def build(self, workbook: WorkbookGrid, profile: Union[SourceProfile, str] = "chartdb") -> BuildResult:
        """Parse, resolve and assemble ``workbook`` into a SchemaModel."""
        if isinstance(profile, str):
            profile = self.config.get_profile(profile)

        context = BuildContext(now=self.now)
        assembler = ModelAssembler(self.config.layout)
        enum_parser = EnumSheetParser(self.config.enum_detector(profile), context)
        table_parser = TableSheetParser(profile.columns, self.config.table_detector(profile), context)

        # First pass: enums, areas and tables in tab order
        for sheet in workbook.sheets:
            if self.is_enum_sheet(sheet):
                context.processed_sheets.append(sheet.name)
                enum_parser.parse(sheet)
                continue

            if profile.require_tab_color and not sheet.tab_color:
                context.info("sheet_skipped", f"Sheet '{sheet.name}' has no tab color; skipped", sheet=sheet.name)
                continue

            context.processed_sheets.append(sheet.name)
            area = assembler.add_area(context, sheet.name, sheet.tab_color)
            table_parser.parse(sheet, schema=sheet.name, color=area.color)

        # Second pass: foreign keys and enum references
        resolver = RelationshipResolver(context)
        resolver.resolve()
        resolver.check_enum_references()

        model = assembler.assemble(context, workbook.name or self.config.output.default_name)
        return BuildResult(
            model=model,
            diagnostics=list(context.diagnostics),
            processed_sheets=list(context.processed_sheets),
        )

    def export(
        self,
        workbook: WorkbookGrid,
        output_format: str = "chartdb",
        profile: Optional[Union[SourceProfile, str]] = None,
    ) -> ExportResult:
        """Build and serialize ``workbook`` as ``chartdb`` JSON or ``dbml`` text."""
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format: {output_format} (expected one of {', '.join(OUTPUT_FORMATS)})")

        result = self.build(workbook, profile or output_format)

        if output_format == "dbml":
            text = DbmlSerializer(self.config.output).serialize(result.model)
        else:
            text = ChartDBSerializer(self.config.output, self.config.layout).serialize(result.model)

        logger.info(f"Exported {workbook.name or 'workbook'} as {output_format} ({len(text)} chars)")
        return ExportResult(
            output_format=output_format,
            text=text,
            model=result.model,
            diagnostics=result.diagnostics,
            processed_sheets=result.processed_sheets,
        )
