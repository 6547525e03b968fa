"""Command implementations behind the recordmap CLI."""
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import click
from colorama import Fore, Style

from config import AppConfig, app_config
from recordmap.api.sandbox_client import SandboxClient
from recordmap.builder.transform_engine import TransformEngine
from recordmap.exceptions import RecordParseError
from recordmap.exporter.json_exporter import JsonExporter
from recordmap.mapper.auto_mapper import AutoMapper, SuggestOptions
from recordmap.mapper.mapping import FieldMapping
from recordmap.parser.reader_factory import RecordReaderFactory
from recordmap.schema.catalog import default_provider
from recordmap.schema.provider import HttpSchemaProvider, JsonFileSchemaProvider, SchemaProvider

logger = logging.getLogger(__name__)

CONFIDENCE_COLORS = {"high": Fore.GREEN, "medium": Fore.YELLOW, "low": Fore.RED}


def build_schema_provider(config: AppConfig) -> SchemaProvider:
    """HTTP provider when a schema URL is set, else the schema file, else the built-in catalog."""
    if config.schema_api.base_url:
        return HttpSchemaProvider(
            config.schema_api.base_url,
            api_key=config.schema_api.api_key or None,
            timeout=config.schema_api.timeout,
        )
    if config.schema_file:
        return JsonFileSchemaProvider(config.schema_file)
    return default_provider()


class MappingCLI:
    """Profile, suggest, apply and validate record mappings."""

    def __init__(self, config: Optional[AppConfig] = None, schema_provider: Optional[SchemaProvider] = None):
        """Initialize CLI."""
        self.config = config or app_config
        self.schema_provider = schema_provider or build_schema_provider(self.config)
        self.auto_mapper = AutoMapper(self.schema_provider)
        self.exporter = JsonExporter()

        if self.config.confidence_threshold is not None:
            self.auto_mapper.set_config({"confidenceThreshold": self.config.confidence_threshold})

        evaluator = None
        if self.config.sandbox.base_url:
            evaluator = SandboxClient(
                self.config.sandbox.base_url,
                api_key=self.config.sandbox.api_key or None,
                timeout=self.config.sandbox.timeout,
            )
        self.engine = TransformEngine(evaluator=evaluator)

    def print_header(self, title: str):
        """Print a section header."""
        click.echo(f"\n{Fore.CYAN}{'━' * 45}")
        click.echo(f"{Fore.CYAN}{title}")
        click.echo(f"{Fore.CYAN}{'━' * 45}{Style.RESET_ALL}\n")

    def read_records(self, source_file: str, limit: Optional[int] = None) -> List[Dict]:
        try:
            return RecordReaderFactory.read_file(source_file, limit=limit)
        except (RecordParseError, ValueError, FileNotFoundError) as e:
            raise click.ClickException(f"Cannot read {source_file}: {e}")

    def profile(self, source_file: str, limit: Optional[int] = None) -> None:
        """Print per-field statistics of a source file."""
        records = self.read_records(source_file, limit)
        self.print_header(f"Profile: {Path(source_file).name} ({len(records)} records)")

        for analysis in self.auto_mapper.analyze_source_fields(records):
            click.echo(
                f"{Fore.YELLOW}{analysis.name:<30}{Style.RESET_ALL} "
                f"{analysis.detected_type:<8} null {analysis.null_ratio:>5.0%}  "
                f"unique {analysis.unique_ratio:>5.0%}  samples {analysis.sample_values[:3]}"
            )

    def suggest(
        self,
        source_file: str,
        entity: str,
        min_confidence: Optional[str] = None,
        threshold: Optional[float] = None,
        fuzzy: bool = True,
        exclude: Sequence[str] = (),
        include_custom_fields: bool = True,
        output: Optional[str] = None,
    ) -> None:
        """Suggest mappings from a source file onto an entity."""
        records = self.read_records(source_file)
        fields = self.auto_mapper.analyze_source_fields(records)

        override = {}
        if threshold is not None:
            override["confidenceThreshold"] = threshold
        if not fuzzy:
            override["enableFuzzyMatching"] = False
        if exclude:
            override["excludeFields"] = list(exclude)

        suggestions = self.auto_mapper.suggest_mappings(
            fields,
            entity,
            SuggestOptions(min_confidence=min_confidence, include_custom_fields=include_custom_fields),
            override or None,
        )

        self.print_header(f"Suggested mappings: {entity}")
        if not suggestions:
            click.echo(f"{Fore.YELLOW}No suggestions (unknown entity or no field cleared the threshold)")

        for s in suggestions:
            color = CONFIDENCE_COLORS.get(s.confidence, "")
            click.echo(f"{color}{s.score:>3}{Style.RESET_ALL}  {s.source} → {s.target}  ({s.reason})")

        mapped = {s.source for s in suggestions}
        unmapped = [f.name for f in fields if f.name not in mapped]
        if unmapped:
            click.echo(f"\n{Fore.YELLOW}Unmapped: {', '.join(unmapped)}")

        if output:
            mappings = self.auto_mapper.suggestions_to_mappings(suggestions)
            self.exporter.export_mappings(output, entity, mappings, suggestions)
            click.echo(f"\n{Fore.GREEN}✅ Mappings saved to {output}")

    def load_mappings(self, mappings_file: str) -> List[FieldMapping]:
        try:
            _, mappings = self.exporter.load_mappings(mappings_file)
        except (OSError, ValueError, KeyError) as e:
            raise click.ClickException(f"Cannot load mappings from {mappings_file}: {e}")
        return mappings

    def apply(
        self,
        source_file: str,
        mappings_file: str,
        lookups: Sequence[str] = (),
        output: Optional[str] = None,
    ) -> int:
        """
        Apply a mapping document to every record of a source file

        Returns:
            Number of failed records
        """
        records = self.read_records(source_file)
        mappings = self.load_mappings(mappings_file)

        for entry in lookups:
            self.register_lookup(entry)

        batch = self.engine.map_records(records, mappings)
        summary = batch.summary

        self.print_header("Mapping results")
        click.echo(f"   Total: {summary.total}")
        click.echo(f"{Fore.GREEN}   Success: {summary.success}")
        click.echo(f"{Fore.RED if summary.failed else Fore.GREEN}   Failed: {summary.failed}")

        failed = [(index, r) for index, r in enumerate(batch.results) if not r.success]
        if failed:
            click.echo(f"\n{Fore.YELLOW}Sample issues:")
            for index, result in failed[:5]:
                for error in result.errors:
                    click.echo(f"   • record {index}: {error.field}: {error.message}")

        warnings = sorted({w for r in batch.results for w in r.warnings})
        for warning in warnings:
            click.echo(f"{Fore.YELLOW}   ⚠ {warning}")

        output_file = output or str(Path(self.config.output_dir) / f"{Path(source_file).stem}_mapped.json")
        self.exporter.export_results(output_file, batch)
        click.echo(f"\n{Fore.GREEN}✅ Results saved to {output_file}")
        return summary.failed

    def register_lookup(self, entry: str) -> None:
        """Register a lookup table given as NAME=PATH[:KEY_FIELD]."""
        if "=" not in entry:
            raise click.BadParameter(f"Expected NAME=PATH[:KEY], got {entry!r}", param_hint="--lookup")

        name, location = entry.split("=", 1)
        key_field = "id"
        path, separator, key = location.rpartition(":")
        if separator and key and not Path(location).exists():
            location, key_field = path, key

        try:
            table = self.exporter.load_lookup_table(location, name, key_field)
        except (OSError, ValueError) as e:
            raise click.ClickException(f"Cannot load lookup table {name}: {e}")
        self.engine.register_lookup_table(table)

    def validate(self, mappings_file: str, entity: str) -> bool:
        """Validate a mapping document against an entity schema."""
        mappings = self.load_mappings(mappings_file)
        report = self.auto_mapper.validate_mappings(mappings, entity)

        self.print_header(f"Validate mappings: {entity}")
        for error in report.errors:
            click.echo(f"{Fore.RED}   ✗ {error}")
        for warning in report.warnings:
            click.echo(f"{Fore.YELLOW}   ⚠ {warning}")

        if report.valid:
            click.echo(f"{Fore.GREEN}✅ {len(mappings)} mappings are valid")
        return report.valid

    def entities(self) -> None:
        """List the entities the schema provider knows."""
        self.print_header("Entities")
        for name in self.schema_provider.list_entities():
            schema = self.schema_provider.get_field_schema(name)
            count = len(schema.fields) if schema else 0
            click.echo(f"   • {name} ({count} fields)")
