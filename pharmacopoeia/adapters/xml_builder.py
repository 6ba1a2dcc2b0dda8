"""XML Medicine Catalog Builder.

This adapter implements the DocumentBuilderPort contract for XML medicine
documents. It walks a parsed element tree once and materializes every
top-level medicine element into an immutable Medicine record.

Build Policy:
    - The pass is all-or-nothing: the first fatal error returns a failed Result
      and no partial catalog
    - Fatal: unknown variant tag, missing required element or attribute,
      variant-specific attribute on the wrong variant, model validation failure
    - Malformed dates and numbers are handled by one policy: lenient builders
      log a warning and leave the field unset, strict builders fail the pass
    - Unknown attributes and unexpected leaf elements are ignored

Architecture:
    - Implements DocumentBuilderPort (Hexagonal Architecture)
    - Tag and attribute dispatch comes from the domain field tables
    - Variants come from the domain variant factory
    - Works on stdlib/defusedxml and lxml element trees alike
"""

import logging
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Optional, Set, Type

from pharmacopoeia.adapters.xml_loader import load_document
from pharmacopoeia.domain.fields import (
    CERTIFICATE_FIELDS,
    DOSAGE_FIELDS,
    MEDICINE_ATTRIBUTES,
    PACK_ATTRIBUTES,
    PACK_FIELDS,
    VERSION_ATTRIBUTES,
    AttributeName,
    ElementTag,
    FieldSpec,
    ValueKind,
    lookup_attribute,
    lookup_element,
)
from pharmacopoeia.domain.medicine import CatalogModel, Certificate, Dosage, Medicine, Pack, Version
from pharmacopoeia.domain.parsers import parse_bool, parse_date, parse_float, parse_int, parse_text
from pharmacopoeia.domain.ports import (
    BuildError,
    DocumentBuilderPort,
    DocumentLoadError,
    MissingRequiredElementError,
    Result,
    ValueFormatError,
)
from pharmacopoeia.domain.variants import RecordDraft, create_variant
from pharmacopoeia.infrastructure.settings import settings

logger = logging.getLogger(__name__)


def _local_name(tag: str) -> str:
    """Tag name without its {namespace} qualifier."""
    return tag.split("}", 1)[-1] if tag.startswith("{") else tag


def _child_elements(element: Any) -> Iterator[Any]:
    """Direct element children, skipping comments and processing instructions."""
    return (child for child in element if isinstance(child.tag, str))


def _text_content(element: Any) -> str:
    """Concatenated text of the element and all its descendants, stripped.

    itertext walks the subtree without recursion and skips comment and
    processing-instruction text.
    """
    return "".join(element.itertext()).strip()


class XMLMedicineBuilder(DocumentBuilderPort):
    """Builds the medicine catalog from an XML document in a single pass.

    Parameters:
        strict_values: Fail the build on malformed dates and numbers
            (None = use settings)
        date_format: strptime format for certificate dates (None = use settings)
        max_document_size: Largest document build_from_source accepts, in bytes
            (None = use settings)

    Example Usage:
        ```python
        builder = XMLMedicineBuilder()
        result = builder.build_from_source("examples/medicins.xml")
        if result.is_success():
            for medicine in result.value:
                print(medicine.name)
        else:
            print(result.error_type, result.error_details["path"])
        ```
    """

    def __init__(
        self,
        strict_values: Optional[bool] = None,
        date_format: Optional[str] = None,
        max_document_size: Optional[int] = None
    ):
        self.strict_values = settings.strict_values if strict_values is None else strict_values
        self.date_format = date_format or settings.date_format
        self.max_document_size = max_document_size or settings.max_document_size
        self.adapter_name = "xml_medicine_builder"

    def can_build(self, source: str) -> bool:
        """Check if this builder can handle the given source.

        Parameters:
            source: Source identifier (file path)

        Returns:
            bool: True if source is an XML file, False otherwise
        """
        if not source:
            return False
        return Path(source).suffix.lower() == ".xml"

    def get_source_info(self, source: str) -> Optional[dict]:
        """Get metadata about the XML source, or None if it does not exist."""
        try:
            source_path = Path(source)
            if source_path.is_file():
                return {
                    'format': 'xml',
                    'size': source_path.stat().st_size,
                    'exists': True,
                    'strict_values': self.strict_values,
                    'date_format': self.date_format,
                }
        except (OSError, ValueError):
            pass

        return None

    def build_from_source(self, source: str) -> Result[FrozenSet[Medicine]]:
        """Load an XML document and build the catalog from it.

        Parameters:
            source: Path to XML file

        Returns:
            Result[FrozenSet[Medicine]]: The catalog, or the failure (a
            DocumentLoadError if the document cannot be read)
        """
        try:
            root = load_document(source, max_size=self.max_document_size)
        except DocumentLoadError as e:
            logger.error(
                f"Cannot load {source}: {str(e)}",
                extra={'source': str(source), 'error_type': type(e).__name__}
            )
            return Result.failure_result(e, error_type=type(e).__name__, error_details=e.to_details())

        return self.build(root, source=str(source))

    def build(self, root: Any, source: Optional[str] = None) -> Result[FrozenSet[Medicine]]:
        """Build the catalog from a parsed document root.

        Every direct element child of the root is one medicine record.

        Parameters:
            root: Root element of the parsed document
            source: Source label for logs and error details

        Returns:
            Result[FrozenSet[Medicine]]: The distinct records on success;
            on failure, error_type names the BuildError subclass and
            error_details holds the element path and record index
        """
        medicines: Set[Medicine] = set()
        record_index = 0

        try:
            for record_index, element in enumerate(_child_elements(root), start=1):
                path = f"{_local_name(element.tag)}[{record_index}]"
                medicine = self._build_medicine(element, path)
                if medicine in medicines:
                    logger.warning(
                        f"Duplicate medicine '{medicine.name}' at {path} collapsed into an existing record",
                        extra={'source': source, 'element_path': path}
                    )
                medicines.add(medicine)

        except BuildError as e:
            details = e.to_details()
            details['record_index'] = record_index
            if source is not None:
                details['source'] = source
            logger.error(
                f"Catalog build failed at {e.path or 'document root'}: {str(e)}",
                extra={
                    'source': source,
                    'element_path': e.path,
                    'record_index': record_index,
                    'error_type': type(e).__name__,
                }
            )
            return Result.failure_result(e, error_type=type(e).__name__, error_details=details)

        logger.info(
            f"Catalog build complete: {source or 'document'} - "
            f"{len(medicines)} medicines from {record_index} elements",
            extra={'source': source}
        )
        return Result.success_result(frozenset(medicines))

    # ------------------------------------------------------------------
    # Record builders
    # ------------------------------------------------------------------

    def _build_medicine(self, element: Any, path: str) -> Medicine:
        """Build one medicine record of the variant named by the element tag."""
        draft = create_variant(_local_name(element.tag), path=path)
        self._apply_attributes(draft, element, MEDICINE_ATTRIBUTES, path)
        self._require_attribute(draft, "name", AttributeName.NAME, element, path)

        pharm = self._require_child(element, ElementTag.PHARM, path)
        draft.set("pharm", parse_text(_text_content(pharm)))

        versions = [
            self._build_version(child, f"{path}/version[{index}]")
            for index, child in enumerate(self._children(element, ElementTag.VERSION), start=1)
        ]
        draft.set("versions", self._collect(versions, "version", path))
        return draft.freeze()

    def _build_version(self, element: Any, path: str) -> Version:
        draft = RecordDraft(Version, path=path)
        self._apply_attributes(draft, element, VERSION_ATTRIBUTES, path)
        self._require_attribute(draft, "trade_name", AttributeName.TRADE_NAME, element, path)

        for tag, field in ((ElementTag.PRODUCER, "producer"), (ElementTag.FORM, "form")):
            child = self._require_child(element, tag, path)
            draft.set(field, parse_text(_text_content(child)))

        draft.set("certificate", self._build_leaf(
            Certificate,
            self._require_child(element, ElementTag.CERTIFICATE, path),
            CERTIFICATE_FIELDS,
            f"{path}/certificate"
        ))

        packs = [
            self._build_pack(child, f"{path}/pack[{index}]")
            for index, child in enumerate(self._children(element, ElementTag.PACK), start=1)
        ]
        draft.set("packs", self._collect(packs, "pack", path))

        draft.set("dosage", self._build_leaf(
            Dosage,
            self._require_child(element, ElementTag.DOSAGE, path),
            DOSAGE_FIELDS,
            f"{path}/dosage"
        ))
        return draft.freeze()

    def _build_pack(self, element: Any, path: str) -> Pack:
        draft = RecordDraft(Pack, path=path)
        self._apply_attributes(draft, element, PACK_ATTRIBUTES, path)
        return self._build_leaf(Pack, element, PACK_FIELDS, path, draft=draft)

    def _build_leaf(
        self,
        model: Type[CatalogModel],
        element: Any,
        table: Dict[ElementTag, FieldSpec],
        path: str,
        draft: Optional[RecordDraft] = None
    ) -> Any:
        """Build a flat record by dispatching each child element through ``table``.

        Children the table does not know are ignored.
        """
        if draft is None:
            draft = RecordDraft(model, path=path)

        for child in _child_elements(element):
            tag = lookup_element(child.tag)
            spec = table.get(tag) if tag is not None else None
            if spec is None:
                logger.debug(f"Ignoring unexpected <{_local_name(child.tag)}> in {path}")
                continue
            self._apply_value(draft, spec, _text_content(child), f"{path}/{_local_name(child.tag)}")

        return draft.freeze()

    # ------------------------------------------------------------------
    # Dispatch helpers
    # ------------------------------------------------------------------

    def _apply_attributes(
        self,
        draft: RecordDraft,
        element: Any,
        table: Dict[AttributeName, FieldSpec],
        path: str
    ) -> None:
        """Dispatch every attribute of ``element`` through ``table``; unknown names are ignored."""
        for raw_name, raw_value in element.attrib.items():
            attribute = lookup_attribute(raw_name)
            spec = table.get(attribute) if attribute is not None else None
            if spec is None:
                logger.debug(f"Ignoring attribute '{raw_name}' at {path}")
                continue
            self._apply_value(draft, spec, raw_value, f"{path}/@{_local_name(raw_name)}")

    def _apply_value(self, draft: RecordDraft, spec: FieldSpec, raw: str, path: str) -> None:
        """Parse ``raw`` according to ``spec`` and store it in the draft.

        The variant check happens before parsing, so a misplaced attribute is
        reported even when its value is malformed.
        """
        draft.ensure_supports(spec.field, path=path)
        try:
            value = self._parse(spec, raw)
        except ValueFormatError as e:
            e.path = path
            if self.strict_values:
                raise
            logger.warning(
                f"Malformed {spec.kind.value} value '{raw}' at {path}, "
                f"'{spec.field}' left unset: {str(e)}",
                extra={'element_path': path, 'error_type': type(e).__name__, 'value': raw}
            )
            return
        draft.set(spec.field, value)

    def _parse(self, spec: FieldSpec, raw: str) -> Any:
        if spec.kind is ValueKind.TEXT:
            return parse_text(raw)
        if spec.kind is ValueKind.DATE:
            return parse_date(raw, self.date_format)
        if spec.kind is ValueKind.INTEGER:
            return parse_int(raw, minimum=spec.minimum)
        if spec.kind is ValueKind.DOUBLE:
            return parse_float(raw, minimum=spec.minimum)
        if spec.kind is ValueKind.BOOLEAN:
            return parse_bool(raw)
        raise ValueError(f"No parser for value kind {spec.kind!r}")

    def _require_attribute(
        self,
        draft: RecordDraft,
        field: str,
        attribute: AttributeName,
        element: Any,
        path: str
    ) -> None:
        if not draft.has(field):
            raise MissingRequiredElementError(
                f"<{_local_name(element.tag)}> at {path} has no '{attribute.value}' attribute",
                name=attribute.value,
                path=path
            )

    def _children(self, element: Any, tag: ElementTag) -> List[Any]:
        """All direct children whose tag resolves to ``tag``."""
        return [child for child in _child_elements(element) if lookup_element(child.tag) is tag]

    def _require_child(self, element: Any, tag: ElementTag, path: str) -> Any:
        """First direct child whose tag resolves to ``tag``.

        Raises:
            MissingRequiredElementError: If there is none
        """
        for child in _child_elements(element):
            if lookup_element(child.tag) is tag:
                return child
        raise MissingRequiredElementError(
            f"Required <{tag.value}> element missing in {path}",
            name=tag.value,
            path=path
        )

    def _collect(self, records: Iterable[CatalogModel], label: str, path: str) -> FrozenSet[Any]:
        """Gather records into a set, logging value-equal duplicates that collapse."""
        records = list(records)
        unique = frozenset(records)
        if len(unique) < len(records):
            logger.warning(
                f"{len(records) - len(unique)} duplicate {label} record(s) under {path} collapsed",
                extra={'element_path': path}
            )
        return unique
