"""
YAML serialization of specification files.

Every file is a small document with an apiVersion, a kind and the spec:

    apiVersion: dqo/v1
    kind: table
    spec:
      target:
        schema_name: public
        table_name: fact_sales
"""

import logging
from typing import Optional, Type

import yaml

from ...validation import MetadataStructureError, SpecFileError
from ..basespecs import AbstractSpec

logger = logging.getLogger(__name__)

API_VERSION = "dqo/v1"
KIND_SOURCE = "source"
KIND_TABLE = "table"


class YamlSerializer:
    """Converts specs to YAML documents and back."""

    def serialize(self, kind: str, spec: AbstractSpec) -> str:
        document = {
            "apiVersion": API_VERSION,
            "kind": kind,
            "spec": spec.to_dict(),
        }
        return yaml.safe_dump(document, default_flow_style=False, sort_keys=False, allow_unicode=True)

    def deserialize(self, text: str, kind: str, spec_type: Type[AbstractSpec],
                    file_path: Optional[str] = None) -> AbstractSpec:
        """
        Parses a YAML document of the expected kind.

        The returned spec tree is clean, loading never marks anything dirty.

        Raises:
            SpecFileError: When the text is not valid YAML or the document has
                another kind or API version
        """
        try:
            document = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise SpecFileError(f"Invalid YAML in {file_path or 'spec file'}: {e}", file_path) from e

        if not isinstance(document, dict):
            raise SpecFileError(f"The spec file {file_path or ''} is not a YAML mapping", file_path)
        if document.get("apiVersion") != API_VERSION:
            raise SpecFileError(
                f"Unsupported apiVersion {document.get('apiVersion')!r} in {file_path}, expected {API_VERSION}",
                file_path)
        if document.get("kind") != kind:
            raise SpecFileError(f"Unexpected kind {document.get('kind')!r} in {file_path}, expected {kind}",
                                file_path)

        spec_data = document.get("spec") or {}
        if not isinstance(spec_data, dict):
            raise SpecFileError(f"The spec section of {file_path} must be a mapping", file_path)

        try:
            spec = spec_type.from_dict(spec_data)
        except (AttributeError, TypeError, MetadataStructureError) as e:
            raise SpecFileError(f"Invalid {kind} spec in {file_path}: {e}", file_path) from e
        spec.clear_dirty(True)
        logger.debug(f"Deserialized {kind} spec from {file_path}")
        return spec
