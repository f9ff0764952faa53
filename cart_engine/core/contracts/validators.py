"""
JSON Schema Contract Validators

Validates raw catalog / cart server records against the JSON Schema contracts
bundled in `schema/` before they are turned into domain models.
Uses the jsonschema library (Draft 2020-12).

Schemas:
- product.json   (catalog product)
- vendor.json    (catalog vendor)
- cart_line.json (cart server line)
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator

import jsonschema
from jsonschema import Draft202012Validator, ValidationError


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    JSON Schema file loader.

    Looks up schemas in the `schema/` directory next to this module.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Loaded schema cache
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Load a JSON Schema file.

        Args:
            schema_name: Schema name without extension (e.g. 'product')

        Returns:
            Loaded schema as dict

        Raises:
            FileNotFoundError: If the schema file does not exist
            ValueError: If the file is not a valid JSON Schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Meta-validation of the schema itself
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema


# Global loader instance
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Base class for contract validators.

    Wraps validation of a payload against one JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Validate data against the schema.

        Raises:
            ValidationError: If data does not match the schema
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        """Validity check without exception."""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[ValidationError]:
        """Iterate over all validation errors."""
        return self.validator.iter_errors(data)


class ProductContractValidator(ContractValidator):
    """Validator for catalog product records."""

    def __init__(self):
        super().__init__("product")


class VendorContractValidator(ContractValidator):
    """Validator for catalog vendor records."""

    def __init__(self):
        super().__init__("vendor")


class CartLineContractValidator(ContractValidator):
    """Validator for cart server line records."""

    def __init__(self):
        super().__init__("cart_line")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_product(data: Dict[str, Any]) -> None:
    """
    Validate a catalog product record.

    Raises:
        ValidationError: If data does not match product.json
    """
    ProductContractValidator().validate(data)


def validate_vendor(data: Dict[str, Any]) -> None:
    """
    Validate a catalog vendor record.

    Raises:
        ValidationError: If data does not match vendor.json
    """
    VendorContractValidator().validate(data)


def validate_cart_line(data: Dict[str, Any]) -> None:
    """
    Validate a cart server line record.

    Raises:
        ValidationError: If data does not match cart_line.json
    """
    CartLineContractValidator().validate(data)
