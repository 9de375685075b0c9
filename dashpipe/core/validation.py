"""Source validation: a small trial fetch plus schema inference."""

import logging
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from dashpipe.connectors import get_connector
from dashpipe.core.exceptions import DashPipeError, UnsupportedSourceError
from dashpipe.core.schema import Schema, SchemaInferrer
from dashpipe.models.loader import load_source_config

logger = logging.getLogger(__name__)


class ValidationResult(BaseModel):
    """Outcome of validating a source. Serialize with ``by_alias=True``."""

    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(alias="isValid")
    inferred_schema: Optional[Schema] = Field(default=None, alias="schema")
    sample_data: Optional[Any] = Field(default=None, alias="sampleData")

    @property
    def message(self) -> str:
        return "Data source is valid" if self.is_valid else "Data source validation failed"

    @classmethod
    def failed(cls) -> "ValidationResult":
        return cls(is_valid=False, inferred_schema=None, sample_data=None)


class SourceValidator:
    """Checks that a source can be fetched and describes its shape.

    Validation failures are reported in the result, never raised: any error
    while loading, fetching or inferring yields ``isValid: false`` with null
    schema and sample. Unknown source kinds are reported valid with an empty
    schema and sample.
    """

    def __init__(self, sample_limit: int = 5, sample_size: int = 10):
        if sample_limit < 1:
            raise ValueError("sample_limit must be at least 1")
        self.sample_limit = sample_limit
        self.inferrer = SchemaInferrer(sample_size=sample_size)

    async def validate(
        self,
        config: Any,
        client: Optional[httpx.AsyncClient] = None,
    ) -> ValidationResult:
        """Validate a source config (model, mapping or file path)."""
        try:
            source_config = load_source_config(config)
            connector = get_connector(source_config)
            sample = await connector.fetch(limit=self.sample_limit, client=client)
            schema = self.inferrer.infer(sample)
        except UnsupportedSourceError as e:
            logger.warning(f"Skipping validation: {e.message}")
            return ValidationResult(is_valid=True, inferred_schema=Schema(), sample_data=[])
        except DashPipeError as e:
            logger.warning(f"Source validation failed: {e}")
            return ValidationResult.failed()
        except Exception:
            logger.exception("Unexpected error while validating source")
            return ValidationResult.failed()

        return ValidationResult(is_valid=True, inferred_schema=schema, sample_data=sample)
