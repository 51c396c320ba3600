"""Matcher app bootstrap."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from logic.recommendation import recommend
from logic.validation import (
    AnalyzeRequest,
    PreferenceRequest,
    RecommendationResponse,
    validation_failure,
)
from matcher_app.config import MatcherConfig
from matcher_app.logging_config import configure_logging, get_logger, log_event, operation_context
from models.catalog_item import CatalogItem, from_raw_metadata
from tools.catalog_store import CatalogStore, SQLiteCatalogStore
from tools.image_fetcher import fetch_image

LOGGER = get_logger(__name__)


class JewelMatcherApp:
    """Wires together the catalog, configuration and matching pipeline."""

    def __init__(self, config: MatcherConfig | None = None, catalog: CatalogStore | None = None) -> None:
        self.config = config or MatcherConfig.from_env()
        configure_logging(self.config.log_level)
        self.catalog = catalog or SQLiteCatalogStore(self.config.catalog_db_path)

    def seed_catalog(self, records: List[Dict[str, Any]]) -> List[CatalogItem]:
        """Load loose product records into the catalog."""

        items = [self.catalog.create_item(from_raw_metadata(record)) for record in records]
        LOGGER.info("Seeded %s catalog items", len(items))
        return items

    def seed_catalog_from_file(self, path: str | Path) -> List[CatalogItem]:
        records = json.loads(Path(path).read_text())
        if isinstance(records, dict):
            records = records.get("items", [])
        return self.seed_catalog(records)

    def analyze(
        self,
        request: AnalyzeRequest | Dict[str, Any],
        image: Optional[bytes] = None,
    ) -> Dict[str, Any]:
        """Recommend from a shopper photo plus preferences.

        ``image`` wins over ``request.image_url`` when both are given.
        """

        if not isinstance(request, AnalyzeRequest):
            request = AnalyzeRequest.model_validate(request)
        if image is None and request.image_url:
            image = fetch_image(request.image_url)
        return self._run("analyze", request, image)

    def suggest(self, request: PreferenceRequest | Dict[str, Any]) -> Dict[str, Any]:
        """Recommend from stated preferences only."""

        if not isinstance(request, PreferenceRequest):
            request = PreferenceRequest.model_validate(request)
        return self._run("suggest", request, None)

    def _run(self, method: str, request: PreferenceRequest, image: Optional[bytes]) -> Dict[str, Any]:
        with operation_context(f"app:{method}") as correlation_id:
            log_event(
                LOGGER,
                level=logging.INFO,
                event="app_call_started",
                method=method,
                has_image=image is not None,
                correlation_id=correlation_id,
            )
            result = recommend(
                self.catalog,
                image=image,
                occasion=request.occasion,
                style=request.style,
                budget=request.budget,
                material=request.material,
                category=request.category,
                gender=request.gender,
                config=self.config,
            )
            response = {"status": "ok", **result.to_dict()}

            try:
                RecommendationResponse.model_validate(response)
            except ValidationError as exc:
                log_event(
                    LOGGER,
                    level=logging.WARNING,
                    event="app_response_invalid",
                    method=method,
                    details=str(exc),
                    correlation_id=correlation_id,
                )
                return validation_failure("Recommendation response failed schema checks", exc)

            log_event(
                LOGGER,
                level=logging.INFO,
                event="app_call_completed",
                method=method,
                correlation_id=correlation_id,
                recommendation_count=len(response["recommendations"]),
            )
            return response


__all__ = ["JewelMatcherApp"]
