"""Lightweight evaluation harness for deterministic scenarios."""

from __future__ import annotations

import io
from typing import Dict, List

from PIL import Image

from evaluation.scenarios import EvaluationScenario, SCENARIOS
from matcher_app.app import JewelMatcherApp
from matcher_app.config import MatcherConfig
from models.catalog_item import from_raw_metadata
from tools.catalog_store import InMemoryCatalogStore


def _solid_image(rgb, size=(64, 64)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color=tuple(rgb)).save(buffer, format="PNG")
    return buffer.getvalue()


def _evaluate_expectations(
    expectations: Dict[str, object], response: Dict[str, object]
) -> Dict[str, bool]:
    recommendations = response.get("recommendations", [])
    attempts = response.get("diagnostics", {}).get("attempts", [])
    ids = [item.get("item_id") for item in recommendations]
    checks: Dict[str, bool] = {}

    checks["min_results"] = len(recommendations) >= int(expectations.get("min_results", 1))
    if "max_results" in expectations:
        checks["max_results"] = len(recommendations) <= int(expectations["max_results"])
    if "top_item" in expectations:
        checks["top_item"] = bool(ids) and ids[0] == expectations["top_item"]
    if "dominant_colors" in expectations:
        checks["dominant_colors"] = response.get("dominant_colors") == expectations["dominant_colors"]
    if "max_price" in expectations:
        checks["max_price"] = all(item.get("price", 0) <= expectations["max_price"] for item in recommendations)
    if "excluded" in expectations:
        checks["excluded"] = not set(ids) & set(expectations["excluded"])
    if "attempts" in expectations:
        checks["attempts"] = len(attempts) == int(expectations["attempts"])
    if "min_attempts" in expectations:
        checks["min_attempts"] = len(attempts) >= int(expectations["min_attempts"])
    if "max_attempts" in expectations:
        checks["max_attempts"] = len(attempts) <= int(expectations["max_attempts"])
    checks["sorted_by_score"] = all(
        earlier["score"] >= later["score"] for earlier, later in zip(recommendations, recommendations[1:])
    )
    return checks


def run_scenario(scenario: EvaluationScenario) -> Dict[str, object]:
    catalog = InMemoryCatalogStore(from_raw_metadata(item) for item in scenario.catalog_items)
    app = JewelMatcherApp(config=MatcherConfig(), catalog=catalog)

    if scenario.image_rgb is not None:
        response = app.analyze(dict(scenario.preferences), image=_solid_image(scenario.image_rgb))
    else:
        response = app.suggest(dict(scenario.preferences))

    checks = _evaluate_expectations(scenario.expectations, response)
    return {
        "scenario": scenario.name,
        "passed": all(checks.values()),
        "checks": checks,
        "result_count": len(response.get("recommendations", [])),
        "response": response,
    }


def run_evaluation_suite() -> List[Dict[str, object]]:
    return [run_scenario(scenario) for scenario in SCENARIOS]


def run_smoke_checks() -> List[str]:
    results = run_evaluation_suite()
    return [f"{result['scenario']}: {'passed' if result['passed'] else 'failed'}" for result in results]


__all__ = ["run_evaluation_suite", "run_scenario", "run_smoke_checks"]
