"""Command line entrypoint tests."""

from __future__ import annotations

import io
import json
import sys
from pathlib import Path

import pytest
from PIL import Image

sys.path.append(str(Path(__file__).resolve().parents[1]))

import main


@pytest.fixture()
def seed_file(tmp_path: Path) -> Path:
    seed = tmp_path / "seed.json"
    seed.write_text(
        json.dumps(
            [
                {
                    "item_id": "pearl_drop",
                    "name": "Pearl Drop",
                    "price": 9000,
                    "category": "earrings",
                    "style": "minimalist",
                    "occasions": ["office"],
                    "materials": ["pearl"],
                    "colors": ["white"],
                }
            ]
        )
    )
    return seed


def test_cli_suggest_prints_json(tmp_path: Path, seed_file: Path, monkeypatch, capsys) -> None:
    monkeypatch.delenv("APP_ENV", raising=False)
    main.main(
        [
            "--database",
            str(tmp_path / "catalog.db"),
            "--seed",
            str(seed_file),
            "--occasion",
            "office",
            "--budget",
            "low",
        ]
    )
    output = json.loads(capsys.readouterr().out)
    assert output["status"] == "ok"
    assert [item["item_id"] for item in output["recommendations"]] == ["pearl_drop"]


def test_cli_analyze_reads_image_file(tmp_path: Path, seed_file: Path, monkeypatch, capsys) -> None:
    monkeypatch.delenv("APP_ENV", raising=False)
    image_path = tmp_path / "look.png"
    buffer = io.BytesIO()
    Image.new("RGB", (50, 50), color=(245, 245, 245)).save(buffer, format="PNG")
    image_path.write_bytes(buffer.getvalue())

    main.main(
        [
            "--database",
            str(tmp_path / "catalog.db"),
            "--seed",
            str(seed_file),
            "--image",
            str(image_path),
            "--style",
            "minimalist",
            "--occasion",
            "office",
        ]
    )
    output = json.loads(capsys.readouterr().out)
    assert output["dominant_colors"] == ["white"]
    assert output["recommendations"][0]["item_id"] == "pearl_drop"
