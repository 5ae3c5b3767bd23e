from __future__ import annotations

import json
from pathlib import Path

import pytest

from catalog_store.catalog_io import read_products
from catalog_store.cli import main
from catalog_store.models import Measure

CATALOG = [
    {"id": 1, "name": "Pen", "description": "Blue pen", "price": "$1.50", "amount": 10, "measure": "S"},
    {"id": 2, "name": "Pad", "description": "Paper pad", "price": "$3.25", "amount": "5", "measure": "null"},
    {"id": 3, "name": "Ink", "description": "Black ink", "price": "$0.99", "amount": 0, "measure": "XL"},
]


@pytest.fixture()
def catalog(tmp_path: Path) -> Path:
    path = tmp_path / "products.json"
    path.write_text(json.dumps(CATALOG, indent=2), encoding="utf-8")
    return path


def test_show_prints_one_line_per_product(catalog: Path, capsys: pytest.CaptureFixture[str]):
    assert main(["--catalog", str(catalog), "show"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "1 | Pen | Blue pen | 1.5 | 10 | S",
        "2 | Pad | Paper pad | 3.25 | 5 | null",
        "3 | Ink | Black ink | 0.99 | 0 | XL",
    ]


def test_show_json_format(catalog: Path, capsys: pytest.CaptureFixture[str]):
    assert main(["--catalog", str(catalog), "show", "--format", "json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["count"] == 3
    assert payload["products"][1]["measure"] == "null"


def test_catalog_path_falls_back_to_environment(
    catalog: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
):
    monkeypatch.setenv("CATALOG_PATH", str(catalog))

    assert main(["show"]) == 0
    assert len(capsys.readouterr().out.splitlines()) == 3


def test_add_appends_product(catalog: Path):
    exit_code = main(
        [
            "--catalog", str(catalog), "add",
            "--id", "4", "--name", "Clip", "--description", "Paper clip",
            "--price", "0.05", "--amount", "300", "--measure", "XS",
        ]
    )

    assert exit_code == 0
    products = read_products(catalog)
    assert len(products) == 4
    assert products[-1].name == "Clip"
    assert products[-1].price == 0.05
    assert products[-1].measure is Measure.XS


def test_add_accepts_null_measure(catalog: Path):
    main(["--catalog", str(catalog), "add", "--id", "5", "--name", "Tape", "--price", "2", "--measure", "NULL"])

    assert read_products(catalog)[-1].measure is None


def test_add_rejects_unknown_measure(catalog: Path):
    with pytest.raises(SystemExit):
        main(["--catalog", str(catalog), "add", "--id", "5", "--name", "Tape", "--price", "2", "--measure", "XXL"])

    assert len(read_products(catalog)) == 3


def test_shuffle_writes_permutation_to_output(catalog: Path, tmp_path: Path):
    output = tmp_path / "shuffled.json"

    assert main(["--catalog", str(catalog), "shuffle", "--seed", "7", "--output", str(output)]) == 0

    original = read_products(catalog)
    shuffled = read_products(output)
    assert sorted(p.id for p in shuffled) == [1, 2, 3]
    assert set(shuffled) == set(original)


def test_shuffle_with_seed_is_reproducible(catalog: Path, tmp_path: Path):
    first = tmp_path / "first.json"
    second = tmp_path / "second.json"

    main(["--catalog", str(catalog), "shuffle", "--seed", "11", "--output", str(first)])
    main(["--catalog", str(catalog), "shuffle", "--seed", "11", "--output", str(second)])

    assert first.read_text(encoding="utf-8") == second.read_text(encoding="utf-8")


def test_failures_are_logged_and_return_error_code(tmp_path: Path, caplog: pytest.LogCaptureFixture):
    broken = tmp_path / "broken.json"
    broken.write_text('{"id": 1}', encoding="utf-8")

    assert main(["--catalog", str(broken), "show"]) == 1
    assert main(["--catalog", str(tmp_path / "absent.json"), "show"]) == 1
    assert "expected array" in caplog.text
