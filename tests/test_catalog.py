import json
import logging
import os

import pytest
from pydantic import ValidationError

from PumpSelectorTool import catalog as CAT
from PumpSelectorTool import config as C
from PumpSelectorTool.errors import BackendError, CatalogError
from tests.fixtures_catalog import make_brand, make_model, make_series


def _write(path, obj):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f)


def test_packaged_catalog_loads_clean():
    reg = CAT.load_registry(strict=True)
    assert list(reg) == ["Panelli"]
    brand = reg["Panelli"]
    assert len(brand.series) == 9
    assert brand.series[0].name == "95PR08"
    assert brand.series[-1].name == "95PR95"
    assert CAT.catalog_issues(brand) == []


def test_panelli_table_values(panelli):
    s = panelli.get_series("95PR08")
    assert s.flow_breakpoints == (0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7)
    assert (s.min_flow, s.max_flow) == (0, 0.7)
    assert s.models[1].name == "95PR0809"
    assert s.models[1].power_rating == "0.75"
    assert s.models[1].pressures[2] == 68
    assert panelli.get_series("nope") is None


def test_get_brand_and_unknown_brand():
    assert CAT.get_brand("Panelli").name == "Panelli"
    with pytest.raises(CatalogError, match="Unknown brand 'Grundfos'"):
        CAT.get_brand("Grundfos")


def test_catalog_error_is_backend_error():
    assert issubclass(CatalogError, BackendError)


def test_audit_reports_each_defect():
    brand = make_brand(
        make_series("empty", breakpoints=(), models=[make_model("e", [])]),
        make_series("unsorted", breakpoints=(1.0, 3.0, 2.0)),
        make_series("inverted", min_flow=5.0, max_flow=1.0),
        make_series("short", models=[make_model("m", [1, 2]), make_model("m", [1, 2, 3])]),
    )
    issues = CAT.catalog_issues(brand)
    text = "\n".join(issues)
    assert "TestBrand/empty: no flow breakpoints" in text
    assert "TestBrand/unsorted: breakpoints not strictly increasing" in text
    assert "TestBrand/inverted: min_flow 5 > max_flow 1" in text
    assert "model m has 2 pressure(s) for 3 breakpoint(s)" in text
    assert "duplicate model 'm'" in text


def test_audit_warns_when_lenient(tmp_path, caplog):
    brand = make_brand(make_series(models=[make_model("short", [1])]))
    CAT.dump_brand(brand, str(tmp_path / "test.json"))
    with caplog.at_level(logging.WARNING, logger="PumpSelectorTool.catalog"):
        reg = CAT.load_registry(str(tmp_path))
    assert "TestBrand" in reg
    assert any("1 pressure(s) for 3 breakpoint(s)" in r.getMessage() for r in caplog.records)


def test_audit_raises_when_strict(tmp_path):
    brand = make_brand(make_series(models=[make_model("short", [1])]))
    CAT.dump_brand(brand, str(tmp_path / "test.json"))
    with pytest.raises(CatalogError, match="failed audit"):
        CAT.load_registry(str(tmp_path), strict=True)
    C.set_strict_catalog(True)
    with pytest.raises(CatalogError):
        CAT.load_registry(str(tmp_path))


def test_invalid_json_and_schema(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogError, match="Cannot read catalog"):
        CAT.load_brand(str(bad))
    _write(bad, {"name": "X", "series": [{"name": "S"}]})
    with pytest.raises(CatalogError, match="Invalid catalog"):
        CAT.load_brand(str(bad))


def test_non_finite_numbers_rejected_at_load(tmp_path):
    s = make_series().model_dump()
    s["max_flow"] = float("nan")
    s["flow_breakpoints"] = [1.0, float("nan"), 3.0]
    path = tmp_path / "nan.json"
    _write(path, {"name": "X", "series": [s]})  # json writes bare NaN
    with pytest.raises(CatalogError, match="Invalid catalog"):
        CAT.load_brand(str(path))
    with pytest.raises(CatalogError):
        CAT.load_registry(str(tmp_path))


def test_infinite_pressure_rejected():
    with pytest.raises(ValidationError):
        make_model("m", [10.0, float("inf")])


def test_duplicate_series_rejected_at_load(tmp_path):
    s = make_series("S").model_dump()
    path = tmp_path / "dup.json"
    _write(path, {"name": "X", "series": [s, s]})
    with pytest.raises(CatalogError, match="Duplicate series name 'S'"):
        CAT.load_brand(str(path))


def test_duplicate_brand_across_files(tmp_path):
    brand = make_brand(make_series())
    CAT.dump_brand(brand, str(tmp_path / "a.json"))
    CAT.dump_brand(brand, str(tmp_path / "b.json"))
    with pytest.raises(CatalogError, match="defined twice"):
        CAT.load_registry(str(tmp_path))


def test_registry_order_follows_file_names(tmp_path):
    CAT.dump_brand(make_brand(make_series(), name="Zeta"), str(tmp_path / "01-zeta.json"))
    CAT.dump_brand(make_brand(make_series(), name="Alpha"), str(tmp_path / "02-alpha.json"))
    assert list(CAT.load_registry(str(tmp_path))) == ["Zeta", "Alpha"]


def test_catalog_dir_setting(tmp_path):
    CAT.dump_brand(make_brand(make_series(), name="Local"), str(tmp_path / "local.json"))
    C.set_catalog_dir(str(tmp_path))
    CAT.reset_registry_cache()
    assert list(CAT.default_registry()) == ["Local"]
    with pytest.raises(ValueError):
        C.set_catalog_dir(str(tmp_path / "missing"))


def test_merge_series_append_and_replace():
    brand = make_brand(make_series("A"), make_series("B"))
    added = CAT.merge_series(brand, make_series("C"))
    assert [s.name for s in added.series] == ["A", "B", "C"]
    assert [s.name for s in brand.series] == ["A", "B"]

    with pytest.raises(CatalogError, match="already exists"):
        CAT.merge_series(brand, make_series("A"))

    new_a = make_series("A", models=[make_model("only", [1, 1, 1])])
    replaced = CAT.merge_series(brand, new_a, replace=True)
    assert [s.name for s in replaced.series] == ["A", "B"]
    assert replaced.series[0].models[0].name == "only"


def test_dump_brand_writes_utf8(tmp_path):
    brand = make_brand(make_series(), name="Bombas Año")
    path = str(tmp_path / "b.json")
    CAT.dump_brand(brand, path)
    with open(path, encoding="utf-8") as f:
        assert "Bombas Año" in f.read()
    assert CAT.load_brand(path) == brand


def test_package_data_dir_exists():
    assert os.path.isfile(os.path.join(C.PACKAGE_DATA_DIR, "panelli.json"))
