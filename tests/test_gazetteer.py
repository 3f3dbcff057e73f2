"""Built-in campus table and the CSV loader."""

import pytest

from campus_nav.gazetteer import Gazetteer, load_gazetteer
from campus_nav.models import Coord, PointOfInterest


def test_default_table():
    gaz = Gazetteer.default()
    assert len(gaz) == 24
    cse = gaz["cse"]
    assert cse.name == "CSE Block"
    assert cse.coord == Coord(12.192838, 79.083230)
    assert "computer science" in cse.keywords
    assert all(k == k.lower() for poi in gaz.values() for k in poi.keywords)


def test_table_is_read_only():
    gaz = Gazetteer.default()
    with pytest.raises(TypeError):
        gaz["new"] = gaz["cse"]
    with pytest.raises(TypeError):
        gaz._points["new"] = gaz["cse"]


def test_duplicate_keys_rejected():
    poi = PointOfInterest("a", "A", Coord(0, 0))
    with pytest.raises(ValueError):
        Gazetteer([poi, poi])


def test_get_by_name():
    gaz = Gazetteer.default()
    assert gaz.get_by_name("  mens hostel ").key == "mens"
    assert gaz.get_by_name("library") is None


def test_load_gazetteer_csv(tmp_path):
    path = tmp_path / "pois.csv"
    path.write_text(
        "key,name,lat,lon,keywords\n"
        "lib,Central Library,12.1931,79.0832,Library; Books ;reading room\n"
        "lab,Robotics Lab,12.1925,79.0840,\n",
        encoding="utf-8",
    )
    gaz = load_gazetteer(str(path))
    assert list(gaz) == ["lib", "lab"]
    assert gaz["lib"].keywords == frozenset({"library", "books", "reading room"})
    assert gaz["lab"].keywords == frozenset()
    assert gaz["lab"].coord == Coord(12.1925, 79.0840)


def test_load_gazetteer_missing_column(tmp_path):
    path = tmp_path / "pois.csv"
    path.write_text("key,name,lat\nlib,Library,12.1\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_gazetteer(str(path))


@pytest.mark.parametrize("row", [
    "cse,,12.19,79.08,cse",
    ",CSE Block,12.19,79.08,cse",
    "cse,   ,12.19,79.08,cse",
    "cse,CSE Block,,79.08,cse",
])
def test_load_gazetteer_blank_cells_rejected(tmp_path, row):
    path = tmp_path / "pois.csv"
    path.write_text("key,name,lat,lon,keywords\n" + row + "\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_gazetteer(str(path))
