"""Tests for the POI catalog, search and detail sheet."""

import pytest

from fogmap.catalog import TYPE_EMOJI, POI, load_catalog
from fogmap.exceptions import CatalogError
from fogmap.sheet import parse_poi_link, poi_link, sheet_html


class TestLoadCatalog:
    def test_loads_map_meta(self, catalog_file):
        cat = load_catalog(catalog_file)
        assert (cat.width, cat.height) == (2000, 1000)
        assert cat.map_image == str((catalog_file.parent / "data" / "map.png").resolve())
        assert len(cat.pois) == 3

    def test_coords_flip_to_image_space(self, catalog_file):
        p = load_catalog(catalog_file).find("oakhaven")
        assert (p.x, p.y) == (400.0, 700.0)

    def test_poi_images_resolved_against_catalog(self, catalog_file):
        p = load_catalog(catalog_file).find("prancing")
        assert p.image == str((catalog_file.parent / "img" / "goat.png").resolve())

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError):
            load_catalog(tmp_path / "nope.json")

    def test_bad_json(self, tmp_path):
        p = tmp_path / "pois.json"
        p.write_text("{oops", encoding="utf-8")
        with pytest.raises(CatalogError):
            load_catalog(p)

    def test_missing_meta(self, tmp_path):
        p = tmp_path / "pois.json"
        p.write_text('{"pois": []}', encoding="utf-8")
        with pytest.raises(CatalogError, match="invalid catalog"):
            load_catalog(p)


class TestSearch:
    def test_empty_query_returns_all(self, catalog_file):
        cat = load_catalog(catalog_file)
        assert [p.id for p in cat.search("  ")] == ["oakhaven", "prancing", "barrow"]

    @pytest.mark.parametrize(
        "query,expected",
        [("oak", ["oakhaven"]), ("TAVERN", ["prancing"]), ("rumors", ["prancing"]), ("river", ["oakhaven"]), ("dragon", [])],
    )
    def test_matches_name_type_tags_summary(self, catalog_file, query, expected):
        assert [p.id for p in load_catalog(catalog_file).search(query)] == expected

    def test_find_unknown(self, catalog_file):
        assert load_catalog(catalog_file).find("atlantis") is None


class TestPOI:
    def test_emoji_falls_back_to_pin(self):
        assert POI(id="a", name="A", x=0, y=0, type="crypt").emoji == TYPE_EMOJI["default"]
        assert POI(id="a", name="A", x=0, y=0, type="city").emoji == TYPE_EMOJI["city"]

    def test_name_defaults_to_id(self):
        assert POI.from_dict({"id": "x1", "coord": [1, 2]}).name == "x1"


class TestSheet:
    def test_link_round_trip(self):
        assert poi_link("oakhaven") == "fogmap://poi/oakhaven"
        assert parse_poi_link(poi_link("oakhaven")) == "oakhaven"

    def test_hash_form(self):
        assert parse_poi_link("#barrow") == "barrow"
        assert parse_poi_link("#") is None

    def test_foreign_links(self):
        assert parse_poi_link("https://example.com/poi/x") is None
        assert parse_poi_link("fogmap://map/x") is None

    def test_html_escapes_text(self, catalog_file):
        html = sheet_html(load_catalog(catalog_file).find("prancing"))
        assert "&lt;loud&gt;" in html
        assert "<h2>The Prancing Goat</h2>" in html
        assert "#rumors" in html
        assert "<img" in html

    def test_subtitle_skips_missing_parts(self):
        html = sheet_html(POI(id="a", name="A", x=0, y=0, type="city"))
        assert "city" in html
        assert "•" not in html
        assert "<img" not in html
