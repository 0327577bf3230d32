import pytest

import app as app_module

from conftest import HEADER, csv_row, multipolygon_shape, polygon_shape, square


@pytest.fixture
def client(tmp_path):
    rows = [
        HEADER,
        csv_row("Westland", polygon_shape(square(0.0, 0.0)), geo_point="0.5, 0.5", code="WST", alpha2="WL"),
        csv_row("Eastland", polygon_shape(square(3.0, 0.0)), geo_point="0.5, 3.5", code="EST", alpha2="EL"),
        csv_row("Isles", multipolygon_shape(square(0.0, 5.0), square(2.0, 5.0)), geo_point="5.5, 1.5", code="ISL", alpha2="IS"),
        csv_row("Ghostland", "", geo_point="10, 10", code="GHO", alpha2="GH"),
    ]
    path = tmp_path / "countries.csv"
    path.write_text("\n".join(rows) + "\n", encoding="utf-8")
    assert app_module.init_data(str(path)) is not None
    app_module.app.config['TESTING'] = True
    with app_module.app.test_client() as client:
        yield client
    app_module.init_data(str(tmp_path / "missing.csv"))


def test_search_countries(client):
    response = client.get('/countries?q=LAND')
    assert response.status_code == 200
    data = response.get_json()
    assert [c['name'] for c in data['countries']] == ["Westland", "Eastland", "Ghostland"]
    assert data['total'] == 4


def test_search_rejects_bad_limit(client):
    assert client.get('/countries?q=a&limit=0').status_code == 400


def test_country_details(client):
    response = client.get('/countries/isles')
    assert response.status_code == 200
    data = response.get_json()
    assert data['name'] == "Isles"
    assert data['code'] == "IS"
    assert data['ring_count'] == 2
    assert data['vertex_count'] == 8
    assert data['centroid'] == {'lat': 5.5, 'lon': 1.5}


def test_unknown_country_is_404(client):
    assert client.get('/countries/Atlantis').status_code == 404


def test_border_distance_route(client):
    response = client.get('/distance?from=Westland&to=Eastland')
    assert response.status_code == 200
    data = response.get_json()
    assert data['mode'] == 'border'
    assert data['distance_km'] == pytest.approx(222.4, abs=0.1)
    assert data['color'].startswith('#')
    assert data['same_country'] is False


def test_centroid_distance_route(client):
    data = client.get('/distance?from=Westland&to=Eastland&mode=centroid').get_json()
    assert data['mode'] == 'centroid'
    assert data['distance_km'] == pytest.approx(333.6, abs=0.1)


def test_same_country_is_green(client):
    data = client.get('/distance?from=Westland&to=westland').get_json()
    assert data['distance_km'] == 0.0
    assert data['same_country'] is True
    assert data['color'] == '#00e430'


def test_distance_route_validation(client):
    assert client.get('/distance?from=Westland').status_code == 400
    assert client.get('/distance?from=Westland&to=Eastland&mode=bogus').status_code == 400
    assert client.get('/distance?from=Westland&to=Atlantis').status_code == 404


def test_map_data(client):
    response = client.get('/get_map_data?base=Westland&guess=Isles')
    assert response.status_code == 200
    data = response.get_json()
    assert data['type'] == 'FeatureCollection'
    kinds = [f['properties']['feature_type'] for f in data['features']]
    assert kinds.count('country_shape') == 2
    assert kinds.count('distance_line') == 1
    line = next(f for f in data['features'] if f['properties']['feature_type'] == 'distance_line')
    # Westland's top edge (lat 1) to the islands' bottom edge (lat 5)
    assert line['properties']['distance_km'] == pytest.approx(442.3, abs=2.0)


def test_map_data_requires_shapes(client):
    assert client.get('/get_map_data?base=Westland').status_code == 400
    assert client.get('/get_map_data?base=Westland&guess=Ghostland').status_code == 404


def test_missing_dataset_leaves_empty_database(tmp_path):
    assert app_module.init_data(str(tmp_path / "absent.csv")) is None
    assert len(app_module.country_db) == 0


def test_bad_loader_setting_leaves_empty_database(tmp_path, monkeypatch, two_country_csv):
    path = tmp_path / "countries.csv"
    path.write_text(two_country_csv, encoding="utf-8")
    monkeypatch.setenv("COUNTRYGEO_MAX_RING_NUMBERS", "lots")

    assert app_module.init_data(str(path)) is None
    assert len(app_module.country_db) == 0
