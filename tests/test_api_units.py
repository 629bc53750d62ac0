from fastapi.testclient import TestClient

from unitengine.api.app import app


client = TestClient(app)


def test_list_units_and_filter_by_compatibility():
    response = client.get("/v1/units")
    assert response.status_code == 200
    keys = [unit["key"] for unit in response.json()]
    assert "kilometer" in keys and "celsius" in keys

    response = client.get("/v1/units", params={"compatible_with": "celsius"})
    assert [unit["key"] for unit in response.json()] == ["celsius", "fahrenheit", "kelvin"]


def test_get_unit():
    response = client.get("/v1/units/minperkm")
    assert response.status_code == 200
    data = response.json()
    assert data["abbr"] == "min/km"
    assert data["terminus"] == "mps"
    assert data["better_is_min"] is True


def test_unknown_unit_is_404():
    response = client.get("/v1/units/furlong")
    assert response.status_code == 404
    assert response.json()["error"] == "UNKNOWN_UNIT"

    response = client.post("/v1/units/convert", json={"value": 1, "from_unit": "furlong", "to_unit": "meter"})
    assert response.status_code == 404


def test_match_endpoint():
    data = client.post("/v1/units/match", json={"text": " KM "}).json()
    assert data["matched"] is True
    assert data["unit"]["key"] == "kilometer"

    data = client.post("/v1/units/match", json={"text": "furlong"}).json()
    assert data["matched"] is False
    assert data["unit"]["key"] == "furlong"
    assert data["unit"]["terminus"] is None


def test_convert_endpoint():
    response = client.post("/v1/units/convert", json={"value": 10, "from_unit": "kilometer", "to_unit": "mile"})
    assert response.status_code == 200
    data = response.json()
    assert abs(data["value"] - 6.2137) < 1e-4
    assert data["text"] == "6.21 mi"


def test_convert_endpoint_non_finite_result():
    response = client.post("/v1/units/convert", json={"value": 0, "from_unit": "minperkm", "to_unit": "mps"})
    assert response.status_code == 200
    assert response.json()["value"] is None
    assert response.json()["text"] == "--"


def test_incompatible_units_are_422():
    response = client.post("/v1/units/convert", json={"value": 1, "from_unit": "meter", "to_unit": "second"})
    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "INCOMPATIBLE_UNITS"
    assert (data["source"], data["target"]) == ("meter", "second")


def test_format_endpoint():
    response = client.post("/v1/units/format", json={"value": 5.5, "unit": "foot"})
    assert response.json() == {"text": "6 ft", "components": ["5 ft", "6 in"]}

    response = client.post("/v1/units/format", json={"value": 3725, "unit": "second", "add_abbr": False})
    assert response.json()["text"] == "1:02:05"


def test_format_endpoint_uses_display_settings():
    client.put("/v1/settings", json={"unit_system": "imperial"})
    response = client.post("/v1/units/format", json={"value": 10, "unit": "kilometer", "display": True})
    assert response.json()["text"] == "6.21 mi"


def test_axis_endpoint():
    response = client.post("/v1/units/axis", json={"x_min": 3, "x_max": 97, "n_knobs": 5, "extend_to_knobs": True})
    assert response.json() == {"step": 20.0, "min": 0.0, "max": 100.0, "knobs": [0.0, 20.0, 40.0, 60.0, 80.0, 100.0]}

    response = client.post("/v1/units/axis", json={"x_min": 0, "x_max": 90, "n_knobs": 3, "unit": "minute"})
    assert response.json()["knobs"] == [0.0, 30.0, 60.0, 90.0]


def test_axis_endpoint_bounds_knob_count_and_range():
    response = client.post("/v1/units/axis", json={"x_min": 0, "x_max": 1, "n_knobs": 10**9})
    assert response.status_code == 422

    response = client.post("/v1/units/axis", json={"x_min": -1e308, "x_max": 1e308, "n_knobs": 5, "extend_to_knobs": True})
    assert response.status_code == 200
    data = response.json()
    assert 0 < len(data["knobs"]) <= 12
    assert data["min"] <= -1e308 and data["max"] >= 1e308


def test_units_parse_endpoint_returns_warnings():
    response = client.post("/v1/units/parse", json={"text": "d: km\ninvalid"})
    assert response.status_code == 200
    data = response.json()
    assert data["units"] == {"d": "kilometer"}
    assert data["warnings"]


def test_bytes_endpoint():
    assert client.get("/v1/units/bytes/1536").json() == {"bytes": 1536, "text": "1.5 KB"}


def test_settings_round_trip():
    data = client.get("/v1/settings").json()
    assert data["unit_system"] == "default"
    assert data["stride_style_descriptions"] == ["Same foot (2x)", "Between feet (1x)"]

    response = client.put("/v1/settings", json={"stride_style": "same_foot", "first_weekday": 6})
    assert response.status_code == 200
    data = response.json()
    assert data["stride_style"] == "same_foot"
    assert data["first_weekday"] == 6
    assert client.get("/v1/settings").json() == data


def test_settings_validation():
    assert client.put("/v1/settings", json={"unit_system": "cubits"}).status_code == 422
    assert client.put("/v1/settings", json={"timezone": "Nowhere/Special"}).status_code == 422
