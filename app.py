import os
from typing import Dict, List, Optional

from flask import Flask, jsonify, request
from shapely.geometry import LineString, Polygon, mapping
from shapely.ops import nearest_points, unary_union
from shapely.validation import make_valid
from pyproj import Geod
from dotenv import load_dotenv

from countrygeo import (
    CountryDatabase,
    CountryEntry,
    DistanceMode,
    LoadError,
    LoaderConfig,
    country_distance,
    load_database,
    lookup_by_name,
    search_by_name,
)
from countrygeo.colors import color_hex, distance_color

load_dotenv()

# --- Configuration & Constants ---
COUNTRIES_DATA_FILE = os.environ.get('COUNTRIES_DATA_FILE', 'world-administrative-boundaries.csv')
GEOMETRY_SIMPLIFY_TOLERANCE = float(os.environ.get('GEOMETRY_SIMPLIFY_TOLERANCE', 0.05))
SEARCH_RESULT_LIMIT = int(os.environ.get('SEARCH_RESULT_LIMIT', 10))

app = Flask(__name__)

# --- Global Data Storage ---
country_db: CountryDatabase = CountryDatabase()


def init_data(filepath: str) -> Optional[CountryDatabase]:
    """Loads the country database used by every route; keeps an empty one on failure."""
    global country_db
    app.logger.info(f"Loading country database from {filepath}...")
    try:
        db = load_database(filepath, LoaderConfig.from_env())
    except (LoadError, ValueError) as e:
        app.logger.critical(f"FATAL: {e}")
        country_db = CountryDatabase()
        return None

    report = db.report
    app.logger.info(
        f"Loaded {len(db)} countries ({report.rows_skipped} rows skipped, "
        f"{report.default_centroids} default centroids, {report.degenerate_rings} degenerate rings, "
        f"{report.truncated_rings} truncated rings, "
        f"{report.decode_errors} undecodable characters)."
    )
    if len(db) < 2:
        app.logger.critical("FATAL: Fewer than 2 countries available after loading.")
    country_db = db
    return db


def country_summary(entry: CountryEntry) -> Dict:
    return {'name': entry.name, 'code': entry.alpha2, 'country_code': entry.country_code}


def country_details(entry: CountryEntry) -> Dict:
    details = country_summary(entry)
    details.update({
        'territory_code': entry.territory_code,
        'status': entry.status,
        'continent': entry.continent,
        'region': entry.region,
        'centroid': {'lat': entry.centroid.lat, 'lon': entry.centroid.lon},
        'ring_count': len(entry.boundary),
        'vertex_count': entry.vertex_count,
    })
    return details


def boundary_geometry(entry: CountryEntry):
    """Shapely geometry (lon/lat axis order) covering every ring of a country."""
    polygons = [make_valid(Polygon([(p.lon, p.lat) for p in ring.points])) for ring in entry.boundary]
    return unary_union(polygons)


def parse_mode(value: Optional[str]) -> Optional[DistanceMode]:
    if not value:
        return DistanceMode.BORDER
    try:
        return DistanceMode(value.lower())
    except ValueError:
        return None


@app.route('/countries', methods=['GET'])
def list_countries():
    query = request.args.get('q', '')
    limit = request.args.get('limit', SEARCH_RESULT_LIMIT, type=int)
    if limit is None or limit < 1:
        return jsonify({'error': 'limit must be a positive integer'}), 400
    matches: List[CountryEntry] = search_by_name(country_db, query, limit=limit)
    return jsonify({'countries': [country_summary(c) for c in matches], 'total': len(country_db)})


@app.route('/countries/<path:name>', methods=['GET'])
def get_country(name: str):
    entry = lookup_by_name(country_db, name, case_insensitive=True)
    if entry is None:
        return jsonify({'error': f"Unknown country '{name}'"}), 404
    return jsonify(country_details(entry))


@app.route('/distance', methods=['GET'])
def get_distance_route():
    from_name = request.args.get('from')
    to_name = request.args.get('to')
    if not from_name or not to_name:
        return jsonify({'error': 'Missing country parameters'}), 400

    mode = parse_mode(request.args.get('mode'))
    if mode is None:
        valid_modes = [m.value for m in DistanceMode]
        return jsonify({'error': f"Invalid mode. Allowed: {', '.join(valid_modes)}"}), 400

    from_entry = lookup_by_name(country_db, from_name)
    to_entry = lookup_by_name(country_db, to_name)
    missing = [n for n, e in ((from_name, from_entry), (to_name, to_entry)) if e is None]
    if missing:
        app.logger.warning(f"Distance requested for unknown countries: {missing}")
        return jsonify({'error': f"Unknown countries: {missing}"}), 404

    distance_km = country_distance(from_entry, to_entry, mode)
    app.logger.debug(f"Distance {from_entry.name} -> {to_entry.name} ({mode.value}): {distance_km:.1f} km")
    return jsonify({
        'from': country_summary(from_entry),
        'to': country_summary(to_entry),
        'mode': mode.value,
        'distance_km': round(distance_km, 1),
        'color': color_hex(distance_color(distance_km)),
        'same_country': from_entry is to_entry,
    })


@app.route('/get_map_data', methods=['GET'])
def get_map_data_route():
    base_c = request.args.get('base')
    guess_c = request.args.get('guess')
    if not base_c or not guess_c:
        return jsonify({"error": "Missing country parameters"}), 400

    base_entry = lookup_by_name(country_db, base_c)
    guess_entry = lookup_by_name(country_db, guess_c)
    missing = [n for n, e in ((base_c, base_entry), (guess_c, guess_entry)) if e is None or not e.boundary]
    if missing:
        app.logger.warning(f"Could not find shape data for countries: {missing}")
        return jsonify({"error": f"Could not find shape data for countries: {missing}"}), 404

    features = []
    geoms = {}
    colors = {base_entry.name: 'dodgerblue', guess_entry.name: 'orangered'}
    for entry in (base_entry, guess_entry):
        geom_orig = boundary_geometry(entry)
        geoms[entry.name] = geom_orig
        geom_simplified = geom_orig.simplify(GEOMETRY_SIMPLIFY_TOLERANCE, preserve_topology=True)
        features.append({
            "type": "Feature",
            "geometry": mapping(geom_simplified),
            "properties": {
                "name": entry.name,
                "feature_type": "country_shape",
                "color": colors.get(entry.name, 'grey')
            }
        })

    # Nearest points use the unsimplified shapes
    base_pt, guess_pt = nearest_points(geoms[base_entry.name], geoms[guess_entry.name])
    geod = Geod(ellps="WGS84")
    _, _, dist_m = geod.inv(base_pt.x, base_pt.y, guess_pt.x, guess_pt.y)

    features.append({"type": "Feature", "geometry": mapping(base_pt), "properties": {"feature_type": "point", "name": f"{base_entry.name} (near {guess_entry.name})"}})
    features.append({"type": "Feature", "geometry": mapping(guess_pt), "properties": {"feature_type": "point", "name": guess_entry.name}})
    features.append({"type": "Feature", "geometry": mapping(LineString([base_pt, guess_pt])), "properties": {"feature_type": "distance_line", "distance_km": round(dist_m / 1000.0, 1), "pair": f"{base_entry.name}-{guess_entry.name}"}})

    return jsonify({"type": "FeatureCollection", "features": features})


app.logger.info("Starting initial data loading...")
init_data(COUNTRIES_DATA_FILE)
