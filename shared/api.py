"""
HTTP and websocket API for the player.
Acts as the bridge between the player core and the browser UI: every
route maps onto one controller operation, and every state change is pushed
to connected clients as a ``player_state`` event.
"""

import logging
import os
from typing import Any, Dict, Optional

from flask import Flask, request, jsonify, send_from_directory
from flask_socketio import SocketIO, emit
from flask_cors import CORS

from shared.config import load_player_config
from shared.constants import DEFAULT_API_PORT, DEFAULT_WAVE_WIDTH, DEFAULT_WAVE_HEIGHT
from shared.models import format_time
from player.runtime import PlayerRuntime

logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)
socketio = SocketIO(app, cors_allowed_origins="*")

# Path to the bundled demo songs (see `python -m setup_tool generate-songs`)
SONGS_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'public', 'songs')

# Global instances
player_runtime: Optional[PlayerRuntime] = None


def get_core() -> PlayerRuntime:
    global player_runtime
    if player_runtime is None:
        logger.info("API: Initializing player runtime...")
        player_runtime = PlayerRuntime(config=load_player_config()).start()
        player_runtime.add_state_listener(broadcast_state)
    return player_runtime


def broadcast_state(snapshot: Dict[str, Any]) -> None:
    socketio.emit('player_state', snapshot)


def _controller():
    return get_core().controller


def _track_payload(track) -> Dict[str, Any]:
    controller = _controller()
    data = track.to_dict()
    data['is_favourite'] = controller.favourites.is_favourite(track.id)
    data['is_current'] = track.id == controller.session.track_id
    data['duration_label'] = format_time(track.duration) if track.duration else '--:--'
    return data


def _state() -> Dict[str, Any]:
    return get_core().call(_controller().snapshot)


@socketio.on('connect')
def on_connect():
    emit('player_state', _state())


@app.route('/songs/<path:path>')
def serve_demo_song(path):
    return send_from_directory(SONGS_PATH, path)


@app.route('/api/health')
def health_check():
    return jsonify({"status": "ok"})


# --- Catalog Endpoints ---

@app.route('/api/catalog', methods=['GET'])
def get_catalog():
    runtime = get_core()

    def collect():
        catalog = runtime.controller.catalog
        return {
            "loading": catalog.loading,
            "count": len(catalog),
            "tracks": [_track_payload(t) for t in catalog.tracks],
        }

    return jsonify(runtime.call(collect))


@app.route('/api/catalog/reload', methods=['POST'])
def reload_catalog():
    runtime = get_core()
    catalog = runtime.call(runtime.controller.refresh_catalog)
    return jsonify({"status": "reloaded", "count": len(catalog)})


# --- Playback Endpoints ---

@app.route('/api/state', methods=['GET'])
def get_state():
    return jsonify(_state())


@app.route('/api/playback/select', methods=['POST'])
def select_track():
    data = request.get_json(silent=True) or {}
    track_id = data.get('track_id')
    if not track_id:
        return jsonify({"error": "No track_id provided"}), 400

    runtime = get_core()
    track = runtime.call(runtime.controller.select_by_id, track_id, bool(data.get('autoplay', True)))
    if track is None:
        return jsonify({"error": f"Unknown track: {track_id}"}), 404
    return jsonify(_state())


@app.route('/api/playback/play', methods=['POST'])
def play():
    runtime = get_core()
    ok = runtime.call(runtime.controller.play)
    state = _state()
    state['accepted'] = ok
    return jsonify(state)


@app.route('/api/playback/pause', methods=['POST'])
def pause():
    runtime = get_core()
    runtime.call(runtime.controller.pause)
    return jsonify(_state())


@app.route('/api/playback/toggle', methods=['POST'])
def toggle():
    runtime = get_core()
    runtime.call(runtime.controller.toggle)
    return jsonify(_state())


@app.route('/api/playback/seek', methods=['POST'])
def seek():
    data = request.get_json(silent=True) or {}
    try:
        position = float(data['position'])
    except (KeyError, TypeError, ValueError):
        return jsonify({"error": "position (seconds) required"}), 400

    runtime = get_core()
    runtime.call(runtime.controller.seek, position)
    return jsonify(_state())


@app.route('/api/playback/skip', methods=['POST'])
def skip():
    data = request.get_json(silent=True) or {}
    direction = data.get('direction', 'next')
    if direction not in ('next', 'prev'):
        return jsonify({"error": "direction must be 'next' or 'prev'"}), 400

    runtime = get_core()
    runtime.call(runtime.controller.skip, direction)
    return jsonify(_state())


@app.route('/api/waveform', methods=['GET'])
def get_waveform():
    try:
        width = float(request.args.get('width', DEFAULT_WAVE_WIDTH))
        height = float(request.args.get('height', DEFAULT_WAVE_HEIGHT))
        runtime = get_core()
        path = runtime.call(runtime.waveform, width, height)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(path.to_dict())


# --- Search Endpoints ---

@app.route('/api/search', methods=['GET', 'POST'])
def search():
    if request.method == 'POST':
        query = (request.get_json(silent=True) or {}).get('q', '')
    else:
        query = request.args.get('q', '')

    runtime = get_core()

    def apply():
        return [_track_payload(t) for t in runtime.controller.set_query(query)]

    return jsonify({"query": query, "tracks": runtime.call(apply)})


# --- Favourites Endpoints ---

@app.route('/api/library/favourites', methods=['GET'])
def get_favourites():
    runtime = get_core()

    def collect():
        return [_track_payload(t) for t in runtime.controller.favourite_tracks()]

    return jsonify(runtime.call(collect))


@app.route('/api/library/favourites/toggle', methods=['POST'])
def toggle_favourite():
    data = request.get_json(silent=True) or {}
    track_id = data.get('track_id')
    if not track_id:
        return jsonify({"error": "No track_id provided"}), 400

    runtime = get_core()
    is_fav = runtime.call(runtime.controller.toggle_favourite, track_id)
    return jsonify({"status": "success", "is_favourite": is_fav})


# --- Server Management ---

def start_api(port=DEFAULT_API_PORT, host='0.0.0.0', debug=False):
    logger.info(f"API: Starting player on {host}:{port}")
    runtime = get_core()
    try:
        socketio.run(app, host=host, port=port, debug=debug, allow_unsafe_werkzeug=True)
    finally:
        runtime.stop()


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    start_api()
