"""
FlapEvo Server  –  Flask + Server-Sent Events
=============================================

Endpoints:
  POST /start        Start (or restart) simulation with JSON config body
  POST /reset        Restart the current simulation at generation 1, keeping the best brain
  POST /stop         Stop the running simulation
  GET  /stream       SSE stream – browser subscribes here for live data
  GET  /status       Current sim state as JSON

Run:
  python server.py
  # → http://localhost:5000
"""

import threading
import queue
import json
import sys
import os

from flask import Flask, Response, request, jsonify

# Make sure the flat modules are importable from this folder
sys.path.insert(0, os.path.dirname(__file__))

from simulation import Simulation
from genetic_algorithm import ELITISM_MODES
from config import (
    POPULATION, MAX_GENERATIONS, MUTATION_RATE, HIDDEN_NODES,
    ELITISM_MODE, SPEED, MAX_FRAMES_PER_EPISODE,
)

# ──────────────────────────────────────────────────────────────────────────────
app = Flask(__name__)

# Global simulation state
_sim_thread:  threading.Thread | None = None
_sim:         Simulation | None = None
_gen_queue    = queue.Queue(maxsize=200)   # holds dicts to stream
_sim_status   = {
    "running":    False,
    "generation": 0,
    "bestScore":  0,
    "max_gen":    0,
    "cfg":        {},
}
_status_lock  = threading.Lock()


# ──────────────────────────────────────────────────────────────────────────────
# CORS helper – allow a browser front end on any origin to call us
# ──────────────────────────────────────────────────────────────────────────────

@app.after_request
def add_cors(response):
    response.headers["Access-Control-Allow-Origin"]  = "*"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    return response

@app.route("/", methods=["OPTIONS"])
@app.route("/<path:p>", methods=["OPTIONS"])
def preflight(p=""):
    return Response(status=200)


# ──────────────────────────────────────────────────────────────────────────────
# Simulation thread
# ──────────────────────────────────────────────────────────────────────────────

def _build_cfg(data: dict) -> dict:
    """Merge request JSON with defaults. Raises ValueError on bad values."""
    if not isinstance(data, dict):
        raise ValueError("config body must be a JSON object")
    cfg = {
        "population":     int(data.get("population",     POPULATION)),
        "max_generations":int(data.get("maxGenerations", MAX_GENERATIONS)),
        "mutation_rate":  float(data.get("mutationRate", MUTATION_RATE)),
        "hidden_nodes":   int(data.get("hiddenNodes",    HIDDEN_NODES)),
        "elitism":        str(data.get("elitism",        ELITISM_MODE)),
        "speed":          int(data.get("speed",          SPEED)),
        "max_frames":     int(data.get("maxFrames",      MAX_FRAMES_PER_EPISODE)),
        "seed":           data.get("seed"),
    }
    if cfg["population"] < 1:
        raise ValueError("population must be at least 1")
    if cfg["hidden_nodes"] < 1:
        raise ValueError("hiddenNodes must be at least 1")
    if not 0.0 <= cfg["mutation_rate"] <= 1.0:
        raise ValueError("mutationRate must lie in [0, 1]")
    if cfg["elitism"] not in ELITISM_MODES:
        raise ValueError(f"elitism must be one of {ELITISM_MODES}")
    if cfg["speed"] < 1:
        raise ValueError("speed must be at least 1")
    if cfg["seed"] is not None:
        cfg["seed"] = int(cfg["seed"])
    return cfg


def _generation_payload(gen_idx, stats, world, birds, ga, max_gen) -> dict:
    """Compact per-generation message for the browser."""
    champion = None
    if ga.best_brain is not None:
        champion = {
            name: [[round(v, 4) for v in row] for row in m.to_list()]
            for name, m in ga.best_brain.layers().items()
        }
    return {
        "type":         "generation",
        "gen":          gen_idx,
        "maxGen":       max_gen,
        "population":   stats["population"],
        "bestScore":    stats["best_score"],
        "bestEver":     stats["best_ever"],
        "meanScore":    round(stats["mean_score"], 3),
        "meanDistance": round(stats["mean_distance"], 1),
        "frames":       stats["frames"],
        "diversity":    round(stats["diversity"], 4),
        "scores":       [b.score for b in birds],
        "champion":     champion,
    }


def _update_status(owner_q: queue.Queue, **fields) -> bool:
    """
    Write status fields on behalf of the run that streams into owner_q.
    A worker left over from a previous run no longer owns the live queue,
    so its late updates are dropped.
    """
    with _status_lock:
        if owner_q is not _gen_queue:
            return False
        _sim_status.update(fields)
        return True


def _sim_worker(sim: Simulation, cfg: dict, out_q: queue.Queue):
    """Run the simulation in a background thread; push each generation into the queue."""
    last_gen = 0

    def on_gen(gen_idx, stats, world, birds, ga):
        nonlocal last_gen
        last_gen = gen_idx
        payload = _generation_payload(gen_idx, stats, world, birds, ga,
                                      cfg["max_generations"])
        _update_status(out_q, generation=gen_idx, bestScore=stats["best_ever"])

        # Non-blocking put; drop oldest frame if queue full
        if out_q.full():
            try:
                out_q.get_nowait()
            except queue.Empty:
                pass
        out_q.put(payload)

    sim.on_gen_callback = on_gen
    _update_status(out_q, running=True)

    try:
        sim.run()
    finally:
        _update_status(out_q, running=False)
        out_q.put({"type": "done", "gen": last_gen})


def _halt_current():
    """Ask the running simulation to stop and give its thread a moment to exit."""
    if _sim is not None:
        _sim.stop()
    if _sim_thread and _sim_thread.is_alive():
        _sim_thread.join(timeout=3)


def _launch(cfg: dict):
    """Open a fresh stream queue and run _sim on a new daemon thread."""
    global _sim_thread, _gen_queue

    with _status_lock:
        _gen_queue = queue.Queue(maxsize=200)
        _sim_status["generation"] = 0
        _sim_status["bestScore"]  = _sim.ga.best_score
        _sim_status["running"]    = False
        _sim_status["cfg"]        = cfg
        _sim_status["max_gen"]    = cfg["max_generations"]
        out_q = _gen_queue

    _sim_thread = threading.Thread(
        target=_sim_worker,
        args=(_sim, cfg, out_q),
        daemon=True,
    )
    _sim_thread.start()


# ──────────────────────────────────────────────────────────────────────────────
# Routes
# ──────────────────────────────────────────────────────────────────────────────

@app.route("/start", methods=["POST"])
def start():
    global _sim

    try:
        cfg = _build_cfg(request.get_json(force=True, silent=True) or {})
    except (TypeError, ValueError) as e:
        return jsonify({"status": "error", "error": str(e)}), 400

    _halt_current()

    _sim = Simulation(
        population      = cfg["population"],
        max_generations = cfg["max_generations"],
        mutation_rate   = cfg["mutation_rate"],
        hidden_nodes    = cfg["hidden_nodes"],
        speed           = cfg["speed"],
        max_frames      = cfg["max_frames"],
        elitism         = cfg["elitism"],
        seed            = cfg["seed"],
        verbose         = False,
    )
    _launch(cfg)
    return jsonify({"status": "started", "cfg": cfg})


@app.route("/reset", methods=["POST"])
def reset():
    """
    Restart the current simulation from generation 1 with fresh birds.
    The best-ever brain and score survive the reset.
    """
    if _sim is None:
        return jsonify({"status": "idle"})

    _halt_current()
    if _sim_thread and _sim_thread.is_alive():
        return jsonify({"status": "error",
                        "error": "simulation is still stopping"}), 409
    _sim.reset()
    body = {"status": "reset", "generation": _sim.generation,
            "bestEver": _sim.ga.best_score}
    with _status_lock:
        cfg = dict(_sim_status["cfg"])
    _launch(cfg)
    return jsonify(body)


@app.route("/stop", methods=["POST"])
def stop():
    if _sim is not None:
        _sim.stop()
    return jsonify({"status": "stopped"})


@app.route("/status", methods=["GET"])
def status():
    with _status_lock:
        return jsonify(dict(_sim_status))


@app.route("/stream", methods=["GET"])
def stream():
    """SSE endpoint – browser subscribes and receives each generation as an event."""
    q = _gen_queue

    def event_gen():
        # Send a hello so the browser knows it's connected
        yield "data: {\"type\": \"connected\"}\n\n"

        while True:
            try:
                payload = q.get(timeout=1)
                yield f"data: {json.dumps(payload)}\n\n"
                if payload.get("type") == "done":
                    break
            except queue.Empty:
                # Keep-alive ping
                yield "data: {\"type\": \"ping\"}\n\n"

    return Response(
        event_gen(),
        mimetype="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",    # disable nginx buffering if behind proxy
        },
    )


# ──────────────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    print("=" * 50)
    print("  FlapEvo Server  →  http://localhost:5000")
    print("  SSE stream      →  http://localhost:5000/stream")
    print("=" * 50)
    app.run(host="0.0.0.0", port=5000, threaded=True, debug=False)
