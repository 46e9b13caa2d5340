import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]
DATA_DIR = Path(os.getenv("DATA_DIR", str(BASE_DIR.parent / "data")))
NODES_CSV = Path(os.getenv("NODES_CSV", str(DATA_DIR / "nodes.csv")))
EDGES_CSV = Path(os.getenv("EDGES_CSV", str(DATA_DIR / "edges.csv")))
EDGE_WEIGHT = os.getenv("EDGE_WEIGHT", "distance")
AVERAGE_SPEED_KMH = float(os.getenv("AVERAGE_SPEED_KMH", "40"))
RELEASE_POLICY = os.getenv("RELEASE_POLICY", "immediate")
SEARCH_ORIGIN = os.getenv("SEARCH_ORIGIN", "incident")
QUEUE_CAPACITY = int(os.getenv("QUEUE_CAPACITY", "0"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
