# --- History ---
MAX_POINTS = 30
REFRESH_MS = 1000
REFRESH_GUI_MS = 250

# --- Units ---
BYTES_PER_UNIT = 1024  # 1 KiB
UNIT_LABEL = "KiB/s"

# --- Thresholds for the complementary (inverted) color ---
THRESHOLD_COMPUTING = 80   # % or more
THRESHOLD_NETWORK = 1      # units/s or less
THRESHOLD_PING_MS = 100    # ms or more

# --- Graph Y-axis floors ---
GRAPH_MAX_NETWORK = 1024   # 1 MiB/s in KiB/s
GRAPH_MAX_PING_MS = 200

# --- Ping ---
PING_HOST = "1.1.1.1"
PING_INTERVAL = 1.0
TIMEOUT_SENTINEL = 9999.0
PROBE_RESTART_DELAY = 5.0

# --- Sparkline geometry ---
COLUMN_WIDTH = 24
GRAPH_HEIGHT = 22
FONT_SIZE = 8
LINE_WIDTH = 1
FILL_ALPHA = 0.3

# Color schemes
CRT_GREEN = "#00FF66"
CRT_LABEL = "#FFFFFF"

# --- Config ---
CONFIG_FILE = "monitor_config.json"

DEFAULT_CONFIG = {
    "history_length": MAX_POINTS,
    "interval": REFRESH_MS / 1000.0,
    "bytes_per_unit": float(BYTES_PER_UNIT),
    "threshold_computing": float(THRESHOLD_COMPUTING),
    "threshold_network": float(THRESHOLD_NETWORK),
    "threshold_ping_ms": float(THRESHOLD_PING_MS),
    "graph_max_network": float(GRAPH_MAX_NETWORK),
    "graph_max_ping_ms": float(GRAPH_MAX_PING_MS),
    "ping_target": PING_HOST,
    "column_width": COLUMN_WIDTH,
    "graph_height": GRAPH_HEIGHT,
    "font_size": FONT_SIZE,
    "accent_color": CRT_GREEN,
    "log_level": "INFO",
    "log_file": None,
}
