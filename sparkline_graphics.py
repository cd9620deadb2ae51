from PIL import Image, ImageDraw, ImageFont

from color_policy import Emphasis, color_scheme, hex_to_rgb
from constants import CRT_LABEL, LINE_WIDTH
from history_store import Channel

# Column order left to right; the network column stacks Tx over Rx
COLUMNS = (
    ("CPU", (Channel.CPU,)),
    ("Mem", (Channel.MEMORY,)),
    ("Tx/Rx", (Channel.TX, Channel.RX)),
    ("Ping", (Channel.PING,)),
)


# This class encapsulates all drawing logic for the sparkline strip.
class SparklineRenderer:
    def __init__(self, config):
        self.config = config
        self.column_width = config.column_width
        self.height = config.graph_height
        self.width = self.column_width * len(COLUMNS)
        self.font = ImageFont.load_default(size=config.font_size)
        self.label_color = hex_to_rgb(CRT_LABEL) + (255,)

    def _max_value(self, channel, series):
        if channel in (Channel.CPU, Channel.MEMORY):
            return 100.0
        peak = max(series) if series else 0.0
        if channel is Channel.PING:
            return max(peak, self.config.graph_max_ping_ms)
        return max(peak, self.config.graph_max_network)

    def _get_points(self, series, box, max_value):
        """Line points for a series inside box=(left, top, right, bottom)."""
        left, top, right, bottom = box
        if not series:
            return []
        step = (right - left) / len(series)
        scale = (bottom - top) / max(1e-6, max_value)
        points = []
        for i, val in enumerate(series):
            y = bottom - min(max(val, 0.0), max_value) * scale
            points.append((left + i * step, y))
        return points

    def draw_filled_line(self, draw, series, box, max_value, emphasis):
        left, _top, right, bottom = box
        points = self._get_points(series, box, max_value)
        if not points:
            return
        fill, line = color_scheme(emphasis, self.config.accent_color)
        # Close the area along the baseline
        polygon = [(left, bottom)] + points + [(right, bottom)]
        draw.polygon(polygon, fill=fill)
        draw.line(points, fill=line + (255,), width=LINE_WIDTH)

    def draw_centered_text(self, draw, text, box):
        left, top, right, bottom = box
        bbox = draw.textbbox((0, 0), text, font=self.font)
        text_w, text_h = bbox[2] - bbox[0], bbox[3] - bbox[1]
        x = left + (right - left - text_w) / 2 - bbox[0]
        y = top + (bottom - top - text_h) / 2 - bbox[1]
        draw.text((x, y), text, fill=self.label_color, font=self.font)

    def render(self, snapshots, emphases=None):
        """Draw every column from a store snapshot into a new RGBA image."""
        emphases = emphases or {}
        image = Image.new("RGBA", (self.width, self.height), (0, 0, 0, 0))
        draw = ImageDraw.Draw(image, "RGBA")

        for index, (label, channels) in enumerate(COLUMNS):
            left = index * self.column_width
            right = left + self.column_width
            rows = len(channels)
            row_height = self.height / rows
            for row, channel in enumerate(channels):
                box = (left, row * row_height, right, (row + 1) * row_height)
                series = snapshots.get(channel, ())
                emphasis = emphases.get(channel, Emphasis.NORMAL)
                self.draw_filled_line(draw, series, box, self._max_value(channel, series), emphasis)
                if rows > 1:
                    self.draw_centered_text(draw, channel.value, box)
            if rows == 1:
                self.draw_centered_text(draw, label, (left, 0, right, self.height))
        return image

    @staticmethod
    def save(image, path):
        image.save(path, format="PNG")
