import argparse
import os
import sys
import threading

from config import load_config, save_config
from constants import CONFIG_FILE
from log_setup import get_logger, setup_logging
from monitor_app import MonitorApp

log = get_logger("main")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Sample CPU, memory, network throughput and ping latency into a sparkline strip.")
    parser.add_argument("--config", default=CONFIG_FILE, help="Path to the JSON configuration file")
    parser.add_argument("--ping-target", help="Host or IP to ping (saved to the config)")
    parser.add_argument("--headless", action="store_true", help="Run without a window")
    parser.add_argument("--image", help="Headless: rewrite this PNG after every tick")
    parser.add_argument("--ticks", type=int, default=0, help="Headless: stop after N ticks (0 runs forever)")
    parser.add_argument("--diagnose", action="store_true", help="Print a sampling diagnostic report and exit")
    return parser.parse_args(argv)


def run_headless(app, image_path=None, ticks=0):
    done = threading.Event()
    count = [0]

    def on_refresh(snapshot):
        if image_path:
            app.renderer.save(app.render(snapshot), image_path)
        count[0] += 1
        if ticks and count[0] >= ticks:
            done.set()

    app.add_refresh_listener(on_refresh)
    app.start()
    try:
        done.wait()
    except KeyboardInterrupt:
        log.info("Interrupted")
    finally:
        app.stop()
    return count[0]


def main(argv=None):
    args = parse_args(argv)
    config = load_config(args.config)
    setup_logging(config.log_level, config.log_file)

    if args.ping_target and args.ping_target.strip():
        config = config.with_target(args.ping_target.strip())
        save_config(config, args.config)

    if args.diagnose:
        from debug_core import run_diagnostics

        os.system('color' if os.name == 'nt' else '')
        result = run_diagnostics(config)
        print(result.get_colored_text())
        return 0 if result.healthy else 1

    app = MonitorApp(config)
    if args.headless:
        run_headless(app, args.image, args.ticks)
        return 0

    try:
        from gui import MonitorWindow
    except ImportError as e:
        log.error("Desktop window unavailable (%s); use --headless", e)
        return 2
    MonitorWindow(app, config_path=args.config).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
