"""
Sampling Diagnostic Tool
Runs every sample reader once and checks the ping executable
"""

import importlib
import os
import shutil
import time
from datetime import datetime

from config import MonitorConfig
from monitor_core import SampleSource
from ping_probe import build_ping_command

RULE = "-" * 60 + "\n"


# Color codes for console output
class Colors:
    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    MAGENTA = '\033[95m'
    CYAN = '\033[96m'
    WHITE = '\033[97m'
    RESET = '\033[0m'


class DiagnosticOutput:
    """Captures diagnostic output for display"""
    def __init__(self):
        self.output = []
        self.failures = 0

    def write(self, text, color=None):
        self.output.append((text, color))
        if color == Colors.RED:
            self.failures += 1

    def section(self, title):
        self.write(f"\n[{title}]\n", Colors.MAGENTA)
        self.write(RULE, Colors.WHITE)

    @property
    def healthy(self):
        return self.failures == 0

    def get_plain_text(self):
        return ''.join(text for text, _ in self.output)

    def get_colored_text(self):
        result = []
        for text, color in self.output:
            result.append(f"{color}{text}{Colors.RESET}" if color else text)
        return ''.join(result)


def _check_modules(output):
    for module, required in (("psutil", True), ("PIL", True), ("ttkbootstrap", False)):
        try:
            importlib.import_module(module)
            output.write(f"✓ {module:<20} [AVAILABLE]\n", Colors.GREEN)
        except ImportError:
            if required:
                output.write(f"✗ {module:<20} [MISSING - CRITICAL]\n", Colors.RED)
            else:
                output.write(f"⚠ {module:<20} [MISSING - OPTIONAL, no desktop window]\n", Colors.YELLOW)


def run_diagnostics(config=None, source=None, which=shutil.which, settle=0.2):
    """Run all diagnostic checks and return the captured output"""
    config = config or MonitorConfig()
    source = source or SampleSource()
    output = DiagnosticOutput()

    output.write("=" * 60 + "\n", Colors.CYAN)
    output.write("SAMPLING DIAGNOSTIC\n", Colors.CYAN)
    output.write(f"{datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n", Colors.CYAN)
    output.write("=" * 60 + "\n", Colors.CYAN)

    output.section("MODULE DEPENDENCIES")
    _check_modules(output)

    output.section("CPU")
    source.read_cpu_usage()  # baseline
    time.sleep(settle)
    usage = source.read_cpu_usage()
    output.write(f"✓ CPU Usage: {usage:.1f}%\n", Colors.GREEN if usage > 0 else Colors.YELLOW)

    output.section("MEMORY")
    mem = source.read_memory_usage()
    if mem > 0:
        output.write(f"✓ Memory Usage: {mem:.1f}%\n", Colors.GREEN)
    else:
        output.write("✗ Memory Usage: Not Available\n", Colors.RED)

    output.section("NETWORK")
    counters = source.read_network_counters()
    if counters is not None:
        tx, rx = counters
        unit = config.bytes_per_unit
        output.write(f"✓ Counters: Tx {tx / unit:.0f} / Rx {rx / unit:.0f} units since boot\n", Colors.GREEN)
    else:
        output.write("✗ Network counters: Not Available\n", Colors.RED)

    output.section("PING")
    command = build_ping_command(config.ping_target, config.interval)
    if which(command[0]):
        output.write(f"✓ Probe command: {' '.join(command)}\n", Colors.GREEN)
    else:
        output.write(f"✗ '{command[0]}' not found on PATH, latency column stays flat\n", Colors.RED)

    output.write("\n" + "=" * 60 + "\n", Colors.CYAN)
    status = "DIAGNOSTIC COMPLETE" if output.healthy else f"DIAGNOSTIC COMPLETE - {output.failures} PROBLEM(S)"
    output.write(status + "\n", Colors.CYAN)
    output.write("=" * 60 + "\n", Colors.CYAN)
    return output


if __name__ == "__main__":
    # When run standalone, print colored output to console
    os.system('color' if os.name == 'nt' else '')
    print(run_diagnostics().get_colored_text())
