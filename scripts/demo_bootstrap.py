import argparse
import os
import sys

from actionhub.bootstrap import example_init, run_init
from actionhub.core import log
from actionhub.core.metrics import force_emit, start_exporter, stop_exporter
from actionhub.core.registry import ActionRegistry
from actionhub.wire_config import build_from_yaml


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Run the example action wiring once")
    ap.add_argument("--config", help="YAML wiring file (default: built-in example init)")
    args = ap.parse_args(argv)

    log.setup()
    start_exporter(interval_sec=float(os.getenv("METRICS_INTERVAL", "5")),
                   json_mode=(os.getenv("LOG_JSON", "0") == "1"))
    try:
        registry = ActionRegistry()
        registry.activate()
        if args.config:
            ok = run_init(registry, lambda reg: all(build_from_yaml(args.config, reg)[1]))
        else:
            ok = run_init(registry, example_init)
        force_emit()
    finally:
        stop_exporter()
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
