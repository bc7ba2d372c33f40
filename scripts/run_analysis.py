from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from trajectoryanalysis.io.files import load_detections_json
from trajectoryanalysis.output.sinks import ReportSinks
from trajectoryanalysis.pipeline.session import AnalysisSession, AnalysisSessionConfig
from trajectoryanalysis.utils.config import get_section, load_yaml, resolve_path
from trajectoryanalysis.utils.logging import setup_logging


logger = logging.getLogger("trajectoryanalysis.scripts.run_analysis")


def main() -> None:
    ap = argparse.ArgumentParser()
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--task-id", default=None, help="Task id on the detection backend")
    src.add_argument("--detections", default=None, help="JSON file with a saved detections payload")
    ap.add_argument("--config", default="configs/analysis.yaml", help="Analysis YAML")
    ap.add_argument("--ids", default=None, help="Comma separated object ids (default: first ids of the store)")
    ap.add_argument("--all-ids", action="store_true", help="Analyze every stored trajectory")
    ap.add_argument("--angle-threshold", type=float, default=None, help="Override analysis.angle_threshold_deg")
    ap.add_argument("--log-level", default="INFO")
    ap.add_argument("--log-file", default=None)
    args = ap.parse_args()

    base_dir = os.getcwd()
    setup_logging(level=args.log_level, log_file=args.log_file)

    cfg = load_yaml(resolve_path(args.config, base_dir))
    session = AnalysisSession(AnalysisSessionConfig.from_dict(cfg))
    if args.task_id is not None:
        session.load_task(args.task_id)
    else:
        session.load_payload(load_detections_json(resolve_path(args.detections, base_dir)))

    if session.store.is_empty():
        logger.warning("No trajectories to analyze")
        return

    if args.all_ids:
        session.select(session.store.ids())
    elif args.ids:
        session.select(x for x in args.ids.split(",") if x.strip())
    if args.angle_threshold is not None:
        session.set_angle_threshold(args.angle_threshold)

    results = session.analyze()
    for a in results:
        logger.info(
            "id=%s frames=%d-%d duration=%.2fs distance=%.2fpx speed=%.2fpx/frame changes=%d",
            a.object_id,
            a.first_detection_frame,
            a.last_detection_frame,
            a.duration_s,
            a.total_distance_px,
            a.average_speed_px_per_frame,
            len(a.direction_changes),
        )

    sinks = ReportSinks.from_dict(get_section(cfg, "output"), base_dir)
    sinks.open()
    try:
        n = sinks.write_all(results)
    finally:
        sinks.close()
    logger.info("Wrote %d trajectory reports", n)


if __name__ == "__main__":
    main()
