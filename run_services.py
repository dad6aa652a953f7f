#!/usr/bin/env python3
"""
Pipeline and Service Runner
Runs the offline patents pipeline stages and starts the classification service
"""

import argparse
import sys

import uvicorn

from config.logging_config import setup_logging
from config.settings import RAW_PATENTS_PATH, SAMPLE_SIZE, SERVICE_HOST, SERVICE_PORT

logger = setup_logging("run_services")

# Offline stages in execution order
STAGES = [
    {
        "name": "preprocess",
        "module": "offline.patents.preprocess_patents",
        "description": "Sample, split and normalize raw patent titles"
    },
    {
        "name": "tfidf",
        "module": "offline.patents.train_tfidf_patents",
        "description": "Fit TF-IDF on train, project test"
    },
    {
        "name": "train",
        "module": "offline.patents.train_tree_patents",
        "description": "Cross-validated decision tree training"
    },
    {
        "name": "evaluate",
        "module": "offline.patents.eval_tree_patents",
        "description": "Held-out predictions and confusion matrix"
    }
]

def run_pipeline(data_dir=None, raw_path=RAW_PATENTS_PATH, sample_size=SAMPLE_SIZE, stages=None):
    """Run the selected offline stages (all by default)"""
    from offline.patents import eval_tree_patents, preprocess_patents, train_tfidf_patents, train_tree_patents

    runners = {
        "preprocess": lambda: preprocess_patents.main(raw_path, data_dir, sample_size),
        "tfidf": lambda: train_tfidf_patents.main(data_dir),
        "train": lambda: train_tree_patents.main(data_dir),
        "evaluate": lambda: eval_tree_patents.main(data_dir),
    }
    selected = stages or [stage["name"] for stage in STAGES]

    for stage in STAGES:
        if stage["name"] not in selected:
            continue
        logger.info(f"Running stage '{stage['name']}': {stage['description']}")
        try:
            runners[stage["name"]]()
        except Exception as e:
            logger.error(f"Stage '{stage['name']}' failed: {e}")
            raise

def serve(data_dir=None, host=SERVICE_HOST, port=SERVICE_PORT):
    """Load artifacts and serve the classification API"""
    from services.classification_service import main as classification_service

    classification_service.load_artifacts(data_dir)
    logger.info(f"Starting Fintech Classification Service on http://{host}:{port}")
    uvicorn.run(classification_service.app, host=host, port=port)

def main(argv=None):
    parser = argparse.ArgumentParser(description="Patent fintech classifier")
    parser.add_argument("--data-dir", default=None)
    subparsers = parser.add_subparsers(dest="command", required=True)

    pipeline_parser = subparsers.add_parser("pipeline", help="Run offline stages")
    pipeline_parser.add_argument("--raw", default=RAW_PATENTS_PATH)
    pipeline_parser.add_argument("--sample-size", type=int, default=SAMPLE_SIZE)
    pipeline_parser.add_argument("--stages", nargs="+", choices=[s["name"] for s in STAGES])

    serve_parser = subparsers.add_parser("serve", help="Start the classification service")
    serve_parser.add_argument("--host", default=SERVICE_HOST)
    serve_parser.add_argument("--port", type=int, default=SERVICE_PORT)

    args = parser.parse_args(argv)
    if args.command == "pipeline":
        run_pipeline(args.data_dir, args.raw, args.sample_size, args.stages)
    else:
        serve(args.data_dir, args.host, args.port)

if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Stopped by user")
        sys.exit(0)
