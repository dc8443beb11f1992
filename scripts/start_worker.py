#!/usr/bin/env python3
# =============================================================================
# scripts/start_worker.py - Celery Worker Entry Point
# =============================================================================
# Starts a Celery worker for the skin analysis and email queues.
#
# Usage:
#   # Start worker (development)
#   python scripts/start_worker.py
#
#   # Or use Celery CLI directly
#   celery -A workers.celery_app worker -Q default,analysis --loglevel=info
#
# Prerequisites:
#   - Redis must be running (REDIS_URL)
#   - Environment variables must be set (.env file)
# =============================================================================

import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from workers.celery_app import celery_app


def main():
    """Start the Celery worker."""
    print("=" * 60)
    print("SkinSense Celery Worker")
    print("=" * 60)
    print()
    print("Queues: default, analysis")
    print("Press Ctrl+C to stop")
    print()

    celery_app.worker_main([
        "worker",
        "--loglevel=info",
        "--queues=default,analysis",
        "--concurrency=2",
    ])


if __name__ == "__main__":
    main()
