#!/usr/bin/env python3
"""
Diagnostic script that talks to the backend the way the sensor node does.
Run this to troubleshoot node-to-backend connectivity.
"""
import sys
import time
import argparse
import logging

from kissanapp.config import PORT, NODE_MOISTURE_THRESHOLD, NODE_INTERVAL_SEC
from kissanapp.node import SensorNodeClient


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run sensor node cycles against the backend")
    parser.add_argument("--url", default=f"http://127.0.0.1:{PORT}", help="Backend base URL")
    parser.add_argument("--temperature", type=float, default=25.0)
    parser.add_argument("--humidity", type=float, default=60.0)
    parser.add_argument("--moisture", type=float, default=40.0)
    parser.add_argument("--threshold", type=float, default=NODE_MOISTURE_THRESHOLD)
    parser.add_argument("--cycles", type=int, default=1, help="Number of cycles to run")
    parser.add_argument("--interval", type=float, default=NODE_INTERVAL_SEC,
                        help="Seconds between cycles")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format='%(levelname)s - %(message)s')

    print(f"\n{'='*60}")
    print(f"Testing backend at {args.url}")
    print(f"{'='*60}\n")

    client = SensorNodeClient(args.url, threshold=args.threshold)
    results = []
    try:
        for i in range(max(1, args.cycles)):
            if i:
                time.sleep(args.interval)
            cycle = client.run_cycle(lambda: (args.temperature, args.humidity, args.moisture))

            print(f"{i + 1}. Cycle")
            if cycle.sent_status is None:
                print("   ✗ Could not reach backend")
            else:
                print(f"   Reading sent (status code: {cycle.sent_status})")
            print(f"   Pump command: {cycle.command}")
            print(f"   Relay: {'ON' if cycle.relay_on else 'OFF'}")

            results.append(cycle.sent_status == 200 and cycle.command is not None)
    except KeyboardInterrupt:
        print("\nStopped by user")
    finally:
        client.close()

    ok = bool(results) and all(results)
    print(f"\n{'='*60}")
    print("✓ Backend is working correctly." if ok else "✗ Backend check FAILED")
    print(f"{'='*60}\n")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
