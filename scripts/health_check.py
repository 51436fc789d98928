#!/usr/bin/env python3
"""
Post-Deployment Health Check Script

This script validates that the deployed serverless function is healthy.
The first request to a cold function builds the whole pipeline, so a
successful status check also proves MongoDB and the session store are wired.

Usage:
    python scripts/health_check.py --url <DEPLOYMENT_URL> --environment <preview|production>

Checks Performed:
    1. CORS preflight (OPTIONS /api/status) returns 200 OK
    2. Status endpoint (/api/status) returns 200 OK, status "ok" and MongoDB connected

Exit Codes:
    0: All health checks passed
    1: One or more health checks failed
"""

import argparse
import sys
import time
import requests
from typing import Dict, List, Tuple


def check_preflight(url: str, endpoint: str = "/api/status", timeout: int = 10) -> Tuple[bool, str]:
    """
    Checks that a CORS preflight is answered with 200.

    Args:
        url: Base deployment URL
        endpoint: Endpoint path to check
        timeout: Request timeout in seconds

    Returns:
        Tuple[bool, str]: (success, message)
    """
    full_url = f"{url.rstrip('/')}{endpoint}"

    try:
        response = requests.options(full_url, timeout=timeout)

        if response.status_code == 200:
            return True, f"✓ OPTIONS {endpoint} returned 200"
        else:
            return False, f"✗ OPTIONS {endpoint} returned {response.status_code} (expected 200)"

    except requests.exceptions.Timeout:
        return False, f"✗ OPTIONS {endpoint} timed out after {timeout} seconds"
    except requests.exceptions.ConnectionError:
        return False, f"✗ OPTIONS {endpoint} connection failed"
    except requests.exceptions.RequestException as e:
        return False, f"✗ OPTIONS {endpoint} error: {str(e)}"


def check_status_endpoint(url: str, timeout: int = 10) -> Tuple[bool, str]:
    """
    Checks the /api/status endpoint and verifies database connectivity.

    Args:
        url: Base deployment URL
        timeout: Request timeout in seconds

    Returns:
        Tuple[bool, str]: (success, message)
    """
    full_url = f"{url.rstrip('/')}/api/status"

    try:
        response = requests.get(full_url, timeout=timeout)
    except requests.exceptions.Timeout:
        return False, f"✗ /api/status timed out after {timeout} seconds"
    except requests.exceptions.ConnectionError:
        return False, f"✗ /api/status connection failed"
    except requests.exceptions.RequestException as e:
        return False, f"✗ /api/status error: {str(e)}"

    if response.status_code != 200:
        return False, f"✗ /api/status returned {response.status_code}"

    try:
        data = response.json()
    except ValueError:
        return False, f"✗ /api/status returned invalid JSON"

    if data.get('status') != 'ok':
        return False, f"✗ /api/status reported status: {data.get('status')}"

    mongo_status = data.get('mongoConnection', 'unknown')
    if mongo_status == 'connected':
        return True, f"✓ /api/status returned 200, MongoDB connected"
    else:
        return False, f"✗ /api/status MongoDB status: {mongo_status}"


def run_health_checks(url: str, environment: str, timeout: int = 15) -> Dict[str, Tuple[bool, str]]:
    """
    Runs all health checks and returns results.

    Args:
        url: Base deployment URL
        environment: Deployment environment
        timeout: Request timeout in seconds

    Returns:
        Dict[str, Tuple[bool, str]]: Check results keyed by check name
    """
    print(f"\nHealth checks for {url} ({environment})\n")

    results = {}

    print("Check 1: CORS preflight (OPTIONS /api/status)...")
    success, message = check_preflight(url, timeout=timeout)
    results["preflight"] = (success, message)
    print(f"  {message}\n")

    # Cold starts connect to MongoDB here, hence the generous timeout
    print("Check 2: Status endpoint with database (/api/status)...")
    success, message = check_status_endpoint(url, timeout=timeout)
    results["api_status"] = (success, message)
    print(f"  {message}\n")

    return results


def failed_checks(results: Dict[str, Tuple[bool, str]]) -> List[str]:
    """Names of the checks that did not pass, in the order they ran."""
    return [name for name, (success, _) in results.items() if not success]


def report(results: Dict[str, Tuple[bool, str]], attempt: int, max_attempts: int) -> bool:
    """
    Prints one line per check for this attempt.

    Returns:
        bool: True if every check passed
    """
    failed = failed_checks(results)
    for name, (success, _) in results.items():
        print(f"{'PASS' if success else 'FAIL'}  {name}")

    if not failed:
        print(f"\n✓ Healthy on attempt {attempt}/{max_attempts}\n")
        return True

    print(f"\n✗ Attempt {attempt}/{max_attempts}: {', '.join(failed)} failed\n")
    return False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Check a deployed assessment API after a release")
    parser.add_argument("--url", required=True, help="Deployment URL to check")
    parser.add_argument("--environment", required=True, choices=["preview", "production"],
                        help="Vercel environment the deployment belongs to")
    # A cold function connects to MongoDB on its first request, so allow retries
    parser.add_argument("--retry", type=int, default=3,
                        help="Attempts before giving up (default: 3)")
    parser.add_argument("--retry-delay", type=int, default=10,
                        help="Seconds to wait between attempts (default: 10)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    for attempt in range(1, args.retry + 1):
        if attempt > 1:
            time.sleep(args.retry_delay)

        results = run_health_checks(args.url, args.environment)
        if report(results, attempt, args.retry):
            return 0

    print(f"✗ {args.url} still unhealthy after {args.retry} attempt(s)", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
