#!/usr/bin/env python3
"""
Validation script for the snaplink service.
Tests the live running service to ensure all functionality works correctly.
"""

import sys
import time
import requests
from typing import Optional
from datetime import datetime


class ServiceValidator:
    """Validates snaplink service functionality."""

    def __init__(self, base_url: str = "http://localhost:3001"):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.test_results = []

    def print_header(self, text: str):
        """Print a formatted header."""
        print(f"\n{'='*60}")
        print(f"  {text}")
        print(f"{'='*60}\n")

    def print_test(self, name: str, passed: bool, details: str = ""):
        """Print test result."""
        status = "PASS" if passed else "FAIL"
        self.test_results.append((name, passed))
        print(f"{status} - {name}")
        if details:
            print(f"       {details}")

    def test_health_check(self) -> bool:
        """Test health check endpoint."""
        try:
            response = self.session.get(f"{self.base_url}/api/health", timeout=5)
            if response.status_code == 200:
                data = response.json()
                is_healthy = data.get("status") == "healthy"
                details = (
                    f"Total: {data.get('totalUrls')}, Active: {data.get('activeUrls')}, "
                    f"Expired: {data.get('expiredUrls')}"
                )
                self.print_test("Health Check", is_healthy, details)
                return is_healthy
            self.print_test("Health Check", False, f"Status: {response.status_code}")
            return False
        except requests.RequestException as e:
            self.print_test("Health Check", False, f"Error: {str(e)}")
            return False

    def test_create_short_url(self) -> Optional[str]:
        """Test creating a short URL."""
        try:
            test_url = f"https://example.com/test/{int(time.time())}"
            response = self.session.post(
                f"{self.base_url}/api/shorten",
                json={"longUrl": test_url},
                timeout=5
            )

            if response.status_code == 200:
                data = response.json()
                short_id = data.get("shortId")
                if short_id:
                    has_qr = bool(data.get("qrCode"))
                    self.print_test("Create Short URL", True, f"Id: {short_id}, QR code: {has_qr}")
                    return short_id

            self.print_test("Create Short URL", False, f"Status: {response.status_code}")
            return None
        except requests.RequestException as e:
            self.print_test("Create Short URL", False, f"Error: {str(e)}")
            return None

    def test_get_stats(self, short_id: str, expected_count: int) -> bool:
        """Test the stats endpoint."""
        try:
            response = self.session.get(f"{self.base_url}/api/stats/{short_id}", timeout=5)

            if response.status_code == 200:
                data = response.json()
                count_matches = data.get("accessCount") == expected_count
                details = f"Access count: {data.get('accessCount')} (expected {expected_count})"
                self.print_test("Get URL Stats", count_matches, details)
                return count_matches
            self.print_test("Get URL Stats", False, f"Status: {response.status_code}")
            return False
        except requests.RequestException as e:
            self.print_test("Get URL Stats", False, f"Error: {str(e)}")
            return False

    def test_redirect(self, short_id: str) -> bool:
        """Test URL redirect functionality."""
        try:
            response = self.session.get(
                f"{self.base_url}/{short_id}",
                allow_redirects=False,
                timeout=5
            )

            is_redirect = response.status_code == 302
            location = response.headers.get("Location", "")
            self.print_test(
                "URL Redirect",
                is_redirect,
                f"Redirects to: {location[:50]}" if location else "No Location header"
            )
            return is_redirect
        except requests.RequestException as e:
            self.print_test("URL Redirect", False, f"Error: {str(e)}")
            return False

    def test_duplicate_custom_slug(self) -> bool:
        """Test duplicate custom slug rejection."""
        try:
            slug = f"validate{int(time.time())}"
            first = self.session.post(
                f"{self.base_url}/api/shorten",
                json={"longUrl": f"https://example.com/first/{slug}", "customSlug": slug},
                timeout=5
            )
            second = self.session.post(
                f"{self.base_url}/api/shorten",
                json={"longUrl": f"https://example.com/second/{slug}", "customSlug": slug},
                timeout=5
            )

            is_conflict = first.status_code == 200 and second.status_code == 409
            self.print_test(
                "Duplicate Slug Rejection",
                is_conflict,
                f"Status: {first.status_code}, {second.status_code} (expected 200, 409)"
            )
            return is_conflict
        except requests.RequestException as e:
            self.print_test("Duplicate Slug Rejection", False, f"Error: {str(e)}")
            return False

    def test_invalid_url(self) -> bool:
        """Test invalid URL rejection."""
        try:
            response = self.session.post(
                f"{self.base_url}/api/shorten",
                json={"longUrl": "not-a-valid-url"},
                timeout=5
            )

            is_rejected = response.status_code == 400
            self.print_test(
                "Invalid URL Rejection",
                is_rejected,
                f"Status: {response.status_code} (expected 400)"
            )
            return is_rejected
        except requests.RequestException as e:
            self.print_test("Invalid URL Rejection", False, f"Error: {str(e)}")
            return False

    def test_nonexistent_id(self) -> bool:
        """Test accessing a non-existent short id."""
        try:
            response = self.session.get(f"{self.base_url}/api/stats/nonexistent999", timeout=5)

            is_not_found = response.status_code == 404
            self.print_test(
                "Non-existent Id",
                is_not_found,
                f"Status: {response.status_code} (expected 404)"
            )
            return is_not_found
        except requests.RequestException as e:
            self.print_test("Non-existent Id", False, f"Error: {str(e)}")
            return False

    def run_all_tests(self) -> bool:
        """Run all validation tests."""
        self.print_header("snaplink Service Validation")
        print(f"Testing service at: {self.base_url}")
        print(f"Timestamp: {datetime.now().isoformat()}\n")

        if not self.test_health_check():
            print("\nHealth check failed. Service may not be running.")
            print(f"   Make sure the service is accessible at {self.base_url}")
            return False

        print()

        short_id = self.test_create_short_url()
        if short_id:
            self.test_get_stats(short_id, expected_count=0)
            self.test_redirect(short_id)
            self.test_get_stats(short_id, expected_count=1)

        print()

        self.test_duplicate_custom_slug()
        self.test_invalid_url()
        self.test_nonexistent_id()

        self.print_summary()

        return all(passed for _, passed in self.test_results)

    def print_summary(self):
        """Print test summary."""
        total = len(self.test_results)
        passed = sum(1 for _, p in self.test_results if p)
        failed = total - passed

        self.print_header("Test Summary")
        print(f"Total Tests:  {total}")
        print(f"Passed:       {passed}")
        print(f"Failed:       {failed}")
        print(f"Success Rate: {(passed/total*100):.1f}%")

        if failed > 0:
            print("\nFailed tests:")
            for name, passed in self.test_results:
                if not passed:
                    print(f"   - {name}")

        print()


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Validate snaplink service functionality"
    )
    parser.add_argument(
        "--url",
        default="http://localhost:3001",
        help="Base URL of the service (default: http://localhost:3001)"
    )

    args = parser.parse_args()

    validator = ServiceValidator(args.url)

    try:
        success = validator.run_all_tests()
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        print("\n\nValidation interrupted by user")
        sys.exit(2)


if __name__ == "__main__":
    main()
