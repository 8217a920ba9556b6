"""
tests: this package contains all Exemplar unittests
"""

from pathlib import Path

tests_datadir = str(Path(__file__).parent.resolve() / "sample_data")


def get_testdata(*paths: str) -> bytes:
    """Return test data"""
    return Path(tests_datadir, *paths).read_bytes()
