"""Test fixtures for gotoolchain tests.

- archives: Fake Go distribution archives (.tar.gz, .zip)

Import fixtures in your tests using:
    from tests.fixtures.archives import go_tar_gz, make_zip
"""

__all__ = [
    "archives",
]
