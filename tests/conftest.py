"""
Pytest configuration file.
Adds the project root to Python path so 'link_verifier' package can be imported.
"""
import sys
import os
from pathlib import Path

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Set environment variables for testing before any link_verifier imports
os.environ.setdefault('VERIFY_LINKS_REQUEST_TIMEOUT', '2')
os.environ.setdefault('VERIFY_LINKS_RETRY_ATTEMPTS', '0')
os.environ.setdefault('VERIFY_LINKS_RETRY_DELAY', '0')
os.environ.setdefault('VERIFY_LINKS_EXCLUDE_DIRS', 'vendor,glide')


@pytest.fixture
def write_doc(tmp_path):
    """Write a document under tmp_path and return its path as a string"""
    def _write(relpath, text):
        path = tmp_path / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding='utf-8')
        return str(path)
    return _write
