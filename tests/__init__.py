"""Test configuration and utilities for the Token SDK."""

import logging
import sys
from pathlib import Path

# Add the src directory to the path so we can import the SDK modules
test_dir = Path(__file__).parent
project_dir = test_dir.parent
src_dir = project_dir / "src"
sys.path.insert(0, str(src_dir))

# Configure logging for tests
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

# Suppress noisy logs during testing
logging.getLogger('aiohttp').setLevel(logging.WARNING)
logging.getLogger('asyncio').setLevel(logging.WARNING)

# Test configuration
TEST_CONFIG = {
    'dev_key': 'test-dev-key',
    'timeout': 5.0,
    'max_retries': 2,
    'retry_delay': 0.01,
}

# Member ids for consistent testing
TEST_MEMBERS = {
    'payer': 'm:payer000000000000000:5zKtXEAq',
    'payee': 'm:payee000000000000000:5zKtXEAq',
    'token': 'm:token000000000000000:5zKtXEAq',
}
