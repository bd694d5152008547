"""
Pytest configuration and fixtures for statistical testing.

Provides deterministic random generators and synthetic arm statistics
for the property-based and Monte-Carlo selection tests.
"""
import pytest                                                 # Testing framework
import numpy as np                                           # Numerical operations
import sys                                                   # Import path setup
from pathlib import Path                                     # Path handling

ROOT = Path(__file__).resolve().parents[1]                   # Repository root
if str(ROOT) not in sys.path:                                # Make tsbandit importable
    sys.path.insert(0, str(ROOT))

from tsbandit.types import ArmStatistics                     # Posterior counts


# =============================================================================
# Random Seed Management
# =============================================================================

@pytest.fixture
def seeded_rng():                                           # Provide seeded RNG
    """Provide seeded RNG for Thompson draws."""            # Fixture purpose
    return np.random.default_rng(12345)                     # Return deterministic RNG


# =============================================================================
# Synthetic Arm Statistics
# =============================================================================

@pytest.fixture
def contrasting_arms():                                     # One clear winner
    """A never-interesting arm and an always-interesting arm with equal evidence."""
    return [
        ArmStatistics(interesting=0, uninteresting=100),    # Almost surely low
        ArmStatistics(interesting=100, uninteresting=0),    # Almost surely high
    ]


@pytest.fixture
def uninformed_arms():                                      # Flat priors
    """Arms with no observations (uniform posteriors)."""   # Fixture purpose
    return [ArmStatistics() for _ in range(4)]              # Four fresh arms


# =============================================================================
# Test Markers
# =============================================================================

def pytest_configure(config):                               # Configure pytest
    """Register custom markers."""                          # Function purpose
    config.addinivalue_line(                                # Add marker definition
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
