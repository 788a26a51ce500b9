"""
Pytest fixtures for harmonic_engine tests.
"""
import pytest
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def cadence_progression():
    """A short I-IV-V7-I exercise with a perfect cadence on the last chord."""
    return [
        {"degree": "I"},
        {"degree": "IV"},
        {"degree": "V", "figure": "7"},
        {"degree": "I", "cadence": "perfect"},
    ]


@pytest.fixture
def dominant_exercise():
    """Exercise chords around a V7, with three dominant-side and three other chords."""
    return [
        {"degree": "V", "figure": "7"},
        {"degree": "V"},
        {"degree": "VII", "figure": "6"},
        {"degree": "III"},
        {"degree": "IV"},
        {"degree": "II", "figure": "6"},
        {"degree": "I"},
    ]


@pytest.fixture
def config_dir(tmp_path):
    """Empty directory for YAML config tests."""
    path = tmp_path / "configs"
    path.mkdir()
    return path


@pytest.fixture
def packaged_config_dir():
    """The configs directory shipped with the package."""
    return PROJECT_ROOT / "harmonic_engine" / "configs"
